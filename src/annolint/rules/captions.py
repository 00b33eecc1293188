"""Caption punctuation check."""
from __future__ import annotations

from annolint.rules.base import Advice, Rule
from annolint.strings import AnnotatedString, Range


class CheckCaptions(Rule):
    """Captions must end with a period.

    Braces are counted instead of matching a regex so that commands nested
    in the caption (``\\textbf{...}``) do not end it early.
    """

    description = "Period at the end of table and figure captions"

    def __init__(self) -> None:
        super().__init__("sh:capperiod")

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        for line in s.get_lines():
            text = line.text
            start = text.find("\\caption")
            if start < 0 or text.startswith("\\captionsetup", start):
                continue
            period_seen = False
            level = 0
            for i in range(start + 1, len(text)):
                c = text[i]
                if c == "{":
                    level += 1
                    period_seen = False
                elif c == "}":
                    level -= 1
                    if level == 0 and not period_seen:
                        advice.append(self.make_advice(
                            s,
                            Range(line.offset + start, line.offset + i),
                            "A caption should end with a period",
                        ))
                        break
                    period_seen = False
                elif c == ".":
                    period_seen = True
                elif c != " ":
                    period_seen = False
        return advice
