"""Output formats for advice."""
from __future__ import annotations

import sys
import textwrap
from abc import ABC, abstractmethod
from typing import Any, TextIO

from annolint.io_utils import dumps_json
from annolint.rules import Advice

VERSION = "0.1.0"

# ANSI escapes
_YELLOW = "\x1b[33m"
_RED = "\x1b[91m"
_RESET = "\x1b[0m"


def excerpt_window(line: str, left: int, right: int, width: int) -> tuple[str, int]:
    """Cut *line* to at most *width* characters around columns left..right.

    Returns the excerpt and the column of the line where it starts.
    """
    range_width = right - left
    mid_point = left + range_width // 2
    offset = 0
    if range_width < len(line):
        if mid_point + width // 2 >= len(line):
            char_dif = mid_point + width // 2 - len(line)
            offset = max(0, mid_point - width // 2 - char_dif)
        else:
            offset = max(0, mid_point - width // 2)
    return line[offset:offset + width], offset


def _columns(advice: Advice) -> tuple[int, int]:
    """Start and end columns of the advice range within ``advice.line``."""
    pr = advice.position_range
    left = pr.start.column if pr.start.column >= 0 else advice.column
    if pr.end.line == pr.start.line and pr.end.column >= left:
        right = pr.end.column
    else:
        right = max(left, len(advice.line) - 1)
    return left, right


class AdviceRenderer(ABC):
    """Collects advice per resource, then writes it all in :meth:`render`."""

    def __init__(self, stream: TextIO | None = None, *, color: bool = True) -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.color = color
        self.advice: dict[str, list[Advice]] = {}

    def add_advice(self, resource: str, advice: list[Advice]) -> None:
        self.advice.setdefault(resource, []).extend(advice)

    def count(self) -> int:
        return sum(len(v) for v in self.advice.values())

    def _paint(self, text: str, code: str) -> str:
        return f"{code}{text}{_RESET}" if self.color else text

    @abstractmethod
    def render(self) -> None:
        """Write the collected advice to the stream."""


class AnsiAdviceRenderer(AdviceRenderer):
    """Human-readable report, one block per advice with a marked excerpt."""

    line_width = 50
    terminal_width = 78

    def render(self) -> None:
        out = self.stream
        for resource, advice in self.advice.items():
            out.write(f"{resource or '<stdin>'}\n")
            if not advice:
                out.write("Everything is OK!\n")
                continue
            for ad in advice:
                self._render_one(ad)
            out.write(f"Found {len(advice)} warning(s)\n")

    def _render_one(self, ad: Advice) -> None:
        out = self.stream
        head = f"* {ad.position_range}"
        body = textwrap.fill(
            f"{ad.message} [{ad.rule.name}]",
            width=self.terminal_width,
            initial_indent=" " * (len(head) + 1),
            subsequent_indent="  ",
        ).lstrip()
        out.write(f"{self._paint(head, _YELLOW)} {body}\n")
        left, right = _columns(ad)
        text, offset = excerpt_window(ad.line.text, left, right, self.line_width)
        out.write(f"  {text}\n")
        marker = "^" * (right - left + 1)
        out.write(" " * (2 + max(0, left - offset)) + self._paint(marker, _RED) + "\n")


class SinglelineAdviceRenderer(AdviceRenderer):
    """One line per advice: ``file(L1C3-L1C5): message "excerpt"``."""

    def render(self) -> None:
        for resource, advice in self.advice.items():
            for ad in advice:
                location = self._paint(f"{resource}({ad.position_range})", _YELLOW)
                message = ad.message.replace("<suggestion>", "").replace("</suggestion>", "")
                self.stream.write(
                    f"{location}: {message.strip()} \"{self._excerpt(ad)}\"\n",
                )

    def _excerpt(self, ad: Advice) -> str:
        line = ad.line.text
        left, right = _columns(ad)
        if left > len(line):
            return line
        return (
            line[:left]
            + self._paint(line[left:right + 1], _RED)
            + line[right + 1:]
        )


class JsonAdviceRenderer(AdviceRenderer):
    """LanguageTool-style JSON report."""

    context_width = 80

    def __init__(
        self, stream: TextIO | None = None, *, color: bool = False, language: str = "",
    ) -> None:
        super().__init__(stream, color=False)
        self.language = language

    def payload(self) -> dict[str, Any]:
        matches: list[dict[str, Any]] = []
        for advice in self.advice.values():
            for ad in advice:
                left, right = _columns(ad)
                excerpt, _ = excerpt_window(ad.line.text, left, right, self.context_width)
                matches.append({
                    "message": ad.message,
                    "shortMessage": ad.rule.description,
                    "replacements": [{"value": r} for r in ad.replacements],
                    "offset": ad.offset,
                    "length": ad.length,
                    "context": {
                        "text": excerpt,
                        "offset": ad.offset,
                        "length": ad.length,
                    },
                    "sentence": excerpt,
                    "type": {"typeName": "Other"},
                    "rule": {
                        "id": ad.rule.name,
                        "description": ad.rule.description,
                        "issueType": "style",
                        "category": {"id": "MISC", "name": "Miscellaneous"},
                    },
                    "ignoreForIncompleteSentence": False,
                    "contextForSureMatch": 0,
                    "file": ad.resource,
                })
        return {
            "software": {"name": "annolint", "version": VERSION, "apiVersion": 1},
            "warnings": {},
            "language": {"name": self.language, "code": self.language},
            "matches": matches,
        }

    def render(self) -> None:
        self.stream.write(dumps_json(self.payload()).decode("utf-8"))
        self.stream.write("\n")


_RENDERERS: dict[str, type[AdviceRenderer]] = {
    "plain": AnsiAdviceRenderer,
    "singleline": SinglelineAdviceRenderer,
    "json": JsonAdviceRenderer,
}


def make_renderer(
    name: str,
    stream: TextIO | None = None,
    *,
    color: bool = True,
    language: str = "",
) -> AdviceRenderer:
    """Renderer registered under *name* (``plain``, ``singleline``, ``json``).

    *language* is the markup code reported by the JSON renderer.
    """
    try:
        cls = _RENDERERS[name]
    except KeyError:
        raise ValueError(f"Unknown output format: {name!r}") from None
    if cls is JsonAdviceRenderer:
        return JsonAdviceRenderer(stream, language=language)
    return cls(stream, color=color)
