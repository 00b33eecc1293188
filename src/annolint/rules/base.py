"""Rule contract and the advice it produces."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from annolint.strings import AnnotatedString, Line, PositionRange, Range


@dataclass(frozen=True, slots=True)
class Advice:
    """One issue found by a rule.

    ``range`` is a linear range of the original document when ``original``
    is True; otherwise no provenance was found and it is a range of the text
    the rule looked at. ``line`` is the line of that same text where the
    range starts.
    """

    rule: Rule
    range: Range
    position_range: PositionRange
    message: str
    resource: str
    line: Line
    original: bool = True
    replacements: tuple[str, ...] = ()

    @property
    def offset(self) -> int:
        return self.range.start

    @property
    def length(self) -> int:
        return len(self.range)

    @property
    def column(self) -> int:
        """Column of the range start within ``line``."""
        return self.range.start - self.line.offset

    def sort_key(self) -> tuple[str, Range, str]:
        return (self.resource, self.range, self.rule.name)

    def __lt__(self, other: Advice) -> bool:
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        range_string = str(self.position_range)
        if not self.original:
            range_string = range_string.lower()
        return f"{range_string} {self.message}"


class Rule(ABC):
    """A check run on an annotated string."""

    description = ""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        """Return the advice found in *s*."""

    def make_advice(
        self,
        s: AnnotatedString,
        current: Range,
        message: str,
        *,
        replacements: tuple[str, ...] = (),
    ) -> Advice:
        """Build advice for *current*, a range of the current text of *s*.

        The range is translated back to the original document. When no
        stage kept provenance for it, the advice points at the current text
        instead and is flagged ``original=False``. *replacements* are
        suggested texts for the range.
        """
        found = s.backward_range(current)
        if found is not None:
            line = s.original_line_of(found.start)
            return Advice(
                rule=self,
                range=found,
                position_range=s.position_range(found),
                message=message,
                resource=s.resource_name,
                line=line if line is not None else Line("", 0),
                original=True,
                replacements=replacements,
            )
        line = s.line_of(current.start)
        return Advice(
            rule=self,
            range=current,
            position_range=s.position_range(current, original=False),
            message=message,
            resource=s.resource_name,
            line=line if line is not None else Line("", 0),
            original=False,
            replacements=replacements,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
