"""Checks run by the linter."""

from annolint.rules.base import Advice, Rule
from annolint.rules.captions import CheckCaptions
from annolint.rules.figures import CheckFigurePaths, CheckFigureReferences
from annolint.rules.headings import (
    CheckLevelSkip,
    CheckStackedHeadings,
    CheckSubsections,
    CheckSubsectionSize,
)
from annolint.rules.markup import CheckCiteMix, CheckNoBreak
from annolint.rules.regex_rule import (
    DEFAULT_CLEANED_RULES,
    DEFAULT_REGEX_RULES,
    RegexRule,
    load_regex_rules,
    parse_regex_rules,
)

__all__ = [
    "Advice",
    "CheckCaptions",
    "CheckCiteMix",
    "CheckFigurePaths",
    "CheckFigureReferences",
    "CheckLevelSkip",
    "CheckNoBreak",
    "CheckStackedHeadings",
    "CheckSubsectionSize",
    "CheckSubsections",
    "DEFAULT_CLEANED_RULES",
    "DEFAULT_REGEX_RULES",
    "RegexRule",
    "Rule",
    "latex_rules",
    "load_regex_rules",
    "parse_regex_rules",
]


def latex_rules() -> list[Rule]:
    """Fresh instances of the structural checks run on LaTeX sources."""
    return [
        CheckFigureReferences(),
        CheckFigurePaths(),
        CheckCaptions(),
        CheckSubsections(),
        CheckLevelSkip(),
        CheckSubsectionSize(),
        CheckStackedHeadings(),
        CheckNoBreak(),
        CheckCiteMix(),
    ]
