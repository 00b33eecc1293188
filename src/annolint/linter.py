"""Runs rules over a document before and after markup cleaning."""
from __future__ import annotations

import enum
import fnmatch
import logging
from collections.abc import Iterable
from pathlib import Path

from annolint.cleaning import (
    CompositeCleaner,
    LatexCleaner,
    MarkdownCleaner,
    ReplacementCleaner,
    TextCleaner,
    TextCleanerError,
)
from annolint.config import LintConfig
from annolint.rules import (
    DEFAULT_CLEANED_RULES,
    DEFAULT_REGEX_RULES,
    Advice,
    Rule,
    latex_rules,
)
from annolint.strings import AnnotatedString

log = logging.getLogger(__name__)


class LinterError(Exception):
    """Raised when a document cannot be analyzed."""


class Language(enum.Enum):
    LATEX = "tex"
    MARKDOWN = "md"
    TEXT = "txt"
    UNSPECIFIED = "unspecified"


_SUFFIXES: dict[str, Language] = {
    ".tex": Language.LATEX,
    ".md": Language.MARKDOWN,
    ".markdown": Language.MARKDOWN,
    ".txt": Language.TEXT,
}


def language_for(filename: str) -> Language:
    """Guess the markup language from a file extension."""
    return _SUFFIXES.get(Path(filename).suffix.lower(), Language.UNSPECIFIED)


class Linter:
    """Applies two rule sets to a document.

    Rules added with :meth:`add` see the document with comments removed;
    rules added with :meth:`add_cleaned` see the fully cleaned text.
    Advice from blacklisted rules is dropped.
    """

    def __init__(self, cleaner: TextCleaner) -> None:
        self.cleaner = cleaner
        self.rules: list[Rule] = []
        self.cleaned_rules: list[Rule] = []
        self.blacklist: set[str] = set()

    def add(self, rules: Rule | Iterable[Rule]) -> Linter:
        self.rules.extend([rules] if isinstance(rules, Rule) else rules)
        return self

    def add_cleaned(self, rules: Rule | Iterable[Rule]) -> Linter:
        self.cleaned_rules.extend([rules] if isinstance(rules, Rule) else rules)
        return self

    def add_to_blacklist(self, names: Iterable[str]) -> Linter:
        """Ignore rules by name; ``*`` matches any run of characters.

        Wildcards are expanded against the rules registered so far.
        """
        for name in names:
            if "*" not in name:
                self.blacklist.add(name)
                continue
            matched = [
                r.name for r in self.rules + self.cleaned_rules
                if fnmatch.fnmatchcase(r.name, name)
            ]
            if not matched:
                log.warning("No rule matches %r", name)
            self.blacklist.update(matched)
        return self

    def evaluate_all(self, s: AnnotatedString) -> list[Advice]:
        """Run every rule on *s* and return the advice sorted by position.

        Raises LinterError when cleaning fails or leaves no text.
        """
        try:
            decommented = self.cleaner.clean_comments(s)
            advice = self._run(self.rules, decommented)
            cleaned = self.cleaner.clean(s)
        except TextCleanerError as exc:
            raise LinterError(str(exc)) from exc
        if not str(cleaned).strip():
            raise LinterError("No text to analyze. Did you omit --read-all?")
        advice.extend(self._run(self.cleaned_rules, cleaned))
        advice.sort()
        log.debug("%s: %d advice", s.resource_name or "<input>", len(advice))
        return advice

    def clean(self, s: AnnotatedString) -> AnnotatedString:
        try:
            return self.cleaner.clean(s)
        except TextCleanerError as exc:
            raise LinterError(str(exc)) from exc

    def inner_files(self) -> list[str]:
        return self.cleaner.inner_files()

    def _run(self, rules: list[Rule], s: AnnotatedString) -> list[Advice]:
        out: list[Advice] = []
        for rule in rules:
            if rule.name in self.blacklist:
                continue
            out.extend(rule.evaluate(s))
        return out


def build_linter(language: Language, config: LintConfig | None = None) -> Linter:
    """Assemble the cleaner and rule sets for *language*.

    UNSPECIFIED is treated as LaTeX.
    """
    config = config or LintConfig()
    cleaner: TextCleaner
    if language is Language.MARKDOWN:
        cleaner = MarkdownCleaner()
    elif language is Language.TEXT:
        cleaner = ReplacementCleaner()
    else:
        cleaner = LatexCleaner(
            ignore_before_document=not config.read_all,
            remove_environments=config.remove_environments,
            remove_macros=config.remove_macros,
        )
    if config.replace_file:
        cleaner = CompositeCleaner(
            cleaner, ReplacementCleaner.load(Path(config.replace_file)),
        )
    linter = Linter(cleaner)
    if language in (Language.LATEX, Language.UNSPECIFIED):
        linter.add(DEFAULT_REGEX_RULES)
        linter.add(latex_rules())
    linter.add_cleaned(DEFAULT_CLEANED_RULES)
    linter.add_to_blacklist(config.ignore)
    return linter
