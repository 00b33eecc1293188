"""User-supplied find/replace tables and cleaner composition."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from annolint.cleaning.base import TextCleaner, TextCleanerError
from annolint.io_utils import read_file
from annolint.strings import AnnotatedString, PatternError

log = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"\t+")


class ReplacementCleaner(TextCleaner):
    """Applies an ordered table of ``pattern -> replacement`` rewrites.

    Replacements are ``re`` templates: ``\\1`` refers to a capture group.
    """

    def __init__(self, replacements: dict[str, str] | None = None) -> None:
        self.replacements: dict[str, str] = dict(replacements or {})

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> ReplacementCleaner:
        """Parse ``pattern<TAB>replacement`` lines.

        Blank lines and lines starting with ``#`` are skipped; lines without
        a tab separator are ignored.
        """
        replacements: dict[str, str] = {}
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            parts = _SEPARATOR_RE.split(line.rstrip("\r\n"), maxsplit=1)
            if len(parts) != 2:
                log.debug("Ignoring malformed replacement line: %r", line)
                continue
            replacements[parts[0]] = parts[1]
        return cls(replacements)

    @classmethod
    def load(cls, path: Path) -> ReplacementCleaner:
        cleaner = cls.from_lines(read_file(path).splitlines())
        log.info("Loaded %d replacements from %s", len(cleaner.replacements), path)
        return cleaner

    def clean(self, s: AnnotatedString) -> AnnotatedString:
        out = s.copy()
        for pattern, replacement in self.replacements.items():
            try:
                out.replace_all(pattern, replacement, flags=re.MULTILINE)
            except (PatternError, re.error) as exc:
                raise TextCleanerError(str(exc)) from exc
        return out

    def clean_comments(self, s: AnnotatedString) -> AnnotatedString:
        return s.copy()


class CompositeCleaner(TextCleaner):
    """Runs several cleaners one after the other."""

    def __init__(self, *cleaners: TextCleaner) -> None:
        self.cleaners: list[TextCleaner] = list(cleaners)

    def add(self, cleaner: TextCleaner) -> CompositeCleaner:
        self.cleaners.append(cleaner)
        return self

    def clean(self, s: AnnotatedString) -> AnnotatedString:
        for cleaner in self.cleaners:
            s = cleaner.clean(s)
        return s

    def clean_comments(self, s: AnnotatedString) -> AnnotatedString:
        for cleaner in self.cleaners:
            s = cleaner.clean_comments(s)
        return s

    def inner_files(self) -> list[str]:
        files: list[str] = []
        for cleaner in self.cleaners:
            files.extend(cleaner.inner_files())
        return files
