"""Text cleaner contract.

A cleaner strips markup from an ``AnnotatedString`` by applying stages to
it, so that every character of the cleaned text can still be traced back to
the markup file. Cleaners work on a copy: the string passed in keeps its
history untouched.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from annolint.strings import AnnotatedString


class TextCleanerError(Exception):
    """A cleaner could not process its input (e.g. a bad replacement pattern)."""


class TextCleaner(ABC):
    """Base class of all markup cleaners."""

    @abstractmethod
    def clean(self, s: AnnotatedString) -> AnnotatedString:
        """Return a copy of *s* with comments and markup removed."""

    @abstractmethod
    def clean_comments(self, s: AnnotatedString) -> AnnotatedString:
        """Return a copy of *s* with comments removed, markup kept."""

    def inner_files(self) -> list[str]:
        """Files referenced by the last cleaned document (e.g. ``\\input``)."""
        return []
