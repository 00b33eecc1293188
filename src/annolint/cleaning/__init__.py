"""Markup cleaners built on the string provenance engine."""

from annolint.cleaning.base import TextCleaner, TextCleanerError
from annolint.cleaning.latex import LatexCleaner
from annolint.cleaning.markdown import MarkdownCleaner
from annolint.cleaning.replacement import CompositeCleaner, ReplacementCleaner

__all__ = [
    "CompositeCleaner",
    "LatexCleaner",
    "MarkdownCleaner",
    "ReplacementCleaner",
    "TextCleaner",
    "TextCleanerError",
]
