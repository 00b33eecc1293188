"""Rules defined by a regular expression and a message template."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from annolint.io_utils import read_file
from annolint.rules.base import Advice, Rule
from annolint.strings import AnnotatedString, Match, Range, compile_pattern

log = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")
_SEPARATOR_RE = re.compile(r"\t+")


class RegexRule(Rule):
    """Reports every match of ``pattern``.

    ``$n`` in the message is replaced by capture group ``n`` of the match.
    A match that is entirely matched by ``exception`` is not reported.
    """

    MAX_ITERATIONS = 100
    description = "Regex check on the text"

    def __init__(
        self,
        name: str,
        pattern: str | re.Pattern[str],
        message: str,
        exception: str | re.Pattern[str] | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(name)
        self.pattern = compile_pattern(pattern)
        self.message = message
        self.exception = compile_pattern(exception) if exception else None
        self.suggestion = suggestion

    def evaluate(self, s: AnnotatedString) -> list[Advice]:
        advice: list[Advice] = []
        pos = 0
        for _ in range(self.MAX_ITERATIONS):
            m = s.find(self.pattern, pos)
            if m is None:
                break
            pos = m.end if m.end > m.position else m.position + 1
            if not m.match:
                continue
            if self.exception is not None and self.exception.fullmatch(m.match):
                continue
            suggestions = () if self.suggestion is None else (self.expand(self.suggestion, m),)
            advice.append(self.make_advice(
                s, Range(m.position, m.end - 1), self.expand(self.message, m),
                replacements=suggestions,
            ))
        else:
            log.debug("Rule %s stopped after %d matches", self.name, self.MAX_ITERATIONS)
        return advice

    @staticmethod
    def expand(template: str, m: Match) -> str:
        """Replace ``$n`` in *template* with group ``n`` of *m* (empty if missing)."""
        def group(ph: re.Match[str]) -> str:
            index = int(ph.group(1))
            if index >= m.group_count():
                return ""
            return m.group(index) or ""

        return _PLACEHOLDER_RE.sub(group, template)


def parse_regex_rules(lines: Iterable[str]) -> list[RegexRule]:
    """Parse ``name<TAB>pattern<TAB>message[<TAB>exception]`` lines.

    Blank lines and ``#`` comments are skipped. Lines with too few fields
    are logged and ignored; an invalid pattern raises ``PatternError``.
    """
    rules: list[RegexRule] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        parts = _SEPARATOR_RE.split(line.rstrip("\r\n"))
        if len(parts) < 3:
            log.warning("Ignoring malformed rule line: %r", line)
            continue
        exception = parts[3] if len(parts) > 3 else None
        rules.append(RegexRule(parts[0], parts[1], parts[2], exception))
    return rules


def load_regex_rules(path: Path) -> list[RegexRule]:
    rules = parse_regex_rules(read_file(path).splitlines())
    log.info("Loaded %d regex rules from %s", len(rules), path)
    return rules


# Checked on the LaTeX source once comments are gone
DEFAULT_REGEX_RULES: tuple[RegexRule, ...] = (
    RegexRule(
        "sh:tilde-ref",
        r"[^~\s(]\s*\\(?:ref|eqref|autoref|cref)\{",
        "Use a non-breaking space (~) before a reference",
    ),
    RegexRule(
        "sh:tilde-cite",
        r"[^~\s(]\s*\\cite[pt]?\{",
        "Use a non-breaking space (~) before a citation",
    ),
    RegexRule(
        "sh:dots",
        r"\.\.\.",
        "Use \\dots instead of three periods",
        suggestion="\\dots",
    ),
    RegexRule(
        "sh:quotes",
        r"\"[^\"\n]*\"",
        "Use ``...'' instead of straight double quotes",
    ),
    RegexRule(
        "sh:hardref",
        r"\b([Ff]igure|[Tt]able|[Ss]ection)\s+\d+",
        "Refer to this $1 with \\ref instead of a hard-coded number",
    ),
)

# Checked on the cleaned text
DEFAULT_CLEANED_RULES: tuple[RegexRule, ...] = (
    RegexRule(
        "txt:repeat",
        r"\b(\w+)\s+\1\b",
        "Repeated word: $1",
        suggestion="$1",
    ),
    RegexRule(
        "txt:punct-space",
        r"[ \t]+[,;:!?](?=\s|$)",
        "Remove the space before this punctuation mark",
    ),
    RegexRule(
        "txt:spaces",
        r"\S {2,}(?=\S)",
        "Use a single space between words",
    ),
    RegexRule(
        "txt:abbrev-comma",
        r"\b(e\.g\.|i\.e\.)(?!,)",
        "Add a comma after \"$1\"",
        suggestion="$1,",
    ),
)
