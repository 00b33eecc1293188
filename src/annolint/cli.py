"""Command line entry point.

Usage:
    annolint paper.tex
    annolint --type md --output singleline README.md
    annolint --clean --map map.json paper.tex > paper.txt

Reports go to stdout; log messages go to stderr. The exit code is the
number of warnings (at most 255), 0 with ``--ci``, and 1 when a file
cannot be analyzed.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from annolint.config import (
    DEFAULT_CONFIG_FILE,
    LANGUAGES,
    OUTPUTS,
    ConfigError,
    LintConfig,
    load_config,
    merge_cli,
)
from annolint.io_utils import read_file, save_json
from annolint.linter import Language, Linter, LinterError, build_linter, language_for
from annolint.render import VERSION, make_renderer
from annolint.strings import AnnotatedString

log = logging.getLogger(__name__)

MAX_EXIT_CODE = 255
STDIN_NAME = "-"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="annolint",
        description="Check the style of LaTeX and Markdown documents.",
    )
    parser.add_argument("files", nargs="+", help="Files to check ('-' reads stdin)")
    parser.add_argument(
        "--type", choices=LANGUAGES, default=None,
        help="Markup of the input (default: guessed from the file extension).",
    )
    parser.add_argument(
        "--ignore", action="append", default=[],
        help="Comma-separated rule names to ignore; '*' is a wildcard.",
    )
    parser.add_argument(
        "--read-all", action="store_true",
        help="Also check the text before \\begin{document}.",
    )
    parser.add_argument(
        "--remove", action="append", default=[],
        help="Comma-separated LaTeX environments to remove.",
    )
    parser.add_argument(
        "--remove-macros", action="append", default=[],
        help="Comma-separated LaTeX macros to remove.",
    )
    parser.add_argument(
        "--replace", default=None,
        help="File of tab-separated pattern/replacement pairs applied after cleaning.",
    )
    parser.add_argument(
        "--clean", action="store_true",
        help="Print the cleaned text instead of checking it.",
    )
    parser.add_argument(
        "--map", default=None,
        help="Write the original-to-cleaned range correspondence as JSON.",
    )
    parser.add_argument("--output", choices=OUTPUTS, default=None, help="Report format.")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors.")
    parser.add_argument(
        "--no-config", action="store_true",
        help=f"Do not read {DEFAULT_CONFIG_FILE} from the working directory.",
    )
    parser.add_argument("--ci", action="store_true", help="Always exit with code 0.")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only log errors.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug details.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def resolve_language(config: LintConfig, filename: str) -> Language:
    if config.language is not None:
        return Language(config.language)
    language = language_for(filename)
    if language is Language.UNSPECIFIED:
        log.debug("Cannot guess the markup of %s; assuming LaTeX", filename)
        return Language.LATEX
    return language


def mapping_payload(s: AnnotatedString) -> list[dict[str, Any]]:
    """Inclusive ``[start, end]`` pairs from the original to the cleaned text."""
    return [
        {
            "input": [pair.in_range.start, pair.in_range.end],
            "output": [pair.out_range.start, pair.out_range.end],
        }
        for pair in s.composed_mapping()
    ]


def read_input(name: str) -> str:
    if name == STDIN_NAME:
        return sys.stdin.read()
    return read_file(Path(name))


def run(args: argparse.Namespace) -> int:
    if args.no_config:
        config = LintConfig()
    else:
        config = load_config(Path(DEFAULT_CONFIG_FILE))
    config = merge_cli(config, args)
    renderer = make_renderer(
        config.output, sys.stdout, color=config.color,
        language=resolve_language(config, args.files[0]).value,
    )
    maps: dict[str, list[dict[str, Any]]] = {}

    queue = list(args.files)
    seen: set[str] = set()
    while queue:
        name = queue.pop(0)
        if name in seen:
            continue
        seen.add(name)
        linter = build_linter(resolve_language(config, name), config)
        s = AnnotatedString(
            read_input(name), resource_name="" if name == STDIN_NAME else name,
        )
        if args.clean or args.map:
            cleaned = linter.clean(s)
            maps[name] = mapping_payload(cleaned)
            if args.clean:
                sys.stdout.write(str(cleaned))
                sys.stdout.write("\n")
        if not args.clean:
            advice = linter.evaluate_all(s)
            log.info("%s: %d warning(s)", name, len(advice))
            renderer.add_advice(s.resource_name, advice)
        queue.extend(_inner_files(linter, name))

    if args.map:
        save_json(maps, Path(args.map))
        log.info("Wrote correspondence map to %s", args.map)
    if args.clean:
        return 0
    renderer.render()
    if config.ci:
        return 0
    return min(renderer.count(), MAX_EXIT_CODE)


def _inner_files(linter: Linter, name: str) -> list[str]:
    """Files included by *name* that exist next to it."""
    if name == STDIN_NAME:
        return []
    base = Path(name).parent
    found: list[str] = []
    for inner in linter.inner_files():
        path = base / inner
        if path.is_file():
            found.append(str(path))
        else:
            log.warning("Included file not found: %s", path)
    return found


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    try:
        return run(args)
    except (LinterError, ConfigError, OSError) as exc:
        log.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
