"""Lint configuration: a JSON file merged with command line flags."""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import orjson

from annolint.io_utils import load_json

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".annolint.json"
LANGUAGES = ("tex", "md", "txt")
OUTPUTS = ("plain", "singleline", "json")


class ConfigError(Exception):
    """Raised for an unreadable config file or a value of the wrong type."""


@dataclass(frozen=True, slots=True)
class LintConfig:
    """Settings for one lint run.

    ``language`` is None when it should be guessed from the file name.
    """

    language: str | None = None
    ignore: tuple[str, ...] = ()
    read_all: bool = False
    remove_environments: tuple[str, ...] = ()
    remove_macros: tuple[str, ...] = ()
    replace_file: str | None = None
    output: str = "plain"
    color: bool = True
    ci: bool = False

    def __post_init__(self) -> None:
        if self.language is not None and self.language not in LANGUAGES:
            raise ValueError(f"language must be one of {LANGUAGES}, got {self.language!r}")
        if self.output not in OUTPUTS:
            raise ValueError(f"output must be one of {OUTPUTS}, got {self.output!r}")


# Expected JSON type per key; list values become tuples
_FIELD_TYPES: dict[str, type | tuple[type, ...]] = {
    "language": (str, type(None)),
    "ignore": list,
    "read_all": bool,
    "remove_environments": list,
    "remove_macros": list,
    "replace_file": (str, type(None)),
    "output": str,
    "color": bool,
    "ci": bool,
}


def config_from_dict(payload: dict[str, Any]) -> LintConfig:
    """Validate a decoded JSON object and build a LintConfig."""
    known = {f.name for f in fields(LintConfig)}
    values: dict[str, Any] = {}
    for key, value in payload.items():
        if key not in known:
            log.warning("Ignoring unknown config key: %s", key)
            continue
        if not isinstance(value, _FIELD_TYPES[key]):
            raise ConfigError(f"Config key {key!r} has the wrong type: {value!r}")
        if isinstance(value, list):
            if not all(isinstance(v, str) for v in value):
                raise ConfigError(f"Config key {key!r} must be a list of strings")
            value = tuple(value)
        values[key] = value
    try:
        return LintConfig(**values)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def load_config(path: Path) -> LintConfig:
    """Read a config file; a missing file gives the defaults."""
    if not path.is_file():
        log.debug("No config file at %s", path)
        return LintConfig()
    try:
        payload = load_json(path)
    except (OSError, orjson.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Config file must hold a JSON object: {path}")
    log.info("Loaded config from %s", path)
    return config_from_dict(payload)


def merge_cli(config: LintConfig, args: argparse.Namespace) -> LintConfig:
    """Overlay the flags given on the command line onto *config*.

    Flags left at their argparse default (None, or False for switches) do
    not override the file. List options are appended to the file's lists.
    """
    changes: dict[str, Any] = {}
    if args.type is not None:
        changes["language"] = args.type
    if args.ignore:
        changes["ignore"] = config.ignore + tuple(_split(args.ignore))
    if args.read_all:
        changes["read_all"] = True
    if args.remove:
        changes["remove_environments"] = (
            config.remove_environments + tuple(_split(args.remove))
        )
    if args.remove_macros:
        changes["remove_macros"] = config.remove_macros + tuple(_split(args.remove_macros))
    if args.replace is not None:
        changes["replace_file"] = args.replace
    if args.output is not None:
        changes["output"] = args.output
    if args.no_color:
        changes["color"] = False
    if args.ci:
        changes["ci"] = True
    return replace(config, **changes)


def _split(values: list[str]) -> list[str]:
    """Flatten repeated comma-separated option values."""
    return [v.strip() for value in values for v in value.split(",") if v.strip()]
