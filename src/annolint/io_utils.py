"""I/O utilities: encoding-safe text reading and orjson-backed JSON files."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def read_file(fpath: Path) -> str:
    """Read a text file with encoding fallback: UTF-8 -> CP1252 -> replace.

    CP1252 covers documents saved by older editors with smart quotes
    (0x93/0x94). Raises OSError when the file cannot be read at all.
    """
    try:
        return fpath.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        try:
            return fpath.read_text(encoding="cp1252")
        except UnicodeDecodeError:
            with open(fpath, errors="replace") as f:
                return f.read()


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    """Serialize *obj* to JSON bytes (two-space indent when *pretty*)."""
    return orjson.dumps(obj, option=orjson.OPT_INDENT_2 if pretty else None)


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))
