"""Tests for annolint.config."""
from pathlib import Path

import orjson
import pytest

from annolint.cli import build_parser
from annolint.config import ConfigError, LintConfig, load_config, merge_cli


def _write(path: Path, payload: object) -> Path:
    path.write_bytes(orjson.dumps(payload))
    return path


class TestLintConfig:
    def test_defaults(self) -> None:
        config = LintConfig()
        assert config.language is None
        assert config.output == "plain"
        assert config.color

    def test_invalid_values(self) -> None:
        with pytest.raises(ValueError):
            LintConfig(language="rtf")
        with pytest.raises(ValueError):
            LintConfig(output="xml")


class TestLoadConfig:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.json") == LintConfig()

    def test_values(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.json", {
            "ignore": ["sh:dots"],
            "read_all": True,
            "output": "json",
            "unknown": 1,
        })
        config = load_config(path)
        assert config.ignore == ("sh:dots",)
        assert config.read_all
        assert config.output == "json"

    def test_wrong_type(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path / "c.json", {"read_all": "yes"}))
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path / "d.json", {"ignore": [1, 2]}))

    def test_bad_value(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path / "c.json", {"output": "xml"}))

    def test_not_an_object(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path / "c.json", ["a"]))

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "c.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestMergeCli:
    def test_flags_override_file(self) -> None:
        args = build_parser().parse_args([
            "--ignore", "a,b", "--ignore", "c", "--type", "md", "--no-color", "x.md",
        ])
        config = merge_cli(LintConfig(ignore=("z",), output="json"), args)
        assert config.ignore == ("z", "a", "b", "c")
        assert config.language == "md"
        assert not config.color
        assert config.output == "json"
        assert not config.read_all

    def test_no_flags_keeps_file(self) -> None:
        base = LintConfig(read_all=True, remove_macros=("todo",))
        config = merge_cli(base, build_parser().parse_args(["x.tex"]))
        assert config == base
