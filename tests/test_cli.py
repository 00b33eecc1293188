"""Tests for the annolint command line."""
import io
from pathlib import Path

import orjson
import pytest

from annolint.cli import main

SAMPLE = "the the cat sat...\n"


@pytest.fixture
def doc(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "doc.tex"
    path.write_text(SAMPLE, encoding="utf-8")
    return path


class TestMain:
    def test_exit_code_is_advice_count(self, doc: Path) -> None:
        assert main(["--no-config", "--read-all", "--no-color", str(doc)]) == 2

    def test_ci_always_succeeds(self, doc: Path) -> None:
        assert main(["--no-config", "--read-all", "--ci", str(doc)]) == 0

    def test_no_text_is_an_error(self, doc: Path) -> None:
        assert main(["--no-config", str(doc)]) == 1

    def test_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert main(["--no-config", str(tmp_path / "missing.tex")]) == 1

    def test_ignore(self, doc: Path) -> None:
        assert main(["--no-config", "--read-all", "--ignore", "sh:*", str(doc)]) == 1

    def test_json_output(self, doc: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--no-config", "--read-all", "--output", "json", str(doc)])
        data = orjson.loads(capsys.readouterr().out)
        assert [m["rule"]["id"] for m in data["matches"]] == ["txt:repeat", "sh:dots"]
        assert data["language"]["code"] == "tex"
        assert data["matches"][1]["replacements"] == [{"value": "\\dots"}]

    def test_singleline_output(self, doc: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--no-config", "--read-all", "--no-color", "--output", "singleline", str(doc)])
        out = capsys.readouterr().out
        assert f"{doc}(L1C1-L1C7): Repeated word: the" in out

    def test_clean(self, doc: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--no-config", "--read-all", "--clean", str(doc)]) == 0
        assert capsys.readouterr().out == "the the cat sat...\n"

    def test_map(self, doc: Path, tmp_path: Path) -> None:
        map_path = tmp_path / "map.json"
        main(["--no-config", "--read-all", "--clean", "--map", str(map_path), str(doc)])
        data = orjson.loads(map_path.read_bytes())
        assert data[str(doc)] == [{"input": [0, 17], "output": [0, 17]}]

    def test_config_file(self, doc: Path, tmp_path: Path) -> None:
        (tmp_path / ".annolint.json").write_bytes(
            orjson.dumps({"ignore": ["txt:*"], "read_all": True}),
        )
        assert main([str(doc)]) == 1

    def test_bad_config_file(self, doc: Path, tmp_path: Path) -> None:
        (tmp_path / ".annolint.json").write_text("[1]", encoding="utf-8")
        assert main([str(doc)]) == 1

    def test_stdin(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO("# Hi\n\nSee e.g. this.\n"))
        assert main(["--no-config", "--type", "md", "-"]) == 1

    def test_inner_files(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                         capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "main.tex").write_text("\\input{chap}\nMain text.\n", encoding="utf-8")
        (tmp_path / "chap.tex").write_text("the the end.\n", encoding="utf-8")
        code = main([
            "--no-config", "--read-all", "--no-color", "--output", "singleline",
            str(tmp_path / "main.tex"),
        ])
        assert code == 1
        assert f"{tmp_path / 'chap.tex'}(L1C1-L1C7)" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "annolint" in capsys.readouterr().out
