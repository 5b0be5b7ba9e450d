"""CLI tests for mdisolate.cli.main.

STDIN is faked with a namespace object; file I/O goes through ``tmp_path``.
Where a test only cares about argument handling, ``cli.isolate_blocks`` is
patched to a stub that records what it was called with.
"""

from __future__ import annotations

import json
import re
import sys
from types import SimpleNamespace

import pytest

import mdisolate.cli as cli
from mdisolate.config import IsolateConfig
from mdisolate.core import IsolatedDocument
from mdisolate.report import IsolationReport

SAMPLE = "intro\n```py\nx = 1\n```\n| A | B |\n|---|---|\n| 1 | 2 |"


# ---------------------------------------------------------------------------
# Fixtures & helpers
# ---------------------------------------------------------------------------

def _fake_stdin(monkeypatch, text: str) -> None:
    monkeypatch.setattr(sys, "stdin", SimpleNamespace(read=lambda: text))


def _patch_isolate(monkeypatch, output: str = "ISOLATED") -> dict:
    """Patch ``cli.isolate_blocks``; return a dict capturing its arguments."""
    seen: dict = {}

    def _fake_isolate(md: str, cfg: IsolateConfig):
        seen["md"] = md
        seen["cfg"] = cfg
        return IsolatedDocument(output), IsolationReport()

    monkeypatch.setattr(cli, "isolate_blocks", _fake_isolate)
    return seen


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_stdin_to_stdout(monkeypatch, capsys):
    """No args → read from STDIN, write placeholder text to STDOUT."""
    _fake_stdin(monkeypatch, SAMPLE)

    cli.main([])

    captured = capsys.readouterr()
    lines = captured.out.split("\n")
    assert lines[0] == "intro"
    assert re.fullmatch(r"__CODEBLOCK_[0-9a-f]{32}__", lines[1])
    assert re.fullmatch(r"__TABLE_[0-9a-f]{32}__", lines[2])
    assert len(lines) == 3
    assert captured.err == ""


def test_file_input_file_output_and_entities(tmp_path):
    """Reads from input path; writes text and entity JSON to files."""
    src = tmp_path / "in.md"
    out = tmp_path / "out.txt"
    entities = tmp_path / "entities.json"
    src.write_text(SAMPLE, encoding="utf-8")

    cli.main([str(src), "-o", str(out), "--entities", str(entities)])

    text = out.read_text(encoding="utf-8")
    data = json.loads(entities.read_text(encoding="utf-8"))
    (code_ph, block), = data["blocks"].items()
    (table_ph, table), = data["tables"].items()

    assert text.split("\n") == ["intro", code_ph, table_ph]
    assert block == {"language": "py", "code": "x = 1"}
    assert table == {"headers": ["A", "B"], "rows": [["1", "2"]]}


def test_input_missing_exits(tmp_path, capsys):
    """Missing input file triggers exit 1."""
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / "missing.md")])

    assert exc.value.code == 1
    assert "input file not found" in capsys.readouterr().err.lower()


def test_config_load(monkeypatch, tmp_path):
    """Valid TOML config overrides defaults; unknown keys are ignored."""
    toml_path = tmp_path / "cfg.toml"
    toml_path.write_text(
        'extract_tables = false\nlog_dir = "elsewhere"\nunknown_key = 3\n',
        encoding="utf-8",
    )
    _fake_stdin(monkeypatch, "RAW")
    seen = _patch_isolate(monkeypatch)

    cli.main(["--config", str(toml_path)])

    cfg = seen["cfg"]
    assert seen["md"] == "RAW"
    assert cfg.extract_tables is False
    assert cfg.log_dir == "elsewhere"
    assert cfg.extract_code_blocks is True
    assert not hasattr(cfg, "unknown_key")


def test_config_invalid_toml_exits(monkeypatch, tmp_path, capsys):
    toml_path = tmp_path / "bad.toml"
    toml_path.write_text("this is = = not toml", encoding="utf-8")
    _fake_stdin(monkeypatch, "RAW")
    _patch_isolate(monkeypatch)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(toml_path)])

    assert exc.value.code == 1
    assert "failed to load config" in capsys.readouterr().err


def test_json_report(monkeypatch, capsys):
    """--json prints the report as pretty JSON to stderr."""
    _fake_stdin(monkeypatch, "RAW")
    _patch_isolate(monkeypatch, output="CLEAN")

    cli.main(["--json"])

    captured = capsys.readouterr()
    assert captured.out == "CLEAN"
    report = json.loads(captured.err)
    assert report["final_status_message"] == "Processing not yet complete."
    assert "{\n  \"run_id\"" in captured.err


def test_output_write_error(monkeypatch, tmp_path, capsys):
    """Write failures surface as exit 1."""
    _fake_stdin(monkeypatch, "RAW")
    _patch_isolate(monkeypatch)

    with pytest.raises(SystemExit) as exc:
        cli.main(["-o", str(tmp_path / "no" / "such" / "dir" / "out.md")])

    assert exc.value.code == 1
    assert "cannot write output" in capsys.readouterr().err.lower()


@pytest.mark.parametrize(
    "toml_text",
    [
        "log_dir = 5\nsave_report = true\n",
        'extract_tables = "false"\n',
        "cross_check_commonmark = 1\n",
    ],
)
def test_config_wrong_value_type_exits(monkeypatch, tmp_path, capsys, toml_text):
    """Values of the wrong type are config errors, not silent coercions."""
    toml_path = tmp_path / "cfg.toml"
    toml_path.write_text(toml_text, encoding="utf-8")
    _fake_stdin(monkeypatch, "| A | B |\n|---|---|")

    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(toml_path)])

    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert "mdisolate: failed to load config" in captured.err
    assert "must be" in captured.err
    assert captured.out == ""
