from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

from gitfame.cli import _build_parser, main


def test_module_help_lists_options(tmp_path: Path) -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(Path(__file__).resolve().parents[1] / "src")
    cmd = [sys.executable, "-m", "gitfame", "--help"]
    proc = subprocess.run(cmd, cwd=str(tmp_path), env=env, text=True, capture_output=True)
    assert proc.returncode == 0, proc.stderr
    out = proc.stdout
    assert "--order-by" in out
    assert "--use-committer" in out
    assert "json-lines" in out
    assert "--restrict-to" in out


def test_main_rejects_unknown_order_by(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--order-by", "age"])
    assert exc.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_main_rejects_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(tmp_path / "missing.json")])
    assert exc.value.code == 2
    assert "config file not found" in capsys.readouterr().err


def test_main_rejects_bad_config_value(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "fame.json"
    cfg.write_text('{"format": "yaml"}', encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--config", str(cfg)])
    assert exc.value.code == 2
    assert "invalid format" in capsys.readouterr().err


def test_main_outside_repository(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--repository", str(tmp_path / "nowhere")]) == 1
    assert "not a git repository" in capsys.readouterr().err


def test_glob_options_explain_slash_matching() -> None:
    help_text = " ".join(_build_parser().format_help().split())
    assert "fnmatch globs of files to skip; '*' also matches '/'" in help_text
    assert "only matching files are counted. '*' also matches '/'" in help_text
