"""Tests for the exactcalc command-line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

import exactcalc.cli


def test_parse_args_defaults() -> None:
    ns = exactcalc.cli.parse_args(["1 + 1"])
    assert ns.expressions == ["1 + 1"]
    assert ns.base is None
    assert ns.precision is None
    assert ns.verbose is False


def test_parse_args_rejects_unknown_base() -> None:
    with pytest.raises(SystemExit):
        exactcalc.cli.parse_args(["--base", "3", "1"])


def test_main_prints_results(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    rc = exactcalc.cli.main(["2(2 + 2)", "0x10 + 0b101", "5!", "pow(2, 10)"])
    assert rc == exactcalc.cli.EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["8", "21", "120", "1024"]


def test_main_reports_errors_and_continues(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    rc = exactcalc.cli.main(["1 / 0", "2 + 2"])
    assert rc == exactcalc.cli.EXIT_EVAL_ERROR
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["4"]
    assert "error: division by zero" in captured.err
    assert "  1 / 0" in captured.err


def test_unknown_function_hint(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    rc = exactcalc.cli.main(["foo(1)"])
    assert rc == exactcalc.cli.EXIT_EVAL_ERROR
    assert "hint: available functions: abs, idiv, pow" in capsys.readouterr().err


def test_base_and_precision_flags(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    rc = exactcalc.cli.main(["--base", "16", "--precision", "5", "255", "1/3"])
    assert rc == exactcalc.cli.EXIT_EVAL_ERROR
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["0xFF"]
    assert "base 16" in captured.err

    rc = exactcalc.cli.main(["--precision", "5", "1/3"])
    assert rc == exactcalc.cli.EXIT_OK
    assert capsys.readouterr().out.strip() == "~0.33333"


def test_config_file_is_used(tmp_path: Path, monkeypatch, capsys) -> None:
    (tmp_path / "exactcalc.toml").write_text(
        "version = 1\n[limits]\nmax_factorial = 5\n[output]\nbase = 2\n", encoding="utf-8"
    )
    sub = tmp_path / "sub"
    sub.mkdir()
    monkeypatch.chdir(sub)

    rc = exactcalc.cli.main(["5", "6!"])
    assert rc == exactcalc.cli.EXIT_EVAL_ERROR
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["0b101"]
    assert "hint:" in captured.err


def test_bad_config_exit_code(tmp_path: Path, capsys) -> None:
    cfg = tmp_path / "exactcalc.toml"
    cfg.write_text("version = 2\n", encoding="utf-8")
    rc = exactcalc.cli.main(["--config", str(cfg), "1"])
    assert rc == exactcalc.cli.EXIT_CONFIG_ERROR
    assert "error: Unsupported config version" in capsys.readouterr().err


def test_invalid_precision_flag(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert exactcalc.cli.main(["--precision", "0", "1"]) == exactcalc.cli.EXIT_CONFIG_ERROR


def test_main_version_exits_zero(capsys) -> None:
    assert exactcalc.cli.main(["--version"]) == 0
    assert "exactcalc" in capsys.readouterr().out


def test_main_prints_very_large_result(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    rc = exactcalc.cli.main(["2000!"])
    assert rc == exactcalc.cli.EXIT_OK
    out = capsys.readouterr().out.strip()
    assert len(out) == 5736
    assert out.startswith("3316275092450633")
