from __future__ import annotations

from pathlib import Path

import pytest

from exactcalc.config import (
    DEFAULT_LIMITS,
    Limits,
    default_config,
    find_project_root,
    load_config,
)
from exactcalc.errors import CalcConfigError


def _write(tmp_path: Path, lines: list[str]) -> None:
    (tmp_path / "exactcalc.toml").write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_load_minimal_config_defaults_apply(tmp_path: Path) -> None:
    _write(tmp_path, ["version = 1"])
    cfg = load_config(root=tmp_path)

    assert cfg.version == 1
    assert cfg.limits == DEFAULT_LIMITS
    assert cfg.limits.max_depth == 64
    assert cfg.limits.max_factorial == 10_000
    assert cfg.limits.max_bits == 1_048_576
    assert cfg.limits.max_operations == 100_000
    assert cfg.limits.precision == 50
    assert cfg.limits.timeout is None
    assert cfg.output.base == 10


def test_load_config_overrides_work(tmp_path: Path) -> None:
    _write(
        tmp_path,
        [
            "version = 1",
            "",
            "[limits]",
            "max_depth = 16",
            "max_factorial = 500",
            "max_bits = 4096",
            "max_operations = 1000",
            "precision = 20",
            "timeout = 1.5",
            "",
            "[output]",
            "base = 16",
        ],
    )
    cfg = load_config(root=tmp_path)
    assert cfg.limits == Limits(
        max_depth=16,
        max_factorial=500,
        max_bits=4096,
        max_operations=1000,
        precision=20,
        timeout=1.5,
    )
    assert cfg.output.base == 16


def test_config_path_without_root(tmp_path: Path) -> None:
    p = tmp_path / "custom.toml"
    p.write_text("version = 1\n[output]\nbase = 2\n", encoding="utf-8")
    assert load_config(config_path=p).output.base == 2


def test_invalid_toml_raises(tmp_path: Path) -> None:
    (tmp_path / "exactcalc.toml").write_text("version = \n", encoding="utf-8")
    with pytest.raises(CalcConfigError):
        load_config(root=tmp_path)


def test_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(CalcConfigError):
        load_config(config_path=tmp_path / "exactcalc.toml")


@pytest.mark.parametrize(
    "lines",
    [
        [],  # missing version
        ["version = 2"],
        ["version = 1", "limits = 3"],
        ["version = 1", "[limits]", "max_depth = 0"],
        ["version = 1", "[limits]", "precision = true"],
        ["version = 1", "[limits]", "timeout = -1"],
        ["version = 1", "[limits]", "max_stack = 3"],
        ["version = 1", "[output]", "base = 3"],
    ],
)
def test_validation_errors(tmp_path: Path, lines: list[str]) -> None:
    _write(tmp_path, lines)
    with pytest.raises(CalcConfigError):
        load_config(root=tmp_path)


def test_find_project_root_success(tmp_path: Path) -> None:
    _write(tmp_path, ["version = 1"])
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)

    assert find_project_root(deep) == tmp_path
    some_file = deep / "x.txt"
    some_file.write_text("x\n", encoding="utf-8")
    assert find_project_root(some_file) == tmp_path


def test_find_project_root_failure(tmp_path: Path) -> None:
    deep = tmp_path / "a" / "b"
    deep.mkdir(parents=True)
    with pytest.raises(CalcConfigError) as ei:
        find_project_root(deep)
    assert "exactcalc.toml" in str(ei.value)


def test_default_config() -> None:
    cfg = default_config()
    assert cfg.limits is DEFAULT_LIMITS
    assert cfg.output.base == 10
