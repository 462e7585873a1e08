"""Configuration loading for exactcalc.

This module is intentionally small and deterministic: it only reads
`exactcalc.toml` and performs light validation.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from exactcalc.errors import CalcConfigError

CONFIG_FILENAME = "exactcalc.toml"

SUPPORTED_BASES = (2, 8, 10, 16)


@dataclass(frozen=True)
class Limits:
    max_depth: int = 64
    max_factorial: int = 10_000
    max_bits: int = 1_048_576
    max_operations: int = 100_000
    precision: int = 50
    timeout: float | None = None


@dataclass(frozen=True)
class OutputConfig:
    base: int = 10


@dataclass(frozen=True)
class CalcConfig:
    version: int
    limits: Limits
    output: OutputConfig


DEFAULT_LIMITS = Limits()


def default_config() -> CalcConfig:
    return CalcConfig(version=1, limits=DEFAULT_LIMITS, output=OutputConfig())


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `exactcalc.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise CalcConfigError(
        f"Could not find {CONFIG_FILENAME} by walking upward from start path."
    )


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CalcConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise CalcConfigError(f"Expected {name} to be an integer.")
    return value


def _as_positive_int(value: Any, *, name: str) -> int:
    i = _as_int(value, name=name)
    if i < 1:
        raise CalcConfigError(f"Invalid config: {name} must be >= 1.")
    return i


def _as_seconds(value: Any, *, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CalcConfigError(f"Expected {name} to be a number of seconds.")
    if value <= 0:
        raise CalcConfigError(f"Invalid config: {name} must be > 0.")
    return float(value)


def validate_base(base: int) -> int:
    if base not in SUPPORTED_BASES:
        raise CalcConfigError(
            f"Unsupported output base: {base} (expected one of {list(SUPPORTED_BASES)})."
        )
    return base


def parse_limits(tbl: dict[str, Any]) -> Limits:
    """Build `Limits` from a `[limits]` table; unknown keys are rejected."""

    known = {f.name for f in fields(Limits)}
    unknown = sorted(set(tbl) - known)
    if unknown:
        raise CalcConfigError(f"Unknown key(s) in [limits]: {', '.join(unknown)}")

    kwargs: dict[str, Any] = {}
    for key in ("max_depth", "max_factorial", "max_bits", "max_operations", "precision"):
        if key in tbl:
            kwargs[key] = _as_positive_int(tbl[key], name=f"limits.{key}")
    if "timeout" in tbl:
        kwargs["timeout"] = _as_seconds(tbl["timeout"], name="limits.timeout")
    return Limits(**kwargs)


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> CalcConfig:
    """Load and validate `exactcalc.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise CalcConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise CalcConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CalcConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise CalcConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise CalcConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise CalcConfigError(f"Unsupported config version: {version_i} (expected 1).")

    limits = parse_limits(_as_table(data.get("limits"), name="limits"))

    output_tbl = _as_table(data.get("output"), name="output")
    if "base" in output_tbl:
        base = validate_base(_as_int(output_tbl["base"], name="output.base"))
    else:
        base = 10

    return CalcConfig(version=version_i, limits=limits, output=OutputConfig(base=base))
