from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from exactcalc import __version__
from exactcalc.builtins import default_functions
from exactcalc.config import (
    SUPPORTED_BASES,
    CalcConfig,
    default_config,
    find_project_root,
    load_config,
)
from exactcalc.diagnostics import format_error
from exactcalc.errors import CalcConfigError, CalcError
from exactcalc.evaluator import evaluate
from exactcalc.render import format_number

logger = logging.getLogger("exactcalc.cli")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_EVAL_ERROR = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exactcalc",
        description="Evaluate arithmetic expressions exactly.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (defaults to searching upward from cwd for exactcalc.toml).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to exactcalc.toml (defaults to <root>/exactcalc.toml).",
    )
    parser.add_argument(
        "--base",
        type=int,
        choices=SUPPORTED_BASES,
        default=None,
        help="Output base for integer results (overrides output.base).",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Significant digits for inexact results (overrides limits.precision).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("expressions", nargs="+", metavar="EXPR", help="Expression(s) to evaluate.")
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _load_config(args: argparse.Namespace) -> CalcConfig:
    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None

    if root is None and config_path is None:
        try:
            root = find_project_root(Path.cwd())
        except CalcConfigError:
            logger.debug("No exactcalc.toml found; using default configuration")
            return default_config()

    return load_config(root=root, config_path=config_path)


def _apply_overrides(cfg: CalcConfig, args: argparse.Namespace) -> CalcConfig:
    limits = cfg.limits
    if args.precision is not None:
        if args.precision < 1:
            raise CalcConfigError("Invalid option: --precision must be >= 1.")
        limits = dataclasses.replace(limits, precision=args.precision)
    output = cfg.output
    if args.base is not None:
        output = dataclasses.replace(output, base=args.base)
    return dataclasses.replace(cfg, limits=limits, output=output)


def cmd_eval(args: argparse.Namespace) -> int:
    try:
        cfg = _apply_overrides(_load_config(args), args)
    except CalcConfigError as e:
        _eprint(format_error(e))
        return EXIT_CONFIG_ERROR

    functions = default_functions(cfg.limits)
    rc = EXIT_OK
    for text in args.expressions:
        try:
            value = evaluate(text, functions, limits=cfg.limits)
            print(format_number(value, cfg.output.base))
        except CalcError as e:
            _eprint(format_error(e, text=text, function_names=functions.names()))
            rc = EXIT_EVAL_ERROR
    return rc


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG_ERROR

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s"
        )

    return cmd_eval(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
