from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import polars as pl

from corresponding.core.engine import GenerationResult, generate
from corresponding.core.errors import CorrespondingError
from corresponding.core.grammar import operation_kind_from_value
from corresponding.io import GeneratorSettings, load_schemas
from corresponding.io.render import render_module
from corresponding.io.report import correspondence_frame, pair_summary


def _info(msg: str) -> None:
    print(f"[INFO] {msg}", file=sys.stderr)


def _warn(msg: str) -> None:
    print(f"[WARN] {msg}", file=sys.stderr)


def _common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("source", type=str, help="Schema source: .py module or .json/.yaml manifest.")
    p.add_argument("--config", type=str, default=None, help="Explicit TOML config path.")
    p.add_argument("--marker", type=str, default=None, help="Optional wrapper name override.")
    p.add_argument("--strict", action="store_true", help="Fail on the first invalid schema.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")


def _settings_from_args(args: argparse.Namespace) -> GeneratorSettings:
    s = GeneratorSettings.load(args.config)
    overrides: dict[str, object] = {}
    if args.marker:
        overrides["optional_marker"] = args.marker
    if args.strict:
        overrides["strict"] = True
    return GeneratorSettings._apply_mapping(s, overrides)


def _run(args: argparse.Namespace) -> tuple[GeneratorSettings, GenerationResult]:
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    settings = _settings_from_args(args)
    schemas = load_schemas(Path(args.source), settings)
    _info(f"Loaded {len(schemas)} schemas from {args.source}")
    result = generate(schemas, **settings.engine_options())
    for err in result.errors:
        _warn(f"Skipped schema: {err}")
    return settings, result


def _cmd_generate(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="generate",
        description="Render move-corresponding and conversion functions as Python source.",
    )
    _common_args(p)
    p.add_argument("--out", type=str, default="", help="Output file (default: stdout).")
    p.add_argument(
        "--import-from",
        type=str,
        default="",
        help="Module to import schema classes from in the rendered code.",
    )
    args = p.parse_args(argv)

    settings, result = _run(args)
    code = render_module(result, settings, import_from=args.import_from or None)
    if args.out:
        out = Path(args.out)
        out.write_text(code, encoding="utf-8")
        _info(f"Wrote {len(result.operations)} operations to {out}")
    else:
        sys.stdout.write(code)
    return 0 if result.ok else 1


def _cmd_report(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="report", description="Show the correspondence table.")
    _common_args(p)
    p.add_argument("--n", type=int, default=20, help="Rows to display.")
    p.add_argument("--summary", action="store_true", help="Show per-pair counts only.")
    p.add_argument(
        "--kind",
        type=operation_kind_from_value,
        default=None,
        help="Only show operations of this kind (move or convert).",
    )
    args = p.parse_args(argv)

    _, result = _run(args)
    if args.summary:
        df = pair_summary(result, args.kind)
    else:
        df = correspondence_frame(result, args.kind)
    with pl.Config(tbl_rows=args.n):
        print(df.head(args.n))
    return 0 if result.ok else 1


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="corresponding", description="Generate field-synchronization functions."
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("generate")
    sub.add_parser("report")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    try:
        if cmd == "generate":
            code = _cmd_generate(rest)
        elif cmd == "report":
            code = _cmd_report(rest)
        else:
            print(f"Unknown command: {cmd}", file=sys.stderr)
            code = 2
    except CorrespondingError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
