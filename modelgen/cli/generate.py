"""CLI entrypoint for code generation from a directory of model files."""

from __future__ import annotations

import argparse
from pathlib import Path

from modelgen.codegen import FORMATS, get_visitor
from modelgen.core.registry import ModelRegistry
from modelgen.driver import report, run
from modelgen.trace import SafeTraceLogger


def main(argv: list[str] | None = None) -> int:
    """Run the generation CLI."""

    parser = argparse.ArgumentParser(description="Generate code from model files.")
    parser.add_argument("model_dir", help="Directory of model JSON files.")
    parser.add_argument(
        "--format",
        choices=sorted(FORMATS),
        default="typescript",
        help="Target format.",
    )
    parser.add_argument("--out-dir", required=True, help="Output directory.")
    parser.add_argument(
        "--module-import-path",
        help="Import specifier for reserved definitions (default: per format).",
    )
    parser.add_argument(
        "--include-reserved",
        action="store_true",
        help="Keep the reserved built-in model and emit its definitions.",
    )
    parser.add_argument(
        "--create-dirs",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Create the output directory when missing (default: true).",
    )
    parser.add_argument("--trace-out", help="Append JSONL trace events to this path.")
    args = parser.parse_args(argv)

    try:
        registry = ModelRegistry()
        registry.load_directory(args.model_dir)
        visitor = get_visitor(args.format)
    except Exception as exc:  # noqa: BLE001 - CLI boundary
        print(f"ERROR: {exc}")
        return 1

    trace = SafeTraceLogger(Path(args.trace_out)) if args.trace_out else None
    try:
        result = run(
            args.out_dir,
            visitor,
            registry=registry,
            module_import_path=args.module_import_path,
            remove_reserved=not args.include_reserved,
            include_reserved=args.include_reserved,
            create_dirs=args.create_dirs,
            trace=trace,
        )
    finally:
        if trace is not None:
            trace.flush()
            trace.close()

    if not result.ok:
        return report(result)
    print(f"OK: {len(result.files)} files -> {result.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
