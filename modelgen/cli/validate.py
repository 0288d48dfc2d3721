"""Validation CLI for model JSON files."""

from __future__ import annotations

import argparse
from pathlib import Path

from modelgen.core.metamodel import load_model_file
from modelgen.core.registry import ModelRegistry


def main(argv: list[str] | None = None) -> int:
    """Validate model files, together, from the command line."""

    parser = argparse.ArgumentParser(description="Validate model JSON files.")
    parser.add_argument(
        "paths",
        nargs="+",
        help="Model JSON files or directories containing them.",
    )
    args = parser.parse_args(argv)

    try:
        files: list[Path] = []
        for raw in args.paths:
            path = Path(raw)
            if path.is_dir():
                files.extend(sorted(path.rglob("*.json")))
            else:
                files.append(path)
        registry = ModelRegistry()
        added = registry.add_models([load_model_file(file) for file in files])
    except Exception as exc:  # noqa: BLE001 - CLI boundary
        print(f"ERROR: {exc}")
        return 1

    for model_file in added:
        print(f"OK: {model_file.namespace}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
