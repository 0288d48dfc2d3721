"""Build-time generation of TypeScript types for the bundled metamodel.

Writes into ``generated/`` at the repository root, resolved from this file's
location rather than the working directory. Environment overrides:

- ``MODELGEN_OUT_DIR``: output directory.
- ``MODELGEN_MODULE_IMPORT_PATH``: import specifier for reserved definitions.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modelgen.codegen import TypeScriptVisitor
from modelgen.core.registry import ModelRegistry
from modelgen.driver import report, run

OUT_DIR = ROOT / "generated"
MODULE_IMPORT_PATH = "./concerto"


def _build_registry() -> ModelRegistry:
    return ModelRegistry(add_metamodel=True)


def main() -> int:
    out_dir = Path(os.getenv("MODELGEN_OUT_DIR") or OUT_DIR)
    module_import_path = os.getenv("MODELGEN_MODULE_IMPORT_PATH") or MODULE_IMPORT_PATH
    result = run(
        out_dir,
        TypeScriptVisitor(),
        registry=_build_registry,
        module_import_path=module_import_path,
    )
    if result.ok:
        print(f"OK: {len(result.files)} files -> {result.output_dir}")
    return report(result)


if __name__ == "__main__":
    raise SystemExit(main())
