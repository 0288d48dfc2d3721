from __future__ import annotations

import importlib.util
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "generate_types.py"
METAMODEL_FILE = "modelgen.metamodel@1.0.0.ts"


def _run(tmp_path: Path, **env: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, str(SCRIPT)],
        capture_output=True,
        text=True,
        check=False,
        cwd=tmp_path,
        env={**os.environ, **env},
    )


def test_generate_types_writes_metamodel_interfaces(tmp_path: Path) -> None:
    out_dir = tmp_path / "generated"

    result = _run(tmp_path, MODELGEN_OUT_DIR=str(out_dir))

    assert result.returncode == 0, result.stderr
    assert sorted(path.name for path in out_dir.iterdir()) == [METAMODEL_FILE]
    text = (out_dir / METAMODEL_FILE).read_text(encoding="utf-8")
    assert "import type { IConcept } from './concerto';" in text
    assert "export interface IDecorator extends IConcept {" in text
    assert "    arguments?: (string | number | boolean)[];" in text
    assert "export interface IClassDeclaration extends IDeclaration {" in text
    assert "export type ModelFileIndex = Record<string, IModelFile>;" in text


def test_generate_types_is_idempotent(tmp_path: Path) -> None:
    out_dir = tmp_path / "generated"

    assert _run(tmp_path, MODELGEN_OUT_DIR=str(out_dir)).returncode == 0
    first = (out_dir / METAMODEL_FILE).read_bytes()
    assert _run(tmp_path, MODELGEN_OUT_DIR=str(out_dir)).returncode == 0
    assert (out_dir / METAMODEL_FILE).read_bytes() == first


def test_generate_types_module_import_path_override(tmp_path: Path) -> None:
    out_dir = tmp_path / "generated"

    result = _run(
        tmp_path,
        MODELGEN_OUT_DIR=str(out_dir),
        MODELGEN_MODULE_IMPORT_PATH="@acme/concerto",
    )

    assert result.returncode == 0
    text = (out_dir / METAMODEL_FILE).read_text(encoding="utf-8")
    assert "import type { IConcept } from '@acme/concerto';" in text


def test_generate_types_reports_io_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    result = _run(tmp_path, MODELGEN_OUT_DIR=str(blocker / "out"))

    assert result.returncode == 1
    assert result.stderr.startswith("ERROR: Cannot create output directory")


def _load_script():
    spec = importlib.util.spec_from_file_location("generate_types_script", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_default_out_dir_is_relative_to_the_script(tmp_path: Path, monkeypatch) -> None:
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    monkeypatch.delenv("MODELGEN_OUT_DIR", raising=False)
    monkeypatch.delenv("MODELGEN_MODULE_IMPORT_PATH", raising=False)

    script = _load_script()

    assert script.ROOT == ROOT
    assert script.OUT_DIR == ROOT / "generated"
    assert script.OUT_DIR.is_absolute()

    fake_root = tmp_path / "checkout"
    monkeypatch.setattr(script, "ROOT", fake_root)
    monkeypatch.setattr(script, "OUT_DIR", fake_root / "generated")

    assert script.main() == 0
    assert (fake_root / "generated" / METAMODEL_FILE).is_file()
    assert list(elsewhere.iterdir()) == []
