from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

from modelgen.cli import validate as cli_validate

ROOT = Path(__file__).resolve().parents[2]


def _payload(namespace: str = "org.acme.hr@1.0.0") -> dict:
    return {
        "namespace": namespace,
        "declarations": [
            {"kind": "concept", "name": "Address", "properties": [{"name": "city", "type": "String"}]}
        ],
    }


def _write(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_validate_ok(tmp_path: Path, capsys) -> None:
    first = _write(tmp_path / "a.json", _payload())
    second = _write(tmp_path / "b.json", _payload("org.acme.other@1.0.0"))

    assert cli_validate.main([str(first), str(second)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "OK: org.acme.hr@1.0.0",
        "OK: org.acme.other@1.0.0",
    ]


def test_cli_validate_directory_resolves_imports(tmp_path: Path, capsys) -> None:
    _write(tmp_path / "hr.json", _payload())
    _write(
        tmp_path / "payroll.json",
        {
            "namespace": "org.acme.payroll@1.0.0",
            "imports": [{"namespace": "org.acme.hr@1.0.0", "types": ["Address"]}],
            "declarations": [
                {"kind": "concept", "name": "Slip", "properties": [{"name": "a", "type": "Address"}]}
            ],
        },
    )

    assert cli_validate.main([str(tmp_path)]) == 0
    assert "OK: org.acme.payroll@1.0.0" in capsys.readouterr().out


def test_cli_validate_undeclared_type(tmp_path: Path, capsys) -> None:
    payload = _payload()
    payload["declarations"][0]["properties"].append({"name": "x", "type": "Nope"})
    path = _write(tmp_path / "bad.json", payload)

    assert cli_validate.main([str(path)]) == 1
    assert "ERROR: Undeclared type 'Nope'" in capsys.readouterr().out


def test_cli_validate_schema_error_subprocess(tmp_path: Path) -> None:
    path = _write(tmp_path / "bad.json", {"namespace": "unversioned"})

    result = subprocess.run(
        [sys.executable, "-m", "modelgen.cli.validate", str(path)],
        capture_output=True,
        text=True,
        check=False,
        cwd=ROOT,
    )

    assert result.returncode == 1
    assert "ERROR" in result.stdout
