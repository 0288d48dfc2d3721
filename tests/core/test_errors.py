from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from modelgen.core.errors import (
    ConfigurationError,
    FailureKind,
    GenerationIOError,
    TypeNotFoundError,
    VisitationError,
    classify_exception,
)
from modelgen.core.metamodel import ModelFile


def test_generation_error_str_includes_component() -> None:
    exc = VisitationError("boom", component="typescript")

    assert str(exc) == "typescript: boom"
    assert exc.message == "boom"
    assert str(ConfigurationError("missing")) == "missing"


def test_classify_generation_errors_by_kind() -> None:
    assert classify_exception(ConfigurationError("x"))[0] == FailureKind.CONFIGURATION
    assert classify_exception(VisitationError("x"))[0] == FailureKind.VISITATION
    assert classify_exception(GenerationIOError("x"))[0] == FailureKind.IO
    assert classify_exception(TypeNotFoundError("a.B"))[0] == FailureKind.ILLEGAL_MODEL


def test_classify_foreign_exceptions() -> None:
    with pytest.raises(json.JSONDecodeError) as json_exc:
        json.loads("{")
    with pytest.raises(ValidationError) as validation_exc:
        ModelFile.model_validate({"namespace": "org.acme"})

    assert classify_exception(json_exc.value)[0] == FailureKind.JSON_PARSE
    assert classify_exception(validation_exc.value)[0] == FailureKind.SCHEMA_VALIDATION
    assert classify_exception(PermissionError("denied"))[0] == FailureKind.IO
    assert classify_exception(KeyError("k"))[0] == FailureKind.UNKNOWN


def test_classify_truncates_long_messages() -> None:
    kind, message = classify_exception(RuntimeError("x" * 500))

    assert kind == FailureKind.UNKNOWN
    assert len(message) == 243
    assert message.endswith("...")


def test_type_not_found_default_message() -> None:
    exc = TypeNotFoundError("org.acme@1.0.0.Missing")

    assert exc.type_name == "org.acme@1.0.0.Missing"
    assert "not found" in str(exc)
