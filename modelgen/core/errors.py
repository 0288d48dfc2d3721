"""Error types and failure classification for generation runs."""

from __future__ import annotations

import json
from enum import Enum

from pydantic import ValidationError


class FailureKind(str, Enum):
    """Standardized failure kinds for generation runs."""

    CONFIGURATION = "configuration"
    ILLEGAL_MODEL = "illegal_model"
    SCHEMA_VALIDATION = "schema_validation"
    JSON_PARSE = "json_parse"
    VISITATION = "visitation"
    IO = "io"
    UNKNOWN = "unknown"


class GenerationError(Exception):
    """Base class for errors raised while loading models or emitting code."""

    kind: FailureKind = FailureKind.UNKNOWN

    def __init__(self, message: str, *, component: str | None = None) -> None:
        self.message = message
        self.component = component
        super().__init__(message)

    def __str__(self) -> str:
        if self.component:
            return f"{self.component}: {self.message}"
        return self.message


class ConfigurationError(GenerationError):
    """Registry or run configuration does not match what the run expects."""

    kind = FailureKind.CONFIGURATION


class IllegalModelError(GenerationError):
    """A model file is structurally valid but semantically broken."""

    kind = FailureKind.ILLEGAL_MODEL


class TypeNotFoundError(IllegalModelError):
    """A referenced type could not be resolved in the registry."""

    def __init__(self, type_name: str, message: str | None = None) -> None:
        self.type_name = type_name
        super().__init__(message or f"Type {type_name!r} not found")


class VisitationError(GenerationError):
    """The visitor pass failed."""

    kind = FailureKind.VISITATION


class GenerationIOError(GenerationError):
    """The output sink could not write."""

    kind = FailureKind.IO


_MAX_MESSAGE_LEN = 240


def _truncate_message(message: str, limit: int = _MAX_MESSAGE_LEN) -> str:
    if len(message) <= limit:
        return message
    return message[:limit] + "..."


def classify_exception(exc: BaseException) -> tuple[FailureKind, str]:
    """Classify an exception into a failure kind and normalized message."""

    message = str(exc)

    if isinstance(exc, GenerationError):
        return exc.kind, _truncate_message(message)

    if isinstance(exc, json.JSONDecodeError):
        return FailureKind.JSON_PARSE, _truncate_message(message)

    if isinstance(exc, ValidationError):
        return FailureKind.SCHEMA_VALIDATION, _truncate_message(message)

    if isinstance(exc, OSError):
        return FailureKind.IO, _truncate_message(message)

    return FailureKind.UNKNOWN, _truncate_message(message)
