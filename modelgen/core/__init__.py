"""Core model registry functionality."""

from modelgen.core.errors import (
    ConfigurationError,
    FailureKind,
    GenerationError,
    GenerationIOError,
    IllegalModelError,
    TypeNotFoundError,
    VisitationError,
    classify_exception,
)
from modelgen.core.metamodel import ModelFile, dump_model_file, load_model_file
from modelgen.core.registry import METAMODEL_NAMESPACE, ModelRegistry
from modelgen.core.system import RESERVED_NAMESPACE

__all__ = [
    "ConfigurationError",
    "FailureKind",
    "GenerationError",
    "GenerationIOError",
    "IllegalModelError",
    "METAMODEL_NAMESPACE",
    "ModelFile",
    "ModelRegistry",
    "RESERVED_NAMESPACE",
    "TypeNotFoundError",
    "VisitationError",
    "classify_exception",
    "dump_model_file",
    "load_model_file",
]
