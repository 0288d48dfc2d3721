"""Code-generation visitors, one per target format."""

from modelgen.codegen.markdown import MarkdownVisitor
from modelgen.codegen.params import GenerationParameters
from modelgen.codegen.python import PythonVisitor
from modelgen.codegen.typescript import TypeScriptVisitor
from modelgen.codegen.visitor import BaseVisitor, ModelVisitor
from modelgen.core.errors import ConfigurationError

FORMATS: dict[str, type[BaseVisitor]] = {
    MarkdownVisitor.name: MarkdownVisitor,
    PythonVisitor.name: PythonVisitor,
    TypeScriptVisitor.name: TypeScriptVisitor,
}


def get_visitor(name: str) -> BaseVisitor:
    """Return a fresh visitor for a format name."""

    try:
        visitor_cls = FORMATS[name.lower()]
    except KeyError:
        supported = ", ".join(sorted(FORMATS))
        raise ConfigurationError(
            f"Unrecognized code generator: {name!r} (supported: {supported})"
        ) from None
    return visitor_cls()


__all__ = [
    "BaseVisitor",
    "FORMATS",
    "GenerationParameters",
    "MarkdownVisitor",
    "ModelVisitor",
    "PythonVisitor",
    "TypeScriptVisitor",
    "get_visitor",
]
