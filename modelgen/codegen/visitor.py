"""Visitor protocol and node-type dispatch shared by all target languages."""

from __future__ import annotations

from typing import Protocol

from modelgen.codegen.params import GenerationParameters
from modelgen.core.errors import VisitationError
from modelgen.core.metamodel import (
    ClassDeclaration,
    EnumDeclaration,
    MapDeclaration,
    ModelFile,
    Property,
    ScalarDeclaration,
)
from modelgen.core.names import fully_qualified_name
from modelgen.core.registry import ModelRegistry
from modelgen.core.system import is_reserved_namespace


class ModelVisitor(Protocol):
    """Anything that can walk a registry and emit files to the output sink."""

    def visit(self, thing: object, parameters: GenerationParameters) -> object: ...


class BaseVisitor:
    """Dispatches on node type and tracks the registry and model file in scope.

    Subclasses implement the ``visit_*`` hooks they need; the default
    ``visit_registry`` visits every model file in namespace order, skipping
    reserved definitions unless the parameters ask for them.
    """

    name = "base"
    file_extension = ""
    default_module_import_path = ""

    def __init__(self) -> None:
        self.registry: ModelRegistry | None = None
        self.model_file: ModelFile | None = None

    def visit(self, thing: object, parameters: GenerationParameters) -> object:
        if isinstance(thing, ModelRegistry):
            self.registry = thing
            return self.visit_registry(thing, parameters)
        if isinstance(thing, ModelFile):
            self.model_file = thing
            try:
                return self.visit_model_file(thing, parameters)
            finally:
                self.model_file = None
        if isinstance(thing, ClassDeclaration):
            return self.visit_class_declaration(thing, parameters)
        if isinstance(thing, EnumDeclaration):
            return self.visit_enum_declaration(thing, parameters)
        if isinstance(thing, ScalarDeclaration):
            return self.visit_scalar_declaration(thing, parameters)
        if isinstance(thing, MapDeclaration):
            return self.visit_map_declaration(thing, parameters)
        if isinstance(thing, Property):
            return self.visit_property(thing, parameters)
        raise VisitationError(
            f"Unrecognised type: {type(thing).__name__}, value: {thing!r:.200}",
            component=self.name,
        )

    def visit_registry(self, registry: ModelRegistry, parameters: GenerationParameters) -> None:
        for model_file in registry.model_files(
            include_reserved=parameters.include_reserved_definitions
        ):
            model_file.accept(self, parameters)
        return None

    def visit_model_file(self, model_file: ModelFile, parameters: GenerationParameters) -> None:
        for decl in model_file.declarations:
            decl.accept(self, parameters)
        return None

    def visit_class_declaration(self, decl: ClassDeclaration, parameters: GenerationParameters):
        return None

    def visit_enum_declaration(self, decl: EnumDeclaration, parameters: GenerationParameters):
        return None

    def visit_scalar_declaration(self, decl: ScalarDeclaration, parameters: GenerationParameters):
        return None

    def visit_map_declaration(self, decl: MapDeclaration, parameters: GenerationParameters):
        return None

    def visit_property(self, prop: Property, parameters: GenerationParameters):
        return None

    # -- helpers ----------------------------------------------------------

    def _scope(self) -> tuple[ModelRegistry, ModelFile]:
        if self.registry is None or self.model_file is None:
            raise VisitationError(
                "Declarations can only be visited through a registry and model file",
                component=self.name,
            )
        return self.registry, self.model_file

    def fqn(self, name: str) -> str:
        _, model_file = self._scope()
        return fully_qualified_name(model_file.namespace, name)

    def is_emitted(self, namespace: str, parameters: GenerationParameters) -> bool:
        """True when ``namespace`` produces its own output file in this run."""

        if is_reserved_namespace(namespace):
            if not parameters.include_reserved_definitions:
                return False
        return self.registry is not None and self.registry.has_model(namespace)
