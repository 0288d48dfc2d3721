"""Model registry: the in-memory set of model files a generation run visits."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from modelgen.core.errors import ConfigurationError, IllegalModelError, TypeNotFoundError
from modelgen.core.metamodel import (
    ClassDeclaration,
    Declaration,
    MapDeclaration,
    ModelFile,
    Property,
    ScalarDeclaration,
    load_model_file,
)
from modelgen.core.names import (
    fully_qualified_name,
    get_namespace,
    get_short_name,
    is_primitive_type,
)
from modelgen.core.system import (
    IMPLICIT_BASES,
    RESERVED_NAMESPACE,
    build_reserved_model,
    implicit_base_fqn,
    is_reserved_namespace,
)


METAMODEL_NAMESPACE = "modelgen.metamodel@1.0.0"
METAMODEL_PATH = Path(__file__).resolve().parents[1] / "specs" / f"{METAMODEL_NAMESPACE}.json"

_RESERVED_NAMES = frozenset(IMPLICIT_BASES.values())


def _coerce(model: ModelFile | dict) -> ModelFile:
    if isinstance(model, ModelFile):
        return model
    return ModelFile.model_validate(model)


class ModelRegistry:
    """Namespaced collection of model files with type resolution.

    Keys are namespaces (``name@version``). A fresh registry holds the reserved
    built-in model file unless ``add_reserved`` is false. Declarations may
    reference reserved base types (``Concept``, ``Asset``, ...) without an
    import, and keep resolving to the reserved namespace after the reserved
    entry has been removed.
    """

    def __init__(self, *, add_reserved: bool = True, add_metamodel: bool = False) -> None:
        self._model_files: dict[str, ModelFile] = {}
        if add_reserved:
            self._model_files[RESERVED_NAMESPACE] = build_reserved_model()
        if add_metamodel:
            self.add_model(load_model_file(METAMODEL_PATH))

    def __len__(self) -> int:
        return len(self._model_files)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._model_files

    def accept(self, visitor, parameters):
        """Hand the registry to a visitor (visitor design pattern)."""

        return visitor.visit(self, parameters)

    # -- mutation ---------------------------------------------------------

    def add_model(self, model: ModelFile | dict, *, validate: bool = True) -> ModelFile:
        """Add one model file; its dependencies must already be registered."""

        model_file = _coerce(model)
        if model_file.namespace in self._model_files:
            self._throw_already_exists(model_file)

        self._model_files[model_file.namespace] = model_file
        if validate:
            try:
                self._validate_model_file(model_file)
            except Exception:
                del self._model_files[model_file.namespace]
                raise
        return model_file

    def add_models(
        self, models: Iterable[ModelFile | dict], *, validate: bool = True
    ) -> list[ModelFile]:
        """Add several model files in any dependency order, all or nothing."""

        original = dict(self._model_files)
        added: list[ModelFile] = []
        try:
            for model in models:
                model_file = _coerce(model)
                if model_file.namespace in self._model_files:
                    self._throw_already_exists(model_file)
                self._model_files[model_file.namespace] = model_file
                added.append(model_file)
            if validate:
                for model_file in added:
                    self._validate_model_file(model_file)
        except Exception:
            self._model_files = original
            raise
        return added

    def update_model(self, model: ModelFile | dict, *, validate: bool = True) -> ModelFile:
        """Replace the model file registered under the same namespace."""

        model_file = _coerce(model)
        existing = self._model_files.get(model_file.namespace)
        if existing is None:
            raise IllegalModelError(f"Model file for namespace {model_file.namespace} not found")
        if is_reserved_namespace(model_file.namespace):
            raise IllegalModelError("The reserved namespace can not be updated")

        self._model_files[model_file.namespace] = model_file
        if validate:
            try:
                self._validate_model_file(model_file)
            except Exception:
                self._model_files[model_file.namespace] = existing
                raise
        return model_file

    def delete_model(self, namespace: str) -> None:
        """Remove the model file for a namespace."""

        if namespace not in self._model_files:
            raise ConfigurationError(f"Model file {namespace!r} does not exist")
        del self._model_files[namespace]

    def clear(self) -> None:
        self._model_files.clear()

    def load_directory(self, path: str | Path, pattern: str = "*.json") -> list[ModelFile]:
        """Add every model file found below a directory (sorted by path)."""

        root = Path(path)
        if not root.is_dir():
            raise ConfigurationError(f"Model directory {str(root)!r} does not exist")
        files = sorted(root.rglob(pattern))
        return self.add_models([load_model_file(file) for file in files])

    def _throw_already_exists(self, model_file: ModelFile) -> None:
        existing = self._model_files[model_file.namespace]
        postfix = f" in file {existing.file_name}" if existing.file_name else ""
        prefix = f" specified in file {model_file.file_name}" if model_file.file_name else ""
        raise IllegalModelError(
            f"Namespace {model_file.namespace}{prefix} is already declared{postfix}"
        )

    # -- lookup -----------------------------------------------------------

    def namespaces(self) -> list[str]:
        return sorted(self._model_files)

    def has_model(self, namespace: str) -> bool:
        return namespace in self._model_files

    def get_model(self, namespace: str) -> ModelFile | None:
        return self._model_files.get(namespace)

    def model_files(self, include_reserved: bool = False) -> list[ModelFile]:
        """Return registered model files sorted by namespace."""

        return [
            self._model_files[namespace]
            for namespace in sorted(self._model_files)
            if include_reserved or not is_reserved_namespace(namespace)
        ]

    def find_type(self, fqn: str) -> Declaration | None:
        model_file = self._model_files.get(get_namespace(fqn))
        if model_file is None:
            return None
        return model_file.get_declaration(get_short_name(fqn))

    def get_type(self, fqn: str) -> Declaration:
        """Return the declaration for a fully-qualified name."""

        decl = self.find_type(fqn)
        if decl is None:
            raise TypeNotFoundError(fqn)
        return decl

    def resolve_type(self, model_file: ModelFile, name: str) -> str:
        """Resolve a type name used inside ``model_file`` to a fully-qualified name.

        Primitive type names are returned unchanged.
        """

        if is_primitive_type(name):
            return name

        namespace = get_namespace(name)
        if namespace:
            if self.find_type(name) is None and not self._is_reserved_name(name):
                raise TypeNotFoundError(name)
            return name

        if model_file.get_declaration(name) is not None:
            return fully_qualified_name(model_file.namespace, name)

        for imp in model_file.imports:
            if imp.types is not None and name in imp.types:
                return fully_qualified_name(imp.namespace, name)

        for imp in model_file.imports:
            if imp.is_wildcard:
                target = self._model_files.get(imp.namespace)
                if target is not None and target.get_declaration(name) is not None:
                    return fully_qualified_name(imp.namespace, name)

        if name in _RESERVED_NAMES:
            return fully_qualified_name(RESERVED_NAMESPACE, name)

        raise TypeNotFoundError(
            name, f"Undeclared type {name!r} referenced in {model_file.namespace}"
        )

    def _is_reserved_name(self, fqn: str) -> bool:
        return get_namespace(fqn) == RESERVED_NAMESPACE and get_short_name(fqn) in _RESERVED_NAMES

    def model_file_of(self, fqn: str) -> ModelFile:
        model_file = self._model_files.get(get_namespace(fqn))
        if model_file is None:
            raise TypeNotFoundError(fqn)
        return model_file

    def super_type_of(self, fqn: str) -> str | None:
        """Return the fully-qualified super type, explicit or implicit."""

        decl = self.get_type(fqn)
        if not isinstance(decl, ClassDeclaration):
            return None
        if decl.super_type:
            return self.resolve_type(self.model_file_of(fqn), decl.super_type)
        if is_reserved_namespace(get_namespace(fqn)):
            return None
        return implicit_base_fqn(decl.kind)

    def explicit_super_type_of(self, fqn: str) -> str | None:
        decl = self.get_type(fqn)
        if isinstance(decl, ClassDeclaration) and decl.super_type:
            return self.resolve_type(self.model_file_of(fqn), decl.super_type)
        return None

    def direct_subclasses(self, fqn: str) -> list[str]:
        """Return fully-qualified names of classes whose super type is ``fqn``."""

        result: list[str] = []
        for model_file in self.model_files(include_reserved=True):
            for decl in model_file.class_declarations():
                candidate = fully_qualified_name(model_file.namespace, decl.name)
                if candidate != fqn and self.super_type_of(candidate) == fqn:
                    result.append(candidate)
        return result

    def all_properties(self, fqn: str) -> list[Property]:
        """Return inherited properties first, then the declaration's own."""

        chain: list[ClassDeclaration] = []
        current: str | None = fqn
        seen: set[str] = set()
        while current is not None and current not in seen:
            seen.add(current)
            decl = self.find_type(current)
            if not isinstance(decl, ClassDeclaration):
                break
            chain.append(decl)
            current = self.super_type_of(current)

        properties: list[Property] = []
        for decl in reversed(chain):
            properties.extend(decl.properties)
        return properties

    # -- validation -------------------------------------------------------

    def validate(self) -> None:
        """Validate every registered model file against the registry."""

        for model_file in self.model_files(include_reserved=True):
            self._validate_model_file(model_file)

    def _validate_model_file(self, model_file: ModelFile) -> None:
        for imp in model_file.imports:
            target = self._model_files.get(imp.namespace)
            if target is None:
                if is_reserved_namespace(imp.namespace):
                    continue
                raise IllegalModelError(
                    f"Namespace {imp.namespace} imported by {model_file.namespace} is not registered"
                )
            for type_name in imp.types or []:
                if target.get_declaration(type_name) is None:
                    raise TypeNotFoundError(
                        fully_qualified_name(imp.namespace, type_name),
                        f"Type {type_name!r} imported by {model_file.namespace} "
                        f"is not declared in {imp.namespace}",
                    )

        for decl in model_file.declarations:
            fqn = fully_qualified_name(model_file.namespace, decl.name)
            if isinstance(decl, ClassDeclaration):
                self._validate_class(model_file, decl, fqn)
            elif isinstance(decl, MapDeclaration):
                self._validate_map(model_file, decl)

    def _validate_class(self, model_file: ModelFile, decl: ClassDeclaration, fqn: str) -> None:
        if decl.super_type:
            super_fqn = self.resolve_type(model_file, decl.super_type)
            super_decl = self.find_type(super_fqn)
            if super_decl is not None:
                if not isinstance(super_decl, ClassDeclaration):
                    raise IllegalModelError(
                        f"{fqn} cannot extend {super_fqn}, which is not a class declaration"
                    )
                if super_decl.kind != decl.kind and not is_reserved_namespace(
                    get_namespace(super_fqn)
                ):
                    raise IllegalModelError(
                        f"{decl.kind} {fqn} cannot extend {super_decl.kind} {super_fqn}"
                    )

        seen = {fqn}
        current = self.super_type_of(fqn)
        while current is not None and self.find_type(current) is not None:
            if current in seen:
                raise IllegalModelError(f"Circular inheritance detected for {fqn}")
            seen.add(current)
            current = self.super_type_of(current)

        for prop in decl.properties:
            prop_fqn = self.resolve_type(model_file, prop.type)
            if prop.relationship:
                target = self.find_type(prop_fqn)
                if target is not None and not isinstance(target, ClassDeclaration):
                    raise IllegalModelError(
                        f"Relationship {decl.name}.{prop.name} must target a class declaration"
                    )

    def _validate_map(self, model_file: ModelFile, decl: MapDeclaration) -> None:
        key_fqn = self.resolve_type(model_file, decl.key)
        if not is_primitive_type(key_fqn):
            key_decl = self.find_type(key_fqn)
            if not (
                isinstance(key_decl, ScalarDeclaration)
                and key_decl.type in ("String", "DateTime")
            ):
                raise IllegalModelError(
                    f"Map key of {decl.name} must be a String or DateTime scalar"
                )
        self.resolve_type(model_file, decl.value)
