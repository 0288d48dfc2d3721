"""TypeScript interface generation."""

from __future__ import annotations

from modelgen.codegen.params import GenerationParameters
from modelgen.codegen.visitor import BaseVisitor
from modelgen.core.metamodel import (
    ClassDeclaration,
    EnumDeclaration,
    MapDeclaration,
    ModelFile,
    Property,
    ScalarDeclaration,
)
from modelgen.core.names import (
    get_namespace,
    get_short_name,
    is_primitive_type,
    namespace_to_module,
)


OVERRIDE_DECORATOR = "CodeGen_TypeScript_Override"

_TS_PRIMITIVES = {
    "DateTime": "Date",
    "Boolean": "boolean",
    "String": "string",
    "Double": "number",
    "Long": "number",
    "Integer": "number",
}


class TypeScriptVisitor(BaseVisitor):
    """Emit one ``<namespace>.ts`` file of interfaces per model file.

    Class declarations become ``I<Name>`` interfaces. Types from other emitted
    namespaces are imported from ``./<namespace>``; reserved types that are not
    emitted are imported from ``parameters.module_import_path``.
    Imported names that clash with each other or with a local declaration
    are aliased as ``<name>_<module>``.
    """

    name = "typescript"
    file_extension = ".ts"
    default_module_import_path = "./concerto"

    def __init__(self) -> None:
        super().__init__()
        self._aliases: dict[str, str] = {}

    def visit_model_file(self, model_file: ModelFile, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        sink.open_file(model_file.namespace + self.file_extension)
        sink.write_line(0, "/* eslint-disable @typescript-eslint/no-empty-interface */")
        sink.write_line(0, f"// Generated code for namespace: {model_file.namespace}")
        sink.write_line(0, "")
        sink.write_line(0, "// imports")

        referenced = self._referenced_types(model_file, parameters)
        self._aliases = self._alias_map(model_file, referenced)
        try:
            for specifier, names in self._collect_imports(referenced, parameters):
                sink.write_line(0, f"import type {{ {', '.join(names)} }} from '{specifier}';")

            sink.write_line(0, "")
            sink.write_line(0, "// interfaces")
            for decl in model_file.declarations:
                decl.accept(self, parameters)
        finally:
            self._aliases = {}

        sink.close_file()
        return None

    def visit_class_declaration(
        self, decl: ClassDeclaration, parameters: GenerationParameters
    ) -> None:
        registry, _ = self._scope()
        sink = parameters.output_sink
        fqn = self.fqn(decl.name)

        super_fqn = registry.super_type_of(fqn)
        extends = f" extends {self.type_name(super_fqn)}" if super_fqn else ""
        sink.write_line(0, f"export interface I{decl.name}{extends} {{")
        if super_fqn is None:
            sink.write_line(1, "$class?: string;")
        for prop in decl.properties:
            prop.accept(self, parameters)
        sink.write_line(0, "}")
        sink.write_line(0, "")

        subclasses = [
            sub for sub in registry.direct_subclasses(fqn)
            if self._is_visible(sub, parameters)
        ]
        if subclasses:
            members = " | \n".join(self.type_name(sub) for sub in subclasses)
            sink.write_line(0, f"export type {decl.name}Union = {members};")
            sink.write_line(0, "")
        return None

    def visit_property(self, prop: Property, parameters: GenerationParameters) -> None:
        optional = "?" if prop.optional else ""
        override = prop.get_decorator(OVERRIDE_DECORATOR)
        if override is not None and override.arguments:
            parameters.output_sink.write_line(1, f"{prop.name}{optional}: {override.arguments[0]};")
            return None

        array = "[]" if prop.array else ""
        ts_type = self.to_ts_type(prop.type)
        parameters.output_sink.write_line(1, f"{prop.name}{optional}: {ts_type}{array};")
        return None

    def visit_enum_declaration(self, decl: EnumDeclaration, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        sink.write_line(0, f"export enum {decl.name} {{")
        for value in decl.values:
            sink.write_line(1, f"{value} = '{value}',")
        sink.write_line(0, "}")
        sink.write_line(0, "")
        return None

    def visit_scalar_declaration(
        self, decl: ScalarDeclaration, parameters: GenerationParameters
    ) -> None:
        sink = parameters.output_sink
        sink.write_line(0, f"export type {decl.name} = {_TS_PRIMITIVES[decl.type]};")
        sink.write_line(0, "")
        return None

    def visit_map_declaration(self, decl: MapDeclaration, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        override = decl.get_decorator(OVERRIDE_DECORATOR)
        if override is not None and override.arguments:
            sink.write_line(0, f"export type {decl.name} = {override.arguments[0]};")
        else:
            key_type = self._map_key_type(decl.key)
            value_type = self.to_ts_type(decl.value)
            sink.write_line(0, f"export type {decl.name} = Record<{key_type}, {value_type}>;")
        sink.write_line(0, "")
        return None

    def to_ts_type(self, type_name: str) -> str:
        """Map a model type name to the TypeScript type emitted for it."""

        registry, model_file = self._scope()
        if is_primitive_type(type_name):
            return _TS_PRIMITIVES[type_name]
        return self.type_name(registry.resolve_type(model_file, type_name))

    def type_name(self, fqn: str) -> str:
        """Return the identifier a declaration is known by in the current file."""

        alias = self._aliases.get(fqn)
        if alias is not None:
            return alias
        return self._declared_name(fqn)

    def _declared_name(self, fqn: str) -> str:
        registry, _ = self._scope()
        decl = registry.find_type(fqn)
        short = get_short_name(fqn)
        if decl is None or isinstance(decl, ClassDeclaration):
            return f"I{short}"
        return short

    def _map_key_type(self, type_name: str) -> str:
        registry, model_file = self._scope()
        if is_primitive_type(type_name):
            return _TS_PRIMITIVES[type_name]
        decl = registry.find_type(registry.resolve_type(model_file, type_name))
        if isinstance(decl, ScalarDeclaration):
            return _TS_PRIMITIVES[decl.type]
        return "string"

    def _is_visible(self, fqn: str, parameters: GenerationParameters) -> bool:
        namespace = get_namespace(fqn)
        return namespace == self.model_file.namespace or self.is_emitted(namespace, parameters)

    def _import_specifier(self, namespace: str, parameters: GenerationParameters) -> str:
        if self.is_emitted(namespace, parameters):
            return f"./{namespace}"
        return parameters.module_import_path

    def _referenced_types(
        self, model_file: ModelFile, parameters: GenerationParameters
    ) -> list[str]:
        """Fully-qualified names from other namespaces this file refers to."""

        registry, _ = self._scope()
        found: set[str] = set()

        def add(fqn: str) -> None:
            if not is_primitive_type(fqn) and get_namespace(fqn) != model_file.namespace:
                found.add(fqn)

        for decl in model_file.declarations:
            if isinstance(decl, ClassDeclaration):
                fqn = self.fqn(decl.name)
                super_fqn = registry.super_type_of(fqn)
                if super_fqn:
                    add(super_fqn)
                for prop in decl.properties:
                    if prop.get_decorator(OVERRIDE_DECORATOR) is None:
                        add(registry.resolve_type(model_file, prop.type))
                for sub in registry.direct_subclasses(fqn):
                    if self.is_emitted(get_namespace(sub), parameters):
                        add(sub)
            elif isinstance(decl, MapDeclaration):
                if decl.get_decorator(OVERRIDE_DECORATOR) is None:
                    add(registry.resolve_type(model_file, decl.value))
        return sorted(found)

    def _alias_map(self, model_file: ModelFile, referenced: list[str]) -> dict[str, str]:
        """Alias imported names that clash with each other or with local names."""

        local_names: set[str] = set()
        for decl in model_file.declarations:
            if isinstance(decl, ClassDeclaration):
                local_names.update((f"I{decl.name}", f"{decl.name}Union"))
            else:
                local_names.add(decl.name)

        by_name: dict[str, list[str]] = {}
        for fqn in referenced:
            by_name.setdefault(self._declared_name(fqn), []).append(fqn)

        aliases: dict[str, str] = {}
        for name, fqns in by_name.items():
            if len(fqns) > 1 or name in local_names:
                for fqn in fqns:
                    aliases[fqn] = f"{name}_{namespace_to_module(get_namespace(fqn))}"
        return aliases

    def _collect_imports(
        self, referenced: list[str], parameters: GenerationParameters
    ) -> list[tuple[str, list[str]]]:
        wanted: dict[str, set[str]] = {}
        for fqn in referenced:
            name = self._declared_name(fqn)
            alias = self._aliases.get(fqn)
            if alias is not None:
                name = f"{name} as {alias}"
            specifier = self._import_specifier(get_namespace(fqn), parameters)
            wanted.setdefault(specifier, set()).add(name)

        return [(specifier, sorted(names)) for specifier, names in sorted(wanted.items())]
