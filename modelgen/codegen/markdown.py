"""Deterministic Markdown documentation for model files."""

from __future__ import annotations

from modelgen.codegen.params import GenerationParameters
from modelgen.codegen.visitor import BaseVisitor
from modelgen.core.metamodel import (
    ClassDeclaration,
    Decorator,
    EnumDeclaration,
    MapDeclaration,
    ModelFile,
    Property,
    ScalarDeclaration,
)
from modelgen.core.names import get_namespace, get_short_name, is_primitive_type


def _escape_cell(value: str | None) -> str:
    return (value or "").replace("\r", " ").replace("\n", " ").replace("|", "\\|")


def _anchor(name: str) -> str:
    return name.lower()


def _render_decorators(decorators: list[Decorator]) -> str:
    rendered = []
    for decorator in decorators:
        if decorator.arguments:
            args = ", ".join(
                repr(arg) if isinstance(arg, str) else str(arg) for arg in decorator.arguments
            )
            rendered.append(f"@{decorator.name}({args})")
        else:
            rendered.append(f"@{decorator.name}")
    return " ".join(rendered)


def _summary(decl) -> str:
    if isinstance(decl, ClassDeclaration):
        return f"{len(decl.properties)} properties"
    if isinstance(decl, EnumDeclaration):
        return f"{len(decl.values)} values"
    if isinstance(decl, ScalarDeclaration):
        return decl.type
    return f"{decl.key} -> {decl.value}"


class MarkdownVisitor(BaseVisitor):
    """Emit one ``<namespace>.md`` page per model file.

    Type references link to ``./<namespace>.md#<name>`` for emitted namespaces
    and to ``parameters.module_import_path`` for reserved types that are not
    emitted.
    """

    name = "markdown"
    file_extension = ".md"
    default_module_import_path = "./concerto.md"

    def visit_model_file(self, model_file: ModelFile, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        sink.open_file(model_file.namespace + self.file_extension)

        sink.write_line(0, f"# Namespace: {model_file.namespace}")
        sink.write_line(0, "")
        sink.write_line(0, "## Imports")
        if model_file.imports:
            for imp in sorted(model_file.imports, key=lambda item: item.namespace):
                types = "*" if imp.is_wildcard else ", ".join(imp.types or [])
                sink.write_line(0, f"- {imp.namespace}: {types}")
        else:
            sink.write_line(0, "- (none)")

        sink.write_line(0, "")
        sink.write_line(0, "## Declarations")
        sink.write_line(0, "| name | kind | details |")
        sink.write_line(0, "| --- | --- | --- |")
        for decl in model_file.declarations:
            sink.write_line(
                0,
                "| "
                + " | ".join(
                    [
                        f"[{decl.name}](#{_anchor(decl.name)})",
                        decl.kind,
                        _escape_cell(_summary(decl)),
                    ]
                )
                + " |",
            )

        for decl in model_file.declarations:
            sink.write_line(0, "")
            decl.accept(self, parameters)

        sink.close_file()
        return None

    def visit_class_declaration(
        self, decl: ClassDeclaration, parameters: GenerationParameters
    ) -> None:
        registry, _ = self._scope()
        sink = parameters.output_sink
        sink.write_line(0, f"## {decl.name}")
        super_fqn = registry.super_type_of(self.fqn(decl.name))
        sink.write_line(0, f"- kind: {decl.kind}")
        sink.write_line(0, f"- abstract: {'yes' if decl.abstract else 'no'}")
        sink.write_line(0, f"- extends: {self.link(super_fqn, parameters) if super_fqn else ''}")
        if decl.identified_by:
            sink.write_line(0, f"- identified by: {decl.identified_by}")
        if decl.decorators:
            sink.write_line(0, f"- decorators: {_render_decorators(decl.decorators)}")
        sink.write_line(0, "")
        sink.write_line(0, "| property | type | optional | array | relationship | decorators |")
        sink.write_line(0, "| --- | --- | --- | --- | --- | --- |")
        for prop in decl.properties:
            prop.accept(self, parameters)
        return None

    def visit_property(self, prop: Property, parameters: GenerationParameters) -> None:
        registry, model_file = self._scope()
        if is_primitive_type(prop.type):
            type_cell = prop.type
        else:
            type_cell = self.link(registry.resolve_type(model_file, prop.type), parameters)
        parameters.output_sink.write_line(
            0,
            "| "
            + " | ".join(
                [
                    _escape_cell(prop.name),
                    _escape_cell(type_cell),
                    "yes" if prop.optional else "no",
                    "yes" if prop.array else "no",
                    "yes" if prop.relationship else "no",
                    _escape_cell(_render_decorators(prop.decorators)),
                ]
            )
            + " |",
        )
        return None

    def visit_enum_declaration(self, decl: EnumDeclaration, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        sink.write_line(0, f"## {decl.name}")
        sink.write_line(0, "- kind: enum")
        sink.write_line(0, "")
        for value in decl.values:
            sink.write_line(0, f"- `{value}`")
        return None

    def visit_scalar_declaration(
        self, decl: ScalarDeclaration, parameters: GenerationParameters
    ) -> None:
        sink = parameters.output_sink
        sink.write_line(0, f"## {decl.name}")
        sink.write_line(0, f"- kind: scalar of {decl.type}")
        if decl.regex is not None:
            sink.write_line(0, f"- regex: `{decl.regex}`")
        if decl.lower is not None or decl.upper is not None:
            lower = "" if decl.lower is None else str(decl.lower)
            upper = "" if decl.upper is None else str(decl.upper)
            sink.write_line(0, f"- range: [{lower}, {upper}]")
        return None

    def visit_map_declaration(self, decl: MapDeclaration, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        sink.write_line(0, f"## {decl.name}")
        sink.write_line(0, "- kind: map")
        sink.write_line(0, f"- key: {self._type_ref(decl.key, parameters)}")
        sink.write_line(0, f"- value: {self._type_ref(decl.value, parameters)}")
        return None

    def link(self, fqn: str, parameters: GenerationParameters) -> str:
        """Render a Markdown link to the documentation of a type."""

        _, model_file = self._scope()
        namespace = get_namespace(fqn)
        short = get_short_name(fqn)
        if namespace == model_file.namespace:
            return f"[{short}](#{_anchor(short)})"
        if self.is_emitted(namespace, parameters):
            return f"[{short}](./{namespace}{self.file_extension}#{_anchor(short)})"
        return f"[{short}]({parameters.module_import_path})"

    def _type_ref(self, type_name: str, parameters: GenerationParameters) -> str:
        registry, model_file = self._scope()
        if is_primitive_type(type_name):
            return type_name
        return self.link(registry.resolve_type(model_file, type_name), parameters)
