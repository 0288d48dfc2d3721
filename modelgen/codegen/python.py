"""Pydantic model generation."""

from __future__ import annotations

import keyword

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


_PY_PRIMITIVES = {
    "DateTime": "datetime.datetime",
    "Boolean": "bool",
    "String": "str",
    "Double": "float",
    "Long": "int",
    "Integer": "int",
}


def python_identifier(name: str) -> str:
    """Return a valid Python attribute name for a model name."""

    ident = name.lstrip("$")
    if not ident or not ident.isidentifier():
        ident = "".join(ch if ch.isalnum() or ch == "_" else "_" for ch in ident) or "field"
        if ident[0].isdigit():
            ident = "_" + ident
    if keyword.iskeyword(ident) or name.startswith("$"):
        ident += "_"
    return ident


class PythonVisitor(BaseVisitor):
    """Emit one pydantic module per model file plus a package ``__init__.py``.

    Modules are named after their namespace (``org.acme@1.0.0`` becomes
    ``org_acme_v1_0_0.py``). Types from other emitted namespaces are imported
    relatively; reserved types that are not emitted are imported from
    ``parameters.module_import_path``. Relationships are emitted as the
    identifier string of the target.

    Sibling modules that only supply field types are imported at the bottom
    of a module, so two namespaces may refer to each other. The package
    ``__init__.py`` imports every module and rebuilds each model once all
    names are bound.
    """

    name = "python"
    file_extension = ".py"
    default_module_import_path = "modelgen.runtime"

    def __init__(self) -> None:
        super().__init__()
        self._modules: dict[str, tuple[list[str], set[str]]] = {}

    def visit_registry(self, registry, parameters: GenerationParameters) -> None:
        model_files = registry.model_files(
            include_reserved=parameters.include_reserved_definitions
        )
        self._modules = {}
        for model_file in model_files:
            model_file.accept(self, parameters)

        modules = [namespace_to_module(mf.namespace) for mf in model_files]
        load_order = self._load_order(modules)
        sink = parameters.output_sink
        sink.open_file("__init__.py")
        sink.write_line(0, '"""Generated models."""')
        if load_order:
            sink.write_line(0, "")
            sink.write_line(0, f"from . import {', '.join(load_order)}")
        sink.write_line(0, "")
        sink.write_line(0, f"__all__ = {modules!r}")
        rebuilds = [
            f"{module}.{name}.model_rebuild()"
            for module in load_order
            for name in self._modules[module][0]
        ]
        if rebuilds:
            sink.write_line(0, "")
            for line in rebuilds:
                sink.write_line(0, line)
        sink.close_file()
        return None

    def visit_model_file(self, model_file: ModelFile, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        module_name = namespace_to_module(model_file.namespace)
        sink.open_file(module_name + self.file_extension)

        classes = self._ordered_classes(model_file)
        enums = [d for d in model_file.declarations if isinstance(d, EnumDeclaration)]
        scalars = [d for d in model_file.declarations if isinstance(d, ScalarDeclaration)]
        maps = [d for d in model_file.declarations if isinstance(d, MapDeclaration)]

        sink.write_line(0, f'"""Generated code for namespace: {model_file.namespace}"""')
        sink.write_line(0, "")
        sink.write_line(0, "from __future__ import annotations")
        stdlib = []
        if self._uses_datetime(model_file):
            stdlib.append("import datetime")
        if enums:
            stdlib.append("from enum import Enum")
        if any(s.regex is not None or s.lower is not None or s.upper is not None for s in scalars):
            stdlib.append("from typing import Annotated")
        if stdlib:
            sink.write_line(0, "")
            for line in stdlib:
                sink.write_line(0, line)
        pydantic_names = ["BaseModel", "ConfigDict", "Field"] if classes or scalars else []
        if pydantic_names:
            sink.write_line(0, "")
            sink.write_line(0, f"from pydantic import {', '.join(pydantic_names)}")

        imports, deferred = self._collect_imports(model_file, parameters)
        if imports:
            sink.write_line(0, "")
            for module, names in imports:
                sink.write_line(0, f"from {module} import {', '.join(names)}")

        for decl in [*enums, *scalars, *classes]:
            sink.write_line(0, "")
            sink.write_line(0, "")
            decl.accept(self, parameters)

        if deferred:
            sink.write_line(0, "")
            sink.write_line(0, "")
            sink.write_line(0, "# field types from sibling modules, bound after the classes above")
            for module, names in deferred:
                sink.write_line(0, f"from {module} import {', '.join(names)}  # noqa: E402")

        for decl in maps:
            sink.write_line(0, "")
            sink.write_line(0, "")
            decl.accept(self, parameters)

        self._modules[module_name] = (
            [decl.name for decl in classes],
            {module[1:] for module, _ in imports if module.startswith(".")},
        )

        sink.close_file()
        return None

    def visit_enum_declaration(self, decl: EnumDeclaration, parameters: GenerationParameters) -> None:
        sink = parameters.output_sink
        sink.write_line(0, f"class {decl.name}(str, Enum):")
        for value in decl.values:
            sink.write_line(1, f"{python_identifier(value)} = {value!r}")
        return None

    def visit_scalar_declaration(
        self, decl: ScalarDeclaration, parameters: GenerationParameters
    ) -> None:
        base = _PY_PRIMITIVES[decl.type]
        constraints = []
        if decl.regex is not None:
            constraints.append(f"pattern={decl.regex!r}")
        if decl.lower is not None:
            constraints.append(f"ge={decl.lower!r}")
        if decl.upper is not None:
            constraints.append(f"le={decl.upper!r}")
        if constraints:
            value = f"Annotated[{base}, Field({', '.join(constraints)})]"
        else:
            value = base
        parameters.output_sink.write_line(0, f"{decl.name} = {value}")
        return None

    def visit_map_declaration(self, decl: MapDeclaration, parameters: GenerationParameters) -> None:
        key_type = self.to_py_type(decl.key)
        value_type = self.to_py_type(decl.value)
        parameters.output_sink.write_line(0, f"{decl.name} = dict[{key_type}, {value_type}]")
        return None

    def visit_class_declaration(
        self, decl: ClassDeclaration, parameters: GenerationParameters
    ) -> None:
        registry, _ = self._scope()
        sink = parameters.output_sink
        super_fqn = registry.super_type_of(self.fqn(decl.name))
        base = get_short_name(super_fqn) if super_fqn else "BaseModel"

        sink.write_line(0, f"class {decl.name}({base}):")
        body_start = True
        if super_fqn is None:
            sink.write_line(1, "model_config = ConfigDict(populate_by_name=True)")
            sink.write_line(0, "")
            sink.write_line(1, 'class_: str | None = Field(default=None, alias="$class")')
            body_start = False
        for prop in decl.properties:
            prop.accept(self, parameters)
            body_start = False
        if body_start:
            sink.write_line(1, "pass")
        return None

    def visit_property(self, prop: Property, parameters: GenerationParameters) -> None:
        if prop.relationship:
            py_type = "str"
        else:
            py_type = self.to_py_type(prop.type)
        if prop.array:
            py_type = f"list[{py_type}]"

        ident = python_identifier(prop.name)
        field_args = []
        if prop.optional:
            py_type = f"{py_type} | None"
            field_args.append("default=None")
        if ident != prop.name:
            field_args.append(f"alias={prop.name!r}")

        line = f"{ident}: {py_type}"
        if field_args == ["default=None"]:
            line += " = None"
        elif field_args:
            line += f" = Field({', '.join(field_args)})"
        parameters.output_sink.write_line(1, line)
        return None

    def to_py_type(self, type_name: str) -> str:
        """Map a model type name to the Python annotation emitted for it."""

        registry, model_file = self._scope()
        if is_primitive_type(type_name):
            return _PY_PRIMITIVES[type_name]
        return get_short_name(registry.resolve_type(model_file, type_name))

    def _module_for(self, namespace: str, parameters: GenerationParameters) -> str:
        if self.is_emitted(namespace, parameters):
            return "." + namespace_to_module(namespace)
        return parameters.module_import_path

    def _uses_datetime(self, model_file: ModelFile) -> bool:
        for decl in model_file.declarations:
            if isinstance(decl, ClassDeclaration):
                if any(p.type == "DateTime" and not p.relationship for p in decl.properties):
                    return True
            elif isinstance(decl, ScalarDeclaration) and decl.type == "DateTime":
                return True
            elif isinstance(decl, MapDeclaration) and "DateTime" in (decl.key, decl.value):
                return True
        return False

    def _ordered_classes(self, model_file: ModelFile) -> list[ClassDeclaration]:
        """Order class declarations so in-file super types come first."""

        registry, _ = self._scope()
        pending = model_file.class_declarations()
        ordered: list[ClassDeclaration] = []
        placed: set[str] = set()
        while pending:
            remaining = []
            for decl in pending:
                super_fqn = registry.super_type_of(self.fqn(decl.name))
                in_file = super_fqn is not None and get_namespace(super_fqn) == model_file.namespace
                if in_file and get_short_name(super_fqn) not in placed:
                    remaining.append(decl)
                    continue
                ordered.append(decl)
                placed.add(decl.name)
            if len(remaining) == len(pending):
                ordered.extend(remaining)
                break
            pending = remaining
        return ordered

    def _collect_imports(
        self, model_file: ModelFile, parameters: GenerationParameters
    ) -> tuple[list[tuple[str, list[str]]], list[tuple[str, list[str]]]]:
        """Return the header imports and the imports bound after the classes.

        Super types and anything from ``module_import_path`` are needed while
        the module body runs. Field and map types from sibling modules are
        deferred.
        """

        registry, _ = self._scope()
        eager: dict[str, set[str]] = {}
        deferred: dict[str, set[str]] = {}

        def add(wanted: dict[str, set[str]], fqn: str | None) -> None:
            if fqn is None or is_primitive_type(fqn):
                return
            namespace = get_namespace(fqn)
            if namespace == model_file.namespace:
                return
            module = self._module_for(namespace, parameters)
            if not module.startswith("."):
                wanted = eager
            wanted.setdefault(module, set()).add(get_short_name(fqn))

        for decl in model_file.declarations:
            if isinstance(decl, ClassDeclaration):
                add(eager, registry.super_type_of(self.fqn(decl.name)))
                for prop in decl.properties:
                    if not prop.relationship:
                        add(deferred, registry.resolve_type(model_file, prop.type))
            elif isinstance(decl, MapDeclaration):
                add(deferred, registry.resolve_type(model_file, decl.key))
                add(deferred, registry.resolve_type(model_file, decl.value))

        for module, names in eager.items():
            if module in deferred:
                deferred[module] -= names

        # absolute imports first, then relative ones
        header = sorted(
            ((module, sorted(names)) for module, names in eager.items()),
            key=lambda item: (item[0].startswith("."), item[0]),
        )
        trailer = sorted((module, sorted(names)) for module, names in deferred.items() if names)
        return header, trailer

    def _load_order(self, modules: list[str]) -> list[str]:
        """Order modules so the ones providing super types load first."""

        order: list[str] = []
        seen: set[str] = set()

        def place(module: str) -> None:
            if module in seen:
                return
            seen.add(module)
            for dependency in sorted(self._modules.get(module, ([], set()))[1]):
                if dependency in self._modules:
                    place(dependency)
            order.append(module)

        for module in modules:
            place(module)
        return order
