"""Pydantic models for model files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from modelgen.core.names import PRIMITIVE_TYPES, is_primitive_type, is_versioned


_IDENTIFIER = r"^[A-Za-z_$][A-Za-z0-9_$]*$"

PrimitiveType = Literal["Boolean", "String", "DateTime", "Double", "Integer", "Long"]
ClassKind = Literal["concept", "asset", "participant", "transaction", "event"]


class Decorator(BaseModel):
    """Named annotation attached to a declaration or property."""

    name: str = Field(pattern=_IDENTIFIER)
    arguments: list[str | bool | int | float] = Field(default_factory=list)


class _Decorated(BaseModel):
    decorators: list[Decorator] = Field(default_factory=list)

    def accept(self, visitor, parameters):
        return visitor.visit(self, parameters)

    def get_decorator(self, name: str) -> Decorator | None:
        """Return the first decorator with the given name."""

        for decorator in self.decorators:
            if decorator.name == name:
                return decorator
        return None


class Property(_Decorated):
    """Field or relationship of a class declaration."""

    name: str = Field(pattern=_IDENTIFIER)
    type: str = Field(min_length=1)
    optional: bool = False
    array: bool = False
    relationship: bool = False

    @model_validator(mode="after")
    def _validate_relationship(self) -> "Property":
        if self.relationship and is_primitive_type(self.type):
            raise ValueError(
                f"Relationship {self.name!r} must target a class, not primitive {self.type}"
            )
        return self

    @property
    def is_primitive(self) -> bool:
        return is_primitive_type(self.type)


class ClassDeclaration(_Decorated):
    """Concept, asset, participant, transaction or event."""

    kind: ClassKind
    name: str = Field(pattern=_IDENTIFIER)
    abstract: bool = False
    super_type: str | None = None
    identified_by: str | None = None
    properties: list[Property] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_properties(self) -> "ClassDeclaration":
        names = [prop.name for prop in self.properties]
        if len(names) != len(set(names)):
            raise ValueError(f"Property names must be unique in {self.name}")
        if self.identified_by is not None and self.identified_by not in names:
            raise ValueError(
                f"identified_by {self.identified_by!r} is not a property of {self.name}"
            )
        return self


class EnumDeclaration(_Decorated):
    """Enumeration of string values."""

    kind: Literal["enum"]
    name: str = Field(pattern=_IDENTIFIER)
    values: list[Annotated[str, Field(pattern=_IDENTIFIER)]] = Field(min_length=1)

    @field_validator("values")
    @classmethod
    def _unique_values(cls, values: list[str]) -> list[str]:
        if len(values) != len(set(values)):
            raise ValueError("Enum values must be unique")
        return values


class ScalarDeclaration(_Decorated):
    """Named alias of a primitive type with optional validation bounds."""

    kind: Literal["scalar"]
    name: str = Field(pattern=_IDENTIFIER)
    type: PrimitiveType
    regex: str | None = None
    lower: int | float | None = None
    upper: int | float | None = None

    @model_validator(mode="after")
    def _validate_bounds(self) -> "ScalarDeclaration":
        if self.regex is not None and self.type != "String":
            raise ValueError("Scalar regex is only allowed on String scalars")
        if (self.lower is not None or self.upper is not None) and self.type not in (
            "Double",
            "Integer",
            "Long",
        ):
            raise ValueError("Scalar bounds are only allowed on numeric scalars")
        if self.lower is not None and self.upper is not None and self.upper < self.lower:
            raise ValueError("Scalar upper bound must be >= lower bound")
        return self


class MapDeclaration(_Decorated):
    """Map from a key type to a value type."""

    kind: Literal["map"]
    name: str = Field(pattern=_IDENTIFIER)
    key: str = Field(min_length=1)
    value: str = Field(min_length=1)

    @model_validator(mode="after")
    def _validate_key(self) -> "MapDeclaration":
        if is_primitive_type(self.key) and self.key not in ("String", "DateTime"):
            raise ValueError(f"Map key of {self.name} must be String or DateTime")
        return self


Declaration = Annotated[
    Union[ClassDeclaration, EnumDeclaration, ScalarDeclaration, MapDeclaration],
    Field(discriminator="kind"),
]


class Import(BaseModel):
    """Import of types from another namespace (all types when ``types`` is None)."""

    namespace: str = Field(min_length=1)
    types: list[str] | None = None

    @property
    def is_wildcard(self) -> bool:
        return self.types is None


class ModelFile(BaseModel):
    """A single namespace worth of declarations."""

    namespace: str = Field(min_length=1)
    imports: list[Import] = Field(default_factory=list)
    declarations: list[Declaration] = Field(default_factory=list)
    file_name: str | None = Field(default=None, exclude=True)

    @field_validator("namespace")
    @classmethod
    def _versioned_namespace(cls, namespace: str) -> str:
        if not is_versioned(namespace):
            raise ValueError(f"Cannot add an unversioned namespace: {namespace}")
        return namespace

    @model_validator(mode="after")
    def _validate_declarations(self) -> "ModelFile":
        names = [decl.name for decl in self.declarations]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate declarations in {self.namespace}: {duplicates}")
        clashes = sorted(name for name in names if name in PRIMITIVE_TYPES)
        if clashes:
            raise ValueError(f"Declarations shadow primitive types: {clashes}")
        for imp in self.imports:
            if imp.namespace == self.namespace:
                raise ValueError(f"Model file {self.namespace} imports itself")
        return self

    def get_declaration(self, name: str) -> Declaration | None:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None

    def class_declarations(self) -> list[ClassDeclaration]:
        return [decl for decl in self.declarations if isinstance(decl, ClassDeclaration)]

    def accept(self, visitor, parameters):
        return visitor.visit(self, parameters)


def load_model_file(path: str | Path) -> ModelFile:
    """Load a model file from a JSON document."""

    path = Path(path)
    payload = json.loads(path.read_text(encoding="utf-8"))
    model_file = ModelFile.model_validate(payload)
    model_file.file_name = str(path)
    return model_file


def dump_model_file(model_file: ModelFile, path: str | Path) -> None:
    """Write a model file as deterministic JSON."""

    payload = model_file.model_dump(exclude_none=True, exclude_defaults=True)
    Path(path).write_text(
        json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
