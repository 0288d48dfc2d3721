"""Namespace and type-name helpers."""

from __future__ import annotations

import re


PRIMITIVE_TYPES: tuple[str, ...] = (
    "Boolean",
    "String",
    "DateTime",
    "Double",
    "Integer",
    "Long",
)

_NAMESPACE_RE = re.compile(
    r"^(?P<name>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)"
    r"(?:@(?P<version>\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?))?$"
)


def parse_namespace(namespace: str) -> tuple[str, str | None]:
    """Split ``name@version`` into its name and (optional) version."""

    match = _NAMESPACE_RE.match(namespace)
    if match is None:
        raise ValueError(f"Invalid namespace: {namespace!r}")
    return match.group("name"), match.group("version")


def is_versioned(namespace: str) -> bool:
    try:
        return parse_namespace(namespace)[1] is not None
    except ValueError:
        return False


def get_namespace(fqn: str) -> str:
    """Return the namespace part of a fully-qualified name ("" when unqualified)."""

    idx = fqn.rfind(".")
    if idx < 0:
        return ""
    return fqn[:idx]


def get_short_name(fqn: str) -> str:
    """Return the declaration name of a fully-qualified name."""

    return fqn[fqn.rfind(".") + 1 :]


def fully_qualified_name(namespace: str, name: str) -> str:
    if not namespace:
        return name
    return f"{namespace}.{name}"


def is_primitive_type(type_name: str) -> bool:
    return type_name in PRIMITIVE_TYPES


def namespace_to_module(namespace: str) -> str:
    """Return a Python-importable module name for a namespace.

    ``org.acme.hr@1.2.0`` becomes ``org_acme_hr_v1_2_0``.
    """

    name, version = parse_namespace(namespace)
    module = name.replace(".", "_")
    if version:
        module += "_v" + re.sub(r"[^0-9A-Za-z]", "_", version)
    return module
