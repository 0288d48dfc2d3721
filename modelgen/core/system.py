"""The reserved built-in model file every registry starts with."""

from __future__ import annotations

from modelgen.core.metamodel import ClassDeclaration, ModelFile, Property
from modelgen.core.names import fully_qualified_name, parse_namespace


RESERVED_NAMESPACE = "concerto@1.0.0"

# Implicit base declaration for each class kind.
IMPLICIT_BASES = {
    "concept": "Concept",
    "asset": "Asset",
    "participant": "Participant",
    "transaction": "Transaction",
    "event": "Event",
}


def is_reserved_namespace(namespace: str) -> bool:
    """True for any version of the reserved namespace."""

    try:
        name, _ = parse_namespace(namespace)
    except ValueError:
        return False
    return name == parse_namespace(RESERVED_NAMESPACE)[0]


def implicit_base_fqn(kind: str) -> str:
    return fully_qualified_name(RESERVED_NAMESPACE, IMPLICIT_BASES[kind])


def build_reserved_model() -> ModelFile:
    """Return a fresh copy of the reserved model file."""

    return ModelFile(
        namespace=RESERVED_NAMESPACE,
        declarations=[
            ClassDeclaration(kind="concept", name="Concept", abstract=True),
            ClassDeclaration(
                kind="asset",
                name="Asset",
                abstract=True,
                super_type="Concept",
                properties=[Property(name="$identifier", type="String")],
            ),
            ClassDeclaration(
                kind="participant",
                name="Participant",
                abstract=True,
                super_type="Concept",
                properties=[Property(name="$identifier", type="String")],
            ),
            ClassDeclaration(
                kind="transaction",
                name="Transaction",
                abstract=True,
                super_type="Concept",
                properties=[Property(name="$timestamp", type="DateTime")],
            ),
            ClassDeclaration(
                kind="event",
                name="Event",
                abstract=True,
                super_type="Concept",
                properties=[Property(name="$timestamp", type="DateTime")],
            ),
        ],
        file_name=RESERVED_NAMESPACE,
    )
