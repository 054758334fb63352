"""Structural type expressions produced by the schema projector.

A type expression describes the *shape* of a value independently of any
target language.  :mod:`specsdk.typegen.typescript` renders them as
TypeScript; other formatters could render the same tree differently.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class PrimitiveType:
    """``string``, ``number``, ``boolean``, ``null`` or ``unknown``."""

    name: str


@dataclass(frozen=True)
class LiteralUnion:
    """Union of literal values, from an enumeration."""

    values: tuple[Any, ...]


@dataclass(frozen=True)
class ArrayType:
    element: TypeExpr


@dataclass(frozen=True)
class Field:
    name: str
    type: TypeExpr
    required: bool = False


@dataclass(frozen=True)
class RecordType:
    """Ordered record of named fields.  With no fields it is the closed empty record."""

    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class MapType:
    """Open map keyed by string."""

    value: TypeExpr


@dataclass(frozen=True)
class UnionType:
    members: tuple[TypeExpr, ...]


@dataclass(frozen=True)
class IntersectionType:
    members: tuple[TypeExpr, ...]


@dataclass(frozen=True)
class NamedType:
    """Reference to a type declared once elsewhere under *name*."""

    name: str


TypeExpr = Union[
    PrimitiveType,
    LiteralUnion,
    ArrayType,
    RecordType,
    MapType,
    UnionType,
    IntersectionType,
    NamedType,
]

STRING = PrimitiveType("string")
NUMBER = PrimitiveType("number")
BOOLEAN = PrimitiveType("boolean")
NULL = PrimitiveType("null")
UNKNOWN = PrimitiveType("unknown")


def field_map(record: RecordType) -> dict[str, Field]:
    """Fields of *record* keyed by name."""
    return {f.name: f for f in record.fields}
