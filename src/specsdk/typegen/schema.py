"""Tagged schema variants and the parser that builds them from resolved dicts.

OpenAPI expresses every schema shape through one loosely typed object with
optional keys.  :func:`parse_schema` turns such a dict into exactly one of
the variants below, each carrying only the fields relevant to it:

* :class:`PrimitiveSchema` -- ``string``/``number``/``integer``/``boolean``/``null``
* :class:`ArraySchema`
* :class:`ObjectSchema`
* :class:`AllOfSchema`, :class:`OneOfSchema`, :class:`AnyOfSchema`
* :class:`ReferenceSchema` -- a named component schema
* :class:`UnknownSchema` -- absent, malformed or unrecognised

Variants are frozen dataclasses rather than Pydantic models because a
:class:`ReferenceSchema` may point back at a schema that contains it.  The
target of a reference is parsed lazily, on access, so parsing a recursive
schema terminates.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from specsdk.parser.resolver import NamedSchema

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean", "null"})


class AdditionalProperties(enum.Enum):
    """Policy for keys not listed in an object's ``properties``."""

    FORBIDDEN = "forbidden"
    OPEN = "open"
    TYPED = "typed"


@dataclass(frozen=True)
class UnknownSchema:
    """Absent or unrecognised schema; projects to the unknown type."""


@dataclass(frozen=True)
class PrimitiveSchema:
    type: str
    format: Optional[str] = None
    enum: Optional[tuple[Any, ...]] = None
    nullable: bool = False


@dataclass(frozen=True)
class ArraySchema:
    items: Optional[SchemaNode] = None
    nullable: bool = False


@dataclass(frozen=True)
class ObjectSchema:
    """An object schema.

    ``properties`` is ``None`` when the schema declares none, which is
    distinct from an empty ``properties`` mapping.
    """

    properties: Optional[tuple[tuple[str, SchemaNode], ...]] = None
    required: frozenset[str] = frozenset()
    additional: AdditionalProperties = AdditionalProperties.OPEN
    additional_schema: Optional[SchemaNode] = None
    nullable: bool = False


@dataclass(frozen=True)
class AllOfSchema:
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True)
class OneOfSchema:
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True)
class AnyOfSchema:
    members: tuple[SchemaNode, ...]


@dataclass(frozen=True)
class ReferenceSchema:
    """A reference to a named schema.

    Equality looks at the name and reference only; the resolved body is
    kept out of comparisons and ``repr`` because it may contain this very
    reference.
    """

    name: str
    ref: str = ""
    raw: Any = field(default=None, compare=False, repr=False)

    @property
    def target(self) -> SchemaNode:
        """The referenced schema, parsed on demand."""
        if self.raw is None:
            return UnknownSchema()
        return parse_schema(self.raw, expand=True)


SchemaNode = Union[
    UnknownSchema,
    PrimitiveSchema,
    ArraySchema,
    ObjectSchema,
    AllOfSchema,
    OneOfSchema,
    AnyOfSchema,
    ReferenceSchema,
]

_VARIANTS = (
    UnknownSchema,
    PrimitiveSchema,
    ArraySchema,
    ObjectSchema,
    AllOfSchema,
    OneOfSchema,
    AnyOfSchema,
    ReferenceSchema,
)


def is_schema_node(value: Any) -> bool:
    """Whether *value* is already a parsed schema variant."""
    return isinstance(value, _VARIANTS)


def parse_schema(raw: Any, *, expand: bool = False) -> SchemaNode:
    """Parse a resolved schema dict into its tagged variant.

    Args:
        raw: A schema dict (possibly a :class:`NamedSchema`), a literal
            ``{"$ref": ...}`` dict, an already parsed variant, or anything
            else (which parses to :class:`UnknownSchema`).
        expand: Parse the body of a top-level named schema instead of
            returning a :class:`ReferenceSchema` for it.  Nested named
            schemas are always returned as references.

    Returns:
        The variant.  Parsing never raises.
    """
    if is_schema_node(raw):
        if expand and isinstance(raw, ReferenceSchema):
            return raw.target
        return raw
    return _SchemaParser().parse(raw, expand=expand)


class _SchemaParser:
    """One parsing pass; tracks the unnamed dicts currently being parsed."""

    def __init__(self) -> None:
        self._active: set[int] = set()

    def parse(self, raw: Any, expand: bool = False) -> SchemaNode:
        if raw is True:
            return UnknownSchema()
        if not isinstance(raw, dict):
            return UnknownSchema()

        if isinstance(raw, NamedSchema) and not expand:
            return ReferenceSchema(name=raw.schema_name, ref=raw.ref, raw=raw)

        ref = raw.get("$ref")
        if isinstance(ref, str):
            # Unresolved pointer handed in directly
            return ReferenceSchema(name=ref.rstrip("/").split("/")[-1], ref=ref)

        if id(raw) in self._active:
            # A cycle through an unnamed node cannot be named, so it is cut
            logger.debug("Cutting unnamed schema cycle")
            return UnknownSchema()

        self._active.add(id(raw))
        try:
            return self._parse_shape(raw)
        finally:
            self._active.discard(id(raw))

    def _parse_shape(self, raw: dict[str, Any]) -> SchemaNode:
        if "allOf" in raw:
            return AllOfSchema(self._members(raw["allOf"]))
        if "oneOf" in raw:
            return OneOfSchema(self._members(raw["oneOf"]))
        if "anyOf" in raw:
            return AnyOfSchema(self._members(raw["anyOf"]))

        schema_type = raw.get("type")
        nullable = raw.get("nullable") is True

        if isinstance(schema_type, list):
            return self._parse_type_list(raw, schema_type)

        if schema_type is None:
            if "properties" in raw or "additionalProperties" in raw:
                schema_type = "object"
            elif "items" in raw:
                schema_type = "array"

        if schema_type == "array":
            items = raw.get("items")
            return ArraySchema(
                items=self.parse(items) if isinstance(items, dict) and items else None,
                nullable=nullable,
            )
        if schema_type == "object":
            return self._parse_object(raw, nullable)
        if schema_type in PRIMITIVE_TYPES:
            enum_values = raw.get("enum")
            fmt = raw.get("format")
            return PrimitiveSchema(
                type=schema_type,
                format=fmt if isinstance(fmt, str) else None,
                enum=tuple(enum_values) if isinstance(enum_values, list) else None,
                nullable=nullable,
            )

        if schema_type is not None:
            logger.debug("Unrecognised schema type %r", schema_type)
        return UnknownSchema()

    def _parse_type_list(self, raw: dict[str, Any], types: list[Any]) -> SchemaNode:
        """OpenAPI 3.1 ``type: [...]`` becomes a union of single-type schemas."""
        non_null = [t for t in types if t != "null"]
        has_null = len(non_null) != len(types)
        if len(non_null) == 1:
            single = dict(raw)
            single["type"] = non_null[0]
            if has_null:
                single["nullable"] = True
            return self._parse_shape(single)

        members: list[SchemaNode] = []
        for type_name in types:
            single = dict(raw)
            single["type"] = type_name
            members.append(self._parse_shape(single))
        return AnyOfSchema(tuple(members))

    def _parse_object(self, raw: dict[str, Any], nullable: bool) -> ObjectSchema:
        properties = raw.get("properties")
        parsed_properties: Optional[tuple[tuple[str, SchemaNode], ...]] = None
        if isinstance(properties, dict):
            parsed_properties = tuple(
                (str(name), self.parse(value)) for name, value in properties.items()
            )

        required = raw.get("required")
        required_names = frozenset(
            str(name) for name in required if isinstance(name, (str, int))
        ) if isinstance(required, list) else frozenset()

        extra = raw.get("additionalProperties")
        if extra is False:
            additional = AdditionalProperties.FORBIDDEN
            additional_schema = None
        elif isinstance(extra, dict):
            additional = AdditionalProperties.TYPED
            additional_schema = self.parse(extra)
        else:
            additional = AdditionalProperties.OPEN
            additional_schema = None

        return ObjectSchema(
            properties=parsed_properties,
            required=required_names,
            additional=additional,
            additional_schema=additional_schema,
            nullable=nullable,
        )

    def _members(self, value: Any) -> tuple[SchemaNode, ...]:
        if not isinstance(value, list):
            return ()
        return tuple(self.parse(member) for member in value)
