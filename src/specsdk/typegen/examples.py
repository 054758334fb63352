"""Sample values for documentation and the interactive test page.

:func:`example_value` walks a parsed schema and builds a plausible JSON
value: declared ``example``/``default`` values are not available on the
parsed variants, so the value is synthesised from the shape alone (first
enum member, a placeholder per string format, ``0`` for numbers...).

Named schemas are expanded, up to a fixed depth, so a recursive schema
yields a finite sample.
"""

from __future__ import annotations

from typing import Any

from specsdk.typegen.schema import (
    AdditionalProperties,
    AllOfSchema,
    AnyOfSchema,
    ArraySchema,
    ObjectSchema,
    OneOfSchema,
    PrimitiveSchema,
    ReferenceSchema,
    SchemaNode,
    parse_schema,
)

_MAX_DEPTH = 4

_STRING_FORMATS = {
    "date": "2024-01-01",
    "date-time": "2024-01-01T00:00:00Z",
    "email": "user@example.com",
    "uri": "https://example.com",
    "url": "https://example.com",
    "uuid": "00000000-0000-0000-0000-000000000000",
    "hostname": "example.com",
    "ipv4": "127.0.0.1",
    "ipv6": "::1",
    "byte": "",
    "binary": "",
}


def example_value(schema: Any) -> Any:
    """Build a sample JSON value for *schema*.

    Example::

        >>> example_value({"type": "object", "properties": {"id": {"type": "integer"}}})
        {'id': 0}
    """
    return _sample(parse_schema(schema, expand=True), 0)


def _sample(node: SchemaNode, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return None
    if isinstance(node, ReferenceSchema):
        return _sample(node.target, depth + 1)
    if isinstance(node, PrimitiveSchema):
        return _sample_primitive(node)
    if isinstance(node, ArraySchema):
        if node.items is None:
            return []
        item = _sample(node.items, depth + 1)
        return [] if item is None else [item]
    if isinstance(node, ObjectSchema):
        return _sample_object(node, depth)
    if isinstance(node, AllOfSchema):
        merged: dict[str, Any] = {}
        for member in node.members:
            value = _sample(member, depth + 1)
            if isinstance(value, dict):
                merged.update(value)
        return merged
    if isinstance(node, (OneOfSchema, AnyOfSchema)):
        return _sample(node.members[0], depth + 1) if node.members else None
    return None


def _sample_primitive(node: PrimitiveSchema) -> Any:
    if node.enum:
        return node.enum[0]
    if node.type == "string":
        return _STRING_FORMATS.get(node.format or "", "string")
    if node.type in ("integer", "number"):
        return 0
    if node.type == "boolean":
        return True
    return None


def _sample_object(node: ObjectSchema, depth: int) -> dict[str, Any]:
    if node.properties:
        return {name: _sample(value, depth + 1) for name, value in node.properties}
    if node.additional is AdditionalProperties.TYPED and node.additional_schema is not None:
        return {"key": _sample(node.additional_schema, depth + 1)}
    return {}
