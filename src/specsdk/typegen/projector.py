"""Project schemas onto structural type expressions.

:func:`project_type` is the one schema-to-type mapping shared by every
renderer.  It is pure and total: any input, however malformed, yields some
:data:`~specsdk.typegen.expressions.TypeExpr`, falling back to ``unknown``.

Mapping rules:

* named schemas and literal ``$ref`` dicts -> :class:`NamedType`, never
  expanded in place (the definition is emitted once, elsewhere);
* string enumerations -> :class:`LiteralUnion`; ``integer`` and ``number``
  -> ``number``; ``string``, ``boolean``, ``null`` -> themselves;
* arrays -> :class:`ArrayType` of the projected items (``unknown`` when
  absent);
* objects without properties -> empty record (``additionalProperties:
  false``), typed map, or map of ``unknown``; with properties -> ordered
  :class:`RecordType`, fields optional unless required;
* ``allOf`` -> intersection; ``oneOf``/``anyOf`` -> union, in declared
  order, ``allOf`` winning when both are present;
* ``nullable`` / ``type: [..., "null"]`` -> union with ``null``.

Because references project to their name, recursive schemas terminate
without any depth limit.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from specsdk.parser.resolver import NamedSchema
from specsdk.typegen.expressions import (
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayType,
    Field,
    IntersectionType,
    LiteralUnion,
    MapType,
    NamedType,
    RecordType,
    TypeExpr,
    UnionType,
)
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

_PRIMITIVES: dict[str, TypeExpr] = {
    "string": STRING,
    "number": NUMBER,
    "integer": NUMBER,
    "boolean": BOOLEAN,
    "null": NULL,
}


def project_type(schema: Any, *, expand: bool = False) -> TypeExpr:
    """Project a schema onto its structural type expression.

    Args:
        schema: A resolved schema dict, a literal ``{"$ref": ...}`` dict, a
            parsed schema variant, or ``None``.
        expand: Project the body of a top-level named schema instead of its
            name.  Used when emitting the declaration of a named type.

    Returns:
        The type expression.

    Example::

        >>> project_type({"oneOf": [{"type": "string"}, {"type": "integer"}]})
        UnionType(members=(PrimitiveType(name='string'), PrimitiveType(name='number')))
    """
    return _project(parse_schema(schema, expand=expand))


def _project(node: SchemaNode) -> TypeExpr:
    if isinstance(node, ReferenceSchema):
        return NamedType(node.name)
    if isinstance(node, PrimitiveSchema):
        return _nullable(_project_primitive(node), node.nullable)
    if isinstance(node, ArraySchema):
        element = _project(node.items) if node.items is not None else UNKNOWN
        return _nullable(ArrayType(element), node.nullable)
    if isinstance(node, ObjectSchema):
        return _nullable(_project_object(node), node.nullable)
    if isinstance(node, AllOfSchema):
        return _combine(IntersectionType, [_project(m) for m in node.members])
    if isinstance(node, (OneOfSchema, AnyOfSchema)):
        return _combine(UnionType, [_project(m) for m in node.members])
    return UNKNOWN


def _project_primitive(node: PrimitiveSchema) -> TypeExpr:
    if node.type == "string" and node.enum:
        return LiteralUnion(node.enum)
    return _PRIMITIVES.get(node.type, UNKNOWN)


def _project_object(node: ObjectSchema) -> TypeExpr:
    if node.properties is not None:
        return RecordType(tuple(
            Field(name=name, type=_project(value), required=name in node.required)
            for name, value in node.properties
        ))

    if node.additional is AdditionalProperties.FORBIDDEN:
        return RecordType(())
    if node.additional is AdditionalProperties.TYPED and node.additional_schema is not None:
        return MapType(_project(node.additional_schema))
    return MapType(UNKNOWN)


def _combine(kind: type, members: list[TypeExpr]) -> TypeExpr:
    if not members:
        return UNKNOWN
    if len(members) == 1:
        return members[0]
    return kind(tuple(members))


def _nullable(expr: TypeExpr, nullable: bool) -> TypeExpr:
    if not nullable or expr == NULL:
        return expr
    return UnionType((expr, NULL))


def iter_named_schemas(roots: Iterable[Any]) -> Iterator[NamedSchema]:
    """Yield every distinct named schema object reachable from *roots*.

    Walks resolved trees (documents, endpoint bodies, single schemas)
    depth-first in declaration order without recursion, visiting each
    container once, so cyclic graphs are fine.  Two different objects
    declared under the same name are both yielded.
    """
    seen: set[int] = set()
    stack: list[Any] = list(roots)[::-1]

    while stack:
        node = stack.pop()
        if not isinstance(node, (dict, list)) or id(node) in seen:
            continue
        seen.add(id(node))

        if isinstance(node, NamedSchema):
            yield node

        children = node.values() if isinstance(node, dict) else node
        stack.extend(reversed(list(children)))


def collect_named_schemas(roots: Iterable[Any]) -> dict[str, NamedSchema]:
    """Map each schema name reachable from *roots* to its schema.

    Names come from :attr:`NamedSchema.schema_name`, in discovery order.
    When two different schemas share a name the first one found wins;
    :func:`specsdk.pipeline.disambiguate_schema_names` renames such clashes
    across documents before rendering.
    """
    found: dict[str, NamedSchema] = {}
    for schema in iter_named_schemas(roots):
        found.setdefault(schema.schema_name, schema)
    return found
