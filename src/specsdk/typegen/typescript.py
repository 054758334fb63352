"""Render type expressions and endpoint types as TypeScript source.

This is the TypeScript binding of :mod:`specsdk.typegen.projector`.  The
client and hook renderers assemble their output from these helpers; the
Markdown and HTML renderers use :func:`schema_to_type` to show types.

The ``indent`` arguments are purely cosmetic: they control how nested
object literals are laid out, never how deep the projection goes.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from specsdk.models import EndpointDescriptor, Parameter
from specsdk.parser.extractor import content_schema
from specsdk.parser.naming import is_identifier, is_reserved, to_pascal_case, type_prefix
from specsdk.typegen.expressions import (
    UNKNOWN,
    ArrayType,
    IntersectionType,
    LiteralUnion,
    MapType,
    NamedType,
    PrimitiveType,
    RecordType,
    TypeExpr,
    UnionType,
)
from specsdk.typegen.projector import project_type

_INDENT = "  "

# Built-in type names a declaration cannot reuse.
_PREDEFINED_TYPES = frozenset({
    "any", "bigint", "boolean", "never", "number", "object", "string", "symbol",
    "undefined", "unknown",
})


def render_type(expr: TypeExpr, indent: int = 0) -> str:
    """Render *expr* as a TypeScript type.

    The unknown type renders as ``any`` so that generated code stays
    assignable without casts.
    """
    if isinstance(expr, PrimitiveType):
        return "any" if expr == UNKNOWN else expr.name
    if isinstance(expr, LiteralUnion):
        return " | ".join(_literal(value) for value in expr.values)
    if isinstance(expr, ArrayType):
        if expr.element == UNKNOWN:
            return "any[]"
        return f"Array<{render_type(expr.element, indent)}>"
    if isinstance(expr, RecordType):
        return _render_record(expr, indent)
    if isinstance(expr, MapType):
        return f"Record<string, {render_type(expr.value, indent)}>"
    if isinstance(expr, UnionType):
        return "(" + " | ".join(render_type(m, indent + 1) for m in expr.members) + ")"
    if isinstance(expr, IntersectionType):
        return " & ".join(render_type(m, indent + 1) for m in expr.members)
    if isinstance(expr, NamedType):
        return type_identifier(expr.name)
    return "any"


def _render_record(expr: RecordType, indent: int) -> str:
    if not expr.fields:
        return "Record<string, never>"
    pad = _INDENT * indent
    lines = [
        f"{pad}{_INDENT}{property_key(f.name)}{'' if f.required else '?'}: "
        f"{render_type(f.type, indent + 1)};"
        for f in expr.fields
    ]
    return "{\n" + "\n".join(lines) + f"\n{pad}}}"


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return js_string(value)
    return json.dumps(value, default=str)


def js_string(value: str) -> str:
    """Single-quoted JavaScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def property_key(name: str) -> str:
    """Object key, quoted when it is not a valid identifier."""
    return name if is_identifier(name) else js_string(name)


def type_identifier(name: str) -> str:
    """A schema name usable as a TypeScript type name."""
    if is_identifier(name):
        identifier = name
    else:
        pascal = to_pascal_case(name)
        if not pascal:
            return "Unnamed"
        identifier = f"_{pascal}" if pascal[0].isdigit() else pascal
    if is_reserved(identifier) or identifier in _PREDEFINED_TYPES:
        return f"{identifier}_"
    return identifier


def schema_to_type(schema: Any, indent: int = 0) -> str:
    """Project *schema* and render it as TypeScript in one step."""
    return render_type(project_type(schema), indent)


def render_declaration(name: str, schema: Any) -> str:
    """Declare a named schema: ``interface`` for records, ``type`` otherwise."""
    expr = project_type(schema, expand=True)
    identifier = type_identifier(name)
    if isinstance(expr, RecordType) and expr.fields:
        return f"export interface {identifier} {render_type(expr)}\n"
    return f"export type {identifier} = {render_type(expr)};\n"


# ---------------------------------------------------------------------- #
# Per-endpoint types
# ---------------------------------------------------------------------- #


def path_params_type_name(endpoint: EndpointDescriptor) -> Optional[str]:
    if not endpoint.path_params:
        return None
    return f"{type_prefix(endpoint.operation_id)}PathParams"


def query_params_type_name(endpoint: EndpointDescriptor) -> Optional[str]:
    if not endpoint.query_params:
        return None
    return f"{type_prefix(endpoint.operation_id)}QueryParams"


def request_body_type_name(endpoint: EndpointDescriptor) -> Optional[str]:
    if endpoint.request_body is None:
        return None
    return f"{type_prefix(endpoint.operation_id)}RequestBody"


def generate_params_interface(
    path_params: Sequence[Parameter],
    query_params: Sequence[Parameter],
    prefix: str,
) -> str:
    """Declare the path and query parameter interfaces of one endpoint.

    Path parameters are always required; query parameters are optional
    unless declared required.  Returns ``""`` when there are no parameters.
    """
    interfaces: list[str] = []

    if path_params:
        props = "\n".join(
            f"{_INDENT}{property_key(p.name)}: {schema_to_type(p.schema_, 1)};"
            for p in path_params
        )
        interfaces.append(f"export interface {prefix}PathParams {{\n{props}\n}}")

    if query_params:
        props = "\n".join(
            f"{_INDENT}{property_key(p.name)}{'' if p.required else '?'}: "
            f"{schema_to_type(p.schema_, 1)};"
            for p in query_params
        )
        interfaces.append(f"export interface {prefix}QueryParams {{\n{props}\n}}")

    return "\n\n".join(interfaces)


def generate_request_body_type(endpoint: EndpointDescriptor) -> str:
    """Declare the request body type of *endpoint*, or ``""`` without a body.

    A body without a usable schema is declared as ``any``.
    """
    name = request_body_type_name(endpoint)
    if name is None:
        return ""
    expr = project_type(content_schema(endpoint.request_body))
    if isinstance(expr, RecordType) and expr.fields:
        return f"export interface {name} {render_type(expr)}\n"
    return f"export type {name} = {render_type(expr)};\n"


def success_status(endpoint: EndpointDescriptor) -> Optional[str]:
    """The first 2xx status of *endpoint*, else ``default``, else ``None``."""
    for status in endpoint.responses:
        if status.startswith("2"):
            return status
    if "default" in endpoint.responses:
        return "default"
    return None


def response_type(response: Any) -> str:
    """TypeScript type of a response body; ``any`` when it has no schema."""
    return schema_to_type(content_schema(response))


def success_response_type(endpoint: EndpointDescriptor) -> str:
    status = success_status(endpoint)
    if status is None:
        return "any"
    return response_type(endpoint.responses[status])


def url_expression(endpoint: EndpointDescriptor, accessor: str = "params.path") -> str:
    """JavaScript expression building the request path.

    Declared path parameters are substituted into a template literal and
    URI-encoded; a path without parameters is a plain string literal.
    """
    if not endpoint.path_params:
        return js_string(endpoint.path)

    url = endpoint.path.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
    for param in endpoint.path_params:
        value = f"{accessor}.{param.name}" if is_identifier(param.name) else f"{accessor}[{js_string(param.name)}]"
        url = url.replace(f"{{{param.name}}}", f"${{encodeURIComponent(String({value}))}}")
    return f"`{url}`"


def params_type_name(endpoint: EndpointDescriptor) -> Optional[str]:
    """Name of the combined argument type of an SDK function, if it takes one."""
    if not (endpoint.path_params or endpoint.query_params or endpoint.request_body is not None):
        return None
    return f"{type_prefix(endpoint.operation_id)}Params"


def body_required(endpoint: EndpointDescriptor) -> bool:
    return isinstance(endpoint.request_body, dict) and bool(endpoint.request_body.get("required"))


def params_required(endpoint: EndpointDescriptor) -> bool:
    """Whether callers must pass an argument (path parameters or a required body)."""
    return bool(endpoint.path_params) or body_required(endpoint)


def generate_function_params(endpoint: EndpointDescriptor) -> str:
    """Declare the ``{ path, query, body }`` argument type of an SDK function.

    ``path`` is mandatory whenever the endpoint has path parameters,
    ``query`` is always optional, ``body`` follows the request body's
    ``required`` flag.  Returns ``""`` for endpoints without any input.
    """
    name = params_type_name(endpoint)
    if name is None:
        return ""

    members: list[str] = []
    path_type = path_params_type_name(endpoint)
    if path_type:
        members.append(f"{_INDENT}path: {path_type};")
    query_type = query_params_type_name(endpoint)
    if query_type:
        members.append(f"{_INDENT}query?: {query_type};")
    body_type = request_body_type_name(endpoint)
    if body_type:
        members.append(f"{_INDENT}body{'' if body_required(endpoint) else '?'}: {body_type};")

    return f"export interface {name} {{\n" + "\n".join(members) + "\n}"
