"""Shared Jinja2 environment and per-endpoint template context.

Every renderer is a pure function of ``(documents, endpoints, options)``
returning the file content as a string.  They share:

* :func:`create_environment` -- one configured :class:`~jinja2.Environment`
  over ``renderers/templates/``.  Autoescape is enabled for ``.html.j2``
  templates only; TypeScript and Markdown are emitted verbatim.
* :func:`render_template` -- renders a template and converts any Jinja2
  failure into :class:`~specsdk.exceptions.RenderError`.
* :class:`EndpointView` -- the precomputed strings (type names, TypeScript
  declarations, URL expression) templates need for one endpoint, so that
  templates stay free of projection logic.
"""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from specsdk.exceptions import RenderError
from specsdk.models import EndpointDescriptor, GenerationOptions, Parameter, SpecDocument
from specsdk.parser.extractor import content_schema, content_types
from specsdk.parser.naming import hook_name, type_prefix
from specsdk.typegen.examples import example_value
from specsdk.typegen.typescript import (
    generate_function_params,
    generate_params_interface,
    generate_request_body_type,
    params_required,
    params_type_name,
    path_params_type_name,
    query_params_type_name,
    request_body_type_name,
    response_type,
    schema_to_type,
    success_response_type,
    url_expression,
)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``renderers/templates/``)."""

GENERATED_BANNER = "Automatically generated by specsdk. Do not edit this file manually."


@functools.lru_cache(maxsize=1)
def create_environment() -> Environment:
    """Create the Jinja2 environment shared by all renderers.

    Block trimming and lstrip are enabled for cleaner template authoring,
    and trailing newlines are kept so generated files end with one.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(
            enabled_extensions=("html.j2",),
            default_for_string=False,
            default=False,
        ),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["tojson_pretty"] = lambda value: json.dumps(value, indent=2, ensure_ascii=False)
    env.filters["md_cell"] = markdown_cell
    env.filters["jsdoc"] = jsdoc_text
    return env


def render_template(template_name: str, context: dict[str, Any]) -> str:
    """Render *template_name* with *context*.

    Raises:
        RenderError: If the template is missing or fails to render.
    """
    try:
        template = create_environment().get_template(template_name)
        return template.render(**context)
    except TemplateError as exc:
        raise RenderError(f"Failed to render {template_name}: {exc}") from exc


def markdown_cell(value: Any) -> str:
    """Make *value* safe inside a Markdown table cell."""
    if value is None:
        return ""
    return " ".join(str(value).split()).replace("|", "\\|")


def jsdoc_text(value: Any) -> str:
    """Make *value* safe inside a C-style block comment."""
    if value is None:
        return ""
    return str(value).replace("*/", "*\\/")


@dataclass(frozen=True)
class ParameterView:
    name: str
    type: str
    required: bool
    description: str
    example: Any


@dataclass(frozen=True)
class ResponseView:
    status: str
    description: str
    type: str
    media_types: tuple[str, ...]


@dataclass(frozen=True)
class EndpointView:
    """Template-ready view of one :class:`~specsdk.models.EndpointDescriptor`."""

    endpoint: EndpointDescriptor
    function_name: str
    hook_name: str
    type_prefix: str
    method: str
    path: str
    summary: str
    description: str
    deprecated: bool
    tags: tuple[str, ...]
    is_mutation: bool
    params_type: Optional[str]
    params_required: bool
    path_type: Optional[str]
    query_type: Optional[str]
    body_type: Optional[str]
    body_declaration: str
    params_declaration: str
    function_params_declaration: str
    response_type: str
    url: str
    path_params: tuple[ParameterView, ...]
    query_params: tuple[ParameterView, ...]
    body_description: str
    body_schema_type: Optional[str]
    body_example: Any
    responses: tuple[ResponseView, ...]

    @property
    def anchor(self) -> str:
        """Markdown/HTML anchor of the endpoint section."""
        return self.function_name.lower()

    @property
    def http_method(self) -> str:
        return self.method.upper()


def build_endpoint_view(endpoint: EndpointDescriptor) -> EndpointView:
    """Precompute everything the templates need for *endpoint*."""
    prefix = type_prefix(endpoint.operation_id)
    body = endpoint.request_body if isinstance(endpoint.request_body, dict) else None
    body_schema = content_schema(body)

    return EndpointView(
        endpoint=endpoint,
        function_name=endpoint.operation_id,
        hook_name=hook_name(endpoint.operation_id),
        type_prefix=prefix,
        method=endpoint.method.value,
        path=endpoint.path,
        summary=endpoint.summary or "",
        description=endpoint.description or "",
        deprecated=endpoint.deprecated,
        tags=tuple(endpoint.tags),
        is_mutation=endpoint.method.is_mutation,
        params_type=params_type_name(endpoint),
        params_required=params_required(endpoint),
        path_type=path_params_type_name(endpoint),
        query_type=query_params_type_name(endpoint),
        body_type=request_body_type_name(endpoint),
        body_declaration=generate_request_body_type(endpoint),
        params_declaration=generate_params_interface(
            endpoint.path_params, endpoint.query_params, prefix
        ),
        function_params_declaration=generate_function_params(endpoint),
        response_type=success_response_type(endpoint),
        url=url_expression(endpoint),
        path_params=tuple(_parameter_view(p) for p in endpoint.path_params),
        query_params=tuple(_parameter_view(p) for p in endpoint.query_params),
        body_description=(body or {}).get("description") or "",
        body_schema_type=schema_to_type(body_schema) if body is not None else None,
        body_example=example_value(body_schema) if body_schema is not None else None,
        responses=tuple(
            ResponseView(
                status=status,
                description=str(response.get("description") or ""),
                type=response_type(response),
                media_types=tuple(content_types(response)),
            )
            for status, response in endpoint.responses.items()
        ),
    )


def _parameter_view(param: Parameter) -> ParameterView:
    return ParameterView(
        name=param.name,
        type=schema_to_type(param.schema_),
        required=param.required,
        description=param.description or "",
        example=example_value(param.schema_),
    )


def build_endpoint_views(endpoints: Sequence[EndpointDescriptor]) -> list[EndpointView]:
    return [build_endpoint_view(endpoint) for endpoint in endpoints]


def group_by_document(
    documents: Sequence[SpecDocument],
    views: Sequence[EndpointView],
) -> list[tuple[SpecDocument, list[EndpointView]]]:
    """Pair every document with its endpoint views, in input order."""
    groups: list[tuple[SpecDocument, list[EndpointView]]] = [(doc, []) for doc in documents]
    for view in views:
        index = view.endpoint.document_index
        if 0 <= index < len(groups):
            groups[index][1].append(view)
    return groups


def resolve_base_url(documents: Sequence[SpecDocument], options: GenerationOptions) -> str:
    """The configured base URL, else the first server URL, else ``""``."""
    if options.base_url:
        return options.base_url.rstrip("/")
    for document in documents:
        if document.servers:
            return document.servers[0].url.rstrip("/")
    return ""
