"""Render ``API.md``: prose documentation of every endpoint.

For each input document the output has a table of contents, then one
section per endpoint with its summary, parameter tables, request body and
response types, and usage examples for both the SDK function and the
React hook.  Named schemas are listed at the end with their TypeScript
declarations.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.renderers.base import (
    GENERATED_BANNER,
    EndpointView,
    build_endpoint_views,
    group_by_document,
    render_template,
    resolve_base_url,
)
from specsdk.renderers.client import named_schema_declarations


def example_arguments(view: EndpointView) -> Optional[dict[str, Any]]:
    """Sample ``{path, query, body}`` argument for *view*'s SDK function."""
    if view.params_type is None:
        return None
    args: dict[str, Any] = {}
    if view.path_params:
        args["path"] = {p.name: p.example for p in view.path_params}
    if view.query_params:
        args["query"] = {p.name: p.example for p in view.query_params}
    if view.body_type:
        args["body"] = view.body_example if view.body_example is not None else {}
    return args


def example_call(view: EndpointView) -> str:
    """The argument list of an example call, as TypeScript source."""
    args = example_arguments(view)
    if args is None:
        return ""
    return json.dumps(args, indent=2, ensure_ascii=False)


def render_markdown(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    """Render the ``API.md`` source.

    Raises:
        RenderError: If the template fails to render.
    """
    views = build_endpoint_views(endpoints)
    return render_template(
        "api.md.j2",
        {
            "banner": GENERATED_BANNER,
            "groups": group_by_document(documents, views),
            "examples": {view.function_name: example_call(view) for view in views},
            "base_url": resolve_base_url(documents, options),
            "schemas": named_schema_declarations(documents),
        },
    )
