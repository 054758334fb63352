"""Render ``index.html``: a self-contained interactive test page.

Each endpoint gets a form with one input per path and query parameter and,
when it takes a body, a JSON textarea prefilled with a sample value.  A
small inline script assembles the URL against the base URL (``--base-url``
or the first declared server), sends the request with ``fetch`` and shows
the status and response body.  The page has no external dependencies.

The template is autoescaped; endpoint metadata reaches the script through
Jinja2's ``tojson`` filter only.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.renderers.base import (
    EndpointView,
    build_endpoint_views,
    group_by_document,
    render_template,
    resolve_base_url,
)


def script_metadata(view: EndpointView) -> dict[str, Any]:
    """What the page script needs to send a request for *view*."""
    return {
        "method": view.http_method,
        "path": view.path,
        "pathParams": [p.name for p in view.path_params],
        "queryParams": [p.name for p in view.query_params],
        "hasBody": view.body_type is not None,
    }


def body_placeholder(view: EndpointView) -> str:
    if view.body_example is None:
        return "{}"
    return json.dumps(view.body_example, indent=2, ensure_ascii=False)


def render_html(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    """Render the ``index.html`` source.

    Raises:
        RenderError: If the template fails to render.
    """
    views = build_endpoint_views(endpoints)
    title = documents[0].title if len(documents) == 1 else "API Documentation"
    return render_template(
        "index.html.j2",
        {
            "title": title,
            "groups": group_by_document(documents, views),
            "base_url": resolve_base_url(documents, options),
            "endpoints_meta": {view.function_name: script_metadata(view) for view in views},
            "bodies": {view.function_name: body_placeholder(view) for view in views},
        },
    )
