"""Render ``sdk.ts``: typed client functions over an axios-compatible binding.

The output declares every named schema reachable from the input documents
exactly once, then for each endpoint its parameter and body types, an
argument type and an ``async`` function that performs the request through
the configured HTTP client and resolves with the response body.
"""

from __future__ import annotations

import logging
from typing import Sequence

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.renderers.base import GENERATED_BANNER, build_endpoint_views, render_template
from specsdk.typegen.projector import collect_named_schemas
from specsdk.typegen.typescript import render_declaration, type_identifier

logger = logging.getLogger(__name__)


def named_schema_declarations(documents: Sequence[SpecDocument]) -> list[str]:
    """TypeScript declarations of all named schemas, in discovery order.

    Components are walked before paths so that declarations follow the
    order of ``components.schemas``.  Two schemas mapping to the same
    identifier are declared once; the later one is dropped with a warning.
    """
    roots = [doc.components for doc in documents] + [doc.paths for doc in documents]
    declarations: list[str] = []
    seen: dict[str, str] = {}

    for name, schema in collect_named_schemas(roots).items():
        identifier = type_identifier(name)
        if identifier in seen:
            logger.warning(
                "Schema '%s' maps to type '%s' already declared for '%s'; skipping",
                name, identifier, seen[identifier],
            )
            continue
        seen[identifier] = name
        declarations.append(render_declaration(name, schema))

    return declarations


def render_client(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    """Render the ``sdk.ts`` source.

    Args:
        documents: Loaded documents, used for schema declarations and the
            header.
        endpoints: De-duplicated endpoints of all documents.
        options: Generation options; ``http_client`` names the import.

    Returns:
        The TypeScript source.

    Raises:
        RenderError: If the template fails to render.
    """
    return render_template(
        "sdk.ts.j2",
        {
            "banner": GENERATED_BANNER,
            "documents": documents,
            "http_client": options.http_client,
            "schemas": named_schema_declarations(documents),
            "endpoints": build_endpoint_views(endpoints),
        },
    )
