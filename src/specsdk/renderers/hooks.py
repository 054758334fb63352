"""Render ``hooks.ts``: React data-fetching hooks over the ``./sdk`` client.

``GET`` endpoints become query hooks that fetch on mount and whenever
their arguments change, exposing ``data``, ``loading``, ``error`` and
``refetch``; passing ``enabled: false`` defers the request.  Every other
verb becomes a mutation hook exposing ``mutate``, ``data``, ``loading``
and ``error``; nothing is sent until ``mutate`` is called.

The hooks never issue requests themselves: they call the functions
exported by ``sdk.ts``, so both files always agree on URLs and types.
"""

from __future__ import annotations

from typing import Sequence

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.renderers.base import GENERATED_BANNER, build_endpoint_views, render_template


def render_hooks(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    """Render the ``hooks.ts`` source.

    Raises:
        RenderError: If the template fails to render.
    """
    return render_template(
        "hooks.ts.j2",
        {
            "banner": GENERATED_BANNER,
            "documents": documents,
            "endpoints": build_endpoint_views(endpoints),
        },
    )
