"""Artifact renderers driven by the shared endpoint and type analysis.

Every renderer has the signature ``(documents, endpoints, options) -> str``
and is pure: it neither reads nor writes files.  :data:`ARTIFACTS` lists
them in output order and :func:`render_all` runs them all.

* :mod:`~specsdk.renderers.client` -- ``sdk.ts``
* :mod:`~specsdk.renderers.hooks` -- ``hooks.ts``
* :mod:`~specsdk.renderers.markdown` -- ``API.md``
* :mod:`~specsdk.renderers.html` -- ``index.html``
* :mod:`~specsdk.renderers.scaffold` -- ``package.json``, ``tsconfig.json``
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.renderers.client import render_client
from specsdk.renderers.hooks import render_hooks
from specsdk.renderers.html import render_html
from specsdk.renderers.markdown import render_markdown
from specsdk.renderers.scaffold import render_package_json, render_tsconfig

logger = logging.getLogger(__name__)

Renderer = Callable[
    [Sequence[SpecDocument], Sequence[EndpointDescriptor], GenerationOptions], str
]

ARTIFACTS: dict[str, Renderer] = {
    "sdk.ts": render_client,
    "hooks.ts": render_hooks,
    "API.md": render_markdown,
    "index.html": render_html,
    "package.json": render_package_json,
    "tsconfig.json": render_tsconfig,
}


def render_all(
    documents: Sequence[SpecDocument],
    endpoints: Sequence[EndpointDescriptor],
    options: GenerationOptions,
) -> dict[str, str]:
    """Render every artifact, keyed by file name in output order.

    Raises:
        RenderError: If any artifact fails to render.
    """
    rendered: dict[str, str] = {}
    for name, renderer in ARTIFACTS.items():
        logger.debug("Rendering %s", name)
        rendered[name] = renderer(documents, endpoints, options)
    return rendered


__all__ = [
    "ARTIFACTS",
    "render_all",
    "render_client",
    "render_hooks",
    "render_html",
    "render_markdown",
    "render_package_json",
    "render_tsconfig",
]
