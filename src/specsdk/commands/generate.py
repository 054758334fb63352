"""Generate command -- render the SDK, hooks and docs for OpenAPI specs.

Implements the ``specsdk generate`` top-level command: resolve the options
(CLI flags, ``SPECSDK_*`` environment variables, ``./specsdk.json``),
load every input document, render all artifacts and write them to the
output directory.
"""

from __future__ import annotations

from typing import Optional

import typer

from specsdk.commands import handle_errors
from specsdk.output import debug, info, progress, success, suggest


def generate_command(
    input_files: Optional[list[str]] = typer.Option(
        None,
        "--input",
        "-i",
        help="OpenAPI spec file or URL (JSON or YAML). Repeat for several specs.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory for generated files (default: ./generated).",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Base URL used by the interactive HTML page.",
    ),
    http_client: Optional[str] = typer.Option(
        None,
        "--http-client",
        "-c",
        help="Identifier the generated SDK imports axios as (default: axios).",
    ),
) -> None:
    """Generate a TypeScript SDK, React hooks, Markdown and HTML docs.

    Writes ``sdk.ts``, ``hooks.ts``, ``API.md``, ``index.html``,
    ``package.json`` and ``tsconfig.json``.  Nothing is written when a
    spec fails to load.

    Args:
        input_files: One or more spec paths or URLs.
        output_dir: Destination directory.
        base_url: Base URL for requests sent from ``index.html``.
        http_client: Name bound to the axios import in ``sdk.ts``.

    Example::

        specsdk generate -i openapi.yaml -o ./generated
        specsdk generate -i users.yaml -i billing.json -o ./sdk -b https://api.example.com
    """
    from specsdk.config import resolve_options
    from specsdk.pipeline import generate

    with handle_errors():
        options = resolve_options(
            input_files=input_files,
            output_dir=output_dir,
            base_url=base_url,
            http_client=http_client,
        )
        debug(f"Resolved options: {options.model_dump()}")

        info(f"Input files: {', '.join(options.input_files) or '-'}")
        info(f"Output directory: {options.output_dir}")
        progress("Loading OpenAPI specifications...")

        written = generate(options)

    for path in written:
        info(f"  {path}")
    success(f"Generated {len(written)} files in {options.output_dir}")
    suggest(f"Import the client from {options.output_dir}/sdk.ts")
