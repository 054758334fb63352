"""Inspect commands -- examine OpenAPI spec details without generating.

Provides the ``specsdk inspect`` sub-command group with read-only
commands for viewing what the generator would see: the extracted endpoints
(with their final operation identifiers), the named schemas with their
projected TypeScript types, and general document info. Every sub-command
takes the same ``--input`` files as ``generate`` and honours the global
``--json``/``--plain`` output flags.
"""

from __future__ import annotations

from typing import Optional

import typer

from specsdk.commands import handle_errors
from specsdk.models import SpecDocument
from specsdk.output import format_response, get_output, info


inspect_app = typer.Typer(no_args_is_help=True)


def _load_documents(input_files: Optional[list[str]]) -> list[SpecDocument]:
    """Load the documents named on the command line (or in ``specsdk.json``).

    Raises:
        typer.Exit: With the error's exit code when no input is given or a
            document cannot be loaded.
    """
    from specsdk.config import resolve_options
    from specsdk.exceptions import InvalidUsageError
    from specsdk.pipeline import load_specifications

    with handle_errors():
        options = resolve_options(input_files=input_files)
        if not options.input_files:
            raise InvalidUsageError("No input files given; pass at least one with --input")
        return load_specifications(options.input_files)


@inspect_app.command("endpoints")
def inspect_endpoints(
    input_files: Optional[list[str]] = typer.Option(
        None, "--input", "-i", help="OpenAPI spec file or URL. Repeatable."
    ),
) -> None:
    """List all endpoints in output order.

    Displays a table with the HTTP method, path, operation identifier (as
    it will appear in the SDK, after de-duplication), summary and
    deprecation status of every endpoint.

    Example::

        specsdk inspect endpoints -i openapi.yaml
        specsdk --json inspect endpoints -i users.yaml -i billing.yaml
    """
    from specsdk.pipeline import collect_endpoints

    documents = _load_documents(input_files)
    endpoints = collect_endpoints(documents)

    headers = ["Method", "Path", "Operation ID", "Summary", "Deprecated"]
    rows: list[list[str]] = [
        [
            endpoint.method.value.upper(),
            endpoint.path,
            endpoint.operation_id,
            endpoint.summary or "-",
            "Yes" if endpoint.deprecated else "",
        ]
        for endpoint in endpoints
    ]

    get_output().print_table(headers, rows, title=f"Endpoints ({len(rows)})")


@inspect_app.command("schemas")
def inspect_schemas(
    input_files: Optional[list[str]] = typer.Option(
        None, "--input", "-i", help="OpenAPI spec file or URL. Repeatable."
    ),
) -> None:
    """List all named schemas with their projected TypeScript type.

    Named schemas are those declared under ``components/schemas`` or
    loaded from external documents. Nested named schemas show up by name
    only, exactly as in the generated ``sdk.ts``.

    Example::

        specsdk inspect schemas -i openapi.yaml
    """
    from specsdk.typegen import collect_named_schemas
    from specsdk.typegen.projector import project_type
    from specsdk.typegen.typescript import render_type, type_identifier

    documents = _load_documents(input_files)
    roots = [doc.components for doc in documents] + [doc.paths for doc in documents]
    schemas = collect_named_schemas(roots)

    if not schemas:
        info("No schemas defined in these specs.")
        return

    headers = ["Schema", "Type"]
    rows: list[list[str]] = [
        [type_identifier(name), render_type(project_type(schema, expand=True))]
        for name, schema in schemas.items()
    ]
    get_output().print_table(headers, rows, title=f"Schemas ({len(rows)})")


@inspect_app.command("info")
def inspect_info(
    input_files: Optional[list[str]] = typer.Option(
        None, "--input", "-i", help="OpenAPI spec file or URL. Repeatable."
    ),
) -> None:
    """Show document info (title, version, servers, counts).

    Example::

        specsdk inspect info -i openapi.yaml
    """
    from specsdk.parser.extractor import extract_endpoints

    documents = _load_documents(input_files)

    data: list[dict] = [
        {
            "source": doc.source or "-",
            "title": doc.title,
            "version": doc.version,
            "openapi_version": doc.openapi_version or "-",
            "description": doc.description or "-",
            "servers": [server.url for server in doc.servers],
            "endpoints": len(extract_endpoints(doc)),
            "schemas": len(doc.schemas),
        }
        for doc in documents
    ]
    format_response(data[0] if len(data) == 1 else data)
