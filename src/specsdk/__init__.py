"""specsdk -- Generate TypeScript clients, React hooks and docs from OpenAPI 3.x specs.

This package reads one or more OpenAPI documents (JSON or YAML), resolves
every ``$ref`` pointer, extracts a flat list of endpoint descriptors and
projects each schema into a structural type. Four renderers turn that shared
analysis into artifacts:

* ``sdk.ts`` -- typed client functions,
* ``hooks.ts`` -- React data-fetching hooks,
* ``API.md`` -- Markdown documentation,
* ``index.html`` -- an interactive test page.

``package.json`` and ``tsconfig.json`` are written alongside them.

Typical workflow::

    specsdk generate -i openapi.yaml -o ./generated --base-url https://api.example.com

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    parser: Loading, ``$ref`` resolution, endpoint extraction, naming.
    typegen: Schema variants and the schema-to-type projector.
    renderers: Jinja2-based artifact renderers.
    pipeline: Multi-document loading and end-to-end generation.
    config: Option resolution and atomic file writes.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stderr diagnostics and stdout data formatting with Rich.
"""

__version__ = "0.3.0"
