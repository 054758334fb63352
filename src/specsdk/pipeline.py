"""End-to-end orchestration: documents in, artifacts out.

The pipeline glues the parser, the type projector and the renderers
together.  Every call is a single, stateless pass: nothing is cached
between runs and no global state is consulted, the
:class:`~specsdk.models.GenerationOptions` are passed in explicitly.

Typical usage::

    from specsdk.config import resolve_options
    from specsdk.pipeline import generate

    options = resolve_options(input_files=["openapi.yaml"], output_dir="./out")
    for path in generate(options):
        print(path)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional, Sequence

from specsdk.config import write_artifact
from specsdk.exceptions import InvalidUsageError
from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.parser.extractor import extract_document, extract_endpoints
from specsdk.parser.loader import load_spec, parse_content, validate_openapi_version
from specsdk.parser.naming import to_identifier
from specsdk.parser.resolver import resolve_refs
from specsdk.renderers import render_all
from specsdk.typegen.projector import iter_named_schemas, project_type
from specsdk.typegen.typescript import render_type

logger = logging.getLogger(__name__)

_MAX_WORKERS = 8


def load_specification(source: str) -> SpecDocument:
    """Load, resolve and wrap one OpenAPI document.

    Args:
        source: File path, ``http(s)`` URL, or ``-`` for stdin.

    Returns:
        The resolved :class:`~specsdk.models.SpecDocument`.

    Raises:
        SpecParseError: If the document cannot be read or parsed, or is not
            OpenAPI 3.x.
        ReferenceResolutionError: If a ``$ref`` cannot be resolved.
    """
    logger.debug("Loading %s", source)
    raw = load_spec(source)
    validate_openapi_version(raw)
    base_uri = None if source == "-" else source
    document = extract_document(resolve_refs(raw, base_uri=base_uri), source=source)
    logger.debug("Loaded %s: %s %s", source, document.title, document.version)
    return document


def parse_specification(
    content: str | bytes,
    fmt: str,
    base_uri: Optional[str] = None,
) -> SpecDocument:
    """Parse, resolve and wrap an in-memory OpenAPI document.

    Args:
        content: The document text or UTF-8 bytes.
        fmt: Declared format, ``"json"`` or ``"yaml"``.
        base_uri: Location that relative external references resolve
            against.  Defaults to the current working directory.

    Returns:
        The resolved :class:`~specsdk.models.SpecDocument`.

    Raises:
        SpecParseError: If the content cannot be parsed in *fmt*.
        ReferenceResolutionError: If a ``$ref`` cannot be resolved.
    """
    raw = parse_content(content, fmt)
    validate_openapi_version(raw)
    return extract_document(resolve_refs(raw, base_uri=base_uri), source=base_uri)


def load_specifications(sources: Sequence[str]) -> list[SpecDocument]:
    """Load several documents concurrently, keeping the caller's order.

    Each load owns its own resolver, so the workers share nothing.  The
    first failure (in input order) is re-raised and no partial result is
    returned.

    Args:
        sources: File paths or URLs.

    Returns:
        One document per source, in the same order.
    """
    if not sources:
        return []
    if len(sources) == 1:
        documents = [load_specification(sources[0])]
    else:
        workers = min(_MAX_WORKERS, len(sources))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="specsdk-load") as pool:
            documents = list(pool.map(load_specification, sources))

    disambiguate_schema_names(documents)
    return documents


def disambiguate_schema_names(documents: Sequence[SpecDocument]) -> None:
    """Rename named schemas whose name is taken by a different definition.

    All documents share one type namespace in ``sdk.ts``.  Walking the
    documents in order, a schema whose name was already declared with a
    different TypeScript definition gets the first free numeric suffix
    (``User2``, ``User3``...) and a warning is logged.  Identical
    definitions keep sharing one name.  The rename is stored on the
    :class:`~specsdk.parser.resolver.NamedSchema` itself, so every reference
    inside that document follows it.
    """
    definitions: dict[str, str] = {}
    for index, document in enumerate(documents):
        for schema in iter_named_schemas([document.components, document.paths]):
            name = schema.schema_name
            definition = render_type(project_type(schema, expand=True))
            if definitions.setdefault(name, definition) == definition:
                continue

            suffix = 2
            candidate = f"{name}{suffix}"
            while definitions.setdefault(candidate, definition) != definition:
                suffix += 1
                candidate = f"{name}{suffix}"

            logger.warning(
                "Schema '%s' in %s differs from an earlier schema of that name; renamed to '%s'",
                name, document.source or f"document {index + 1}", candidate,
            )
            schema.schema_name = candidate


def collect_endpoints(documents: Iterable[SpecDocument]) -> list[EndpointDescriptor]:
    """Extract the endpoints of all *documents*, in document order.

    Each descriptor records the position of its document in
    ``document_index``.  Identifiers are then made unique across the
    combined list with :func:`dedupe_operation_ids`.
    """
    endpoints: list[EndpointDescriptor] = []
    for index, document in enumerate(documents):
        endpoints.extend(
            endpoint.model_copy(update={"document_index": index}) if index else endpoint
            for endpoint in extract_endpoints(document)
        )
    return dedupe_operation_ids(endpoints)


def dedupe_operation_ids(endpoints: Sequence[EndpointDescriptor]) -> list[EndpointDescriptor]:
    """Make operation identifiers unique, usable JavaScript identifiers.

    Identifiers that are not valid JavaScript names are camel-cased first,
    and reserved words such as ``delete`` get a trailing underscore.
    The first endpoint keeps a colliding identifier; later ones get a
    numeric suffix (``getUsersId2``, ``getUsersId3``...) and a warning is
    logged for each rename.

    Returns:
        A new list; descriptors that needed no change are reused as-is.
    """
    taken: set[str] = set()
    result: list[EndpointDescriptor] = []

    for endpoint in endpoints:
        base = to_identifier(endpoint.operation_id)
        if base != endpoint.operation_id:
            logger.warning(
                "Operation id '%s' (%s %s) is not a usable JavaScript name; renamed to '%s'",
                endpoint.operation_id, endpoint.method.value.upper(), endpoint.path, base,
            )
        candidate = base
        suffix = 2
        while candidate in taken:
            candidate = f"{base}{suffix}"
            suffix += 1
        taken.add(candidate)

        if candidate != base:
            logger.warning(
                "Duplicate operation id '%s' (%s %s); renamed to '%s'",
                base, endpoint.method.value.upper(), endpoint.path, candidate,
            )
        if candidate != endpoint.operation_id:
            endpoint = endpoint.model_copy(update={"operation_id": candidate})
        result.append(endpoint)

    return result


def generate(options: GenerationOptions) -> list[Path]:
    """Run a complete generation pass.

    Loads every input document, renders ``sdk.ts``, ``hooks.ts``,
    ``API.md``, ``index.html`` and the package scaffolding, and writes them
    atomically to ``options.output_dir``.  Nothing is written unless every
    document loads and every artifact renders.

    Args:
        options: The resolved generation options.

    Returns:
        The written paths, in artifact order.

    Raises:
        InvalidUsageError: If no input document is configured.
        SpecParseError: If a document cannot be loaded.
        RenderError: If an artifact cannot be rendered or written.
    """
    if not options.input_files:
        raise InvalidUsageError("No input files given; pass at least one with --input")

    documents = load_specifications(options.input_files)
    endpoints = collect_endpoints(documents)
    logger.debug("Rendering %d endpoints from %d documents", len(endpoints), len(documents))

    artifacts = render_all(documents, endpoints, options)
    return [
        write_artifact(options.output_dir, name, content)
        for name, content in artifacts.items()
    ]
