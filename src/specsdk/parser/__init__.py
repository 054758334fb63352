"""OpenAPI spec parser -- load, resolve ``$ref`` pointers, and extract endpoints.

This sub-package is the front half of the specsdk pipeline: turning a raw
OpenAPI 3.x document (JSON or YAML, local file or remote URL) into a
:class:`~specsdk.models.SpecDocument` and the list of
:class:`~specsdk.models.EndpointDescriptor` objects every renderer consumes.

Typical usage::

    from specsdk.parser import load_spec, resolve_refs, extract_document, extract_endpoints

    raw = load_spec("openapi.yaml")
    document = extract_document(resolve_refs(raw, base_uri="openapi.yaml"))
    for endpoint in extract_endpoints(document):
        print(endpoint.method.value.upper(), endpoint.path, endpoint.operation_id)

Sub-modules:

* :mod:`~specsdk.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version checks.
* :mod:`~specsdk.parser.resolver` -- Structure-preserving ``$ref``
  resolution with memoisation, so recursive schemas become cyclic graphs.
* :mod:`~specsdk.parser.extractor` -- Walks the resolved tree and produces
  the document metadata and endpoint descriptors.
* :mod:`~specsdk.parser.naming` -- Fallback operation identifiers and the
  identifier helpers shared by the renderers.
"""

from specsdk.parser.extractor import content_schema, extract_document, extract_endpoints
from specsdk.parser.loader import load_spec, parse_content, validate_openapi_version
from specsdk.parser.naming import generate_operation_id
from specsdk.parser.resolver import NamedSchema, resolve_refs

__all__ = [
    "NamedSchema",
    "content_schema",
    "extract_document",
    "extract_endpoints",
    "generate_operation_id",
    "load_spec",
    "parse_content",
    "resolve_refs",
    "validate_openapi_version",
]
