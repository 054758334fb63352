"""Extract document metadata and endpoint descriptors from resolved OpenAPI specs.

This module walks a fully ``$ref``-resolved OpenAPI spec dictionary.  It has
two public entry points:

* :func:`extract_document` -- wraps the resolved tree in a
  :class:`~specsdk.models.SpecDocument` (info, servers, paths, components).
* :func:`extract_endpoints` -- produces the ordered list of
  :class:`~specsdk.models.EndpointDescriptor` objects, one per
  (path, verb) pair.

Endpoint order is part of the output contract: paths keep their declaration
order and, within a path, verbs are visited in the fixed priority GET, POST,
PUT, DELETE, PATCH.  Path-level parameters come first, operation-level
parameters are appended after them, and the combined list is split by
location; header and cookie parameters are dropped.

Nothing in here raises for a malformed but resolved document.  Anomalies
(undeclared placeholders, optional path parameters, odd status codes) are
logged as warnings and the extractor carries on.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Union

from specsdk.models import (
    EndpointDescriptor,
    HTTPMethod,
    Parameter,
    ParameterLocation,
    ServerInfo,
    SpecDocument,
)
from specsdk.parser.naming import generate_operation_id

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")
_STATUS_CODE = re.compile(r"^(?:[1-5][0-9]{2}|[1-5]XX|default)$", re.IGNORECASE)
_JSON_MEDIA_TYPE = "application/json"


def extract_document(spec: dict[str, Any], source: Optional[str] = None) -> SpecDocument:
    """Wrap a resolved spec dict in a :class:`~specsdk.models.SpecDocument`.

    Args:
        spec: The resolved spec, as returned by
            :func:`~specsdk.parser.resolver.resolve_refs`.
        source: File path or URL the spec was loaded from.

    Returns:
        The document.  Missing ``info`` fields fall back to
        ``"Untitled API"`` / ``"0.0.0"``.
    """
    info = spec.get("info")
    if not isinstance(info, dict):
        info = {}
    paths = spec.get("paths")
    components = spec.get("components")
    openapi_version = spec.get("openapi")

    return SpecDocument(
        title=str(info.get("title") or "Untitled API"),
        version=str(info.get("version") or "0.0.0"),
        description=info.get("description"),
        openapi_version=str(openapi_version) if openapi_version is not None else None,
        servers=_extract_servers(spec),
        paths=paths if isinstance(paths, dict) else {},
        components=components if isinstance(components, dict) else {},
        source=source,
    )


def _extract_servers(spec: dict[str, Any]) -> list[ServerInfo]:
    """Extract server entries from the spec's ``servers`` array."""
    servers = spec.get("servers")
    if not isinstance(servers, list):
        return []

    return [
        ServerInfo(
            url=str(server.get("url", "/")),
            description=server.get("description"),
        )
        for server in servers
        if isinstance(server, dict)
    ]


def extract_endpoints(
    document: Union[SpecDocument, dict[str, Any]],
) -> list[EndpointDescriptor]:
    """Extract every endpoint of a resolved document, in output order.

    Args:
        document: A :class:`~specsdk.models.SpecDocument` or a resolved
            spec dict.

    Returns:
        One :class:`~specsdk.models.EndpointDescriptor` per (path, verb)
        pair.  Path items without operations contribute nothing.

    Example::

        document = load_specification("petstore.yaml")
        for endpoint in extract_endpoints(document):
            print(f"{endpoint.method.value.upper()} {endpoint.path}")
    """
    if isinstance(document, SpecDocument):
        paths = document.paths
    else:
        paths = document.get("paths")
        if not isinstance(paths, dict):
            paths = {}

    endpoints: list[EndpointDescriptor] = []
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        shared_params = _as_list(path_item.get("parameters"))

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue

            # Operation-level parameters are appended after path-level ones
            all_params = shared_params + _as_list(operation.get("parameters"))
            path_params, query_params = _split_parameters(all_params, path, method)
            _check_placeholders(path, method, path_params)

            operation_id = operation.get("operationId")
            if not isinstance(operation_id, str) or not operation_id.strip():
                operation_id = generate_operation_id(path, method.value)

            request_body = operation.get("requestBody")
            tags = operation.get("tags")

            endpoints.append(
                EndpointDescriptor(
                    path=str(path),
                    method=method,
                    operation_id=operation_id,
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    path_params=path_params,
                    query_params=query_params,
                    request_body=request_body if isinstance(request_body, dict) else None,
                    responses=_extract_responses(operation.get("responses"), path, method),
                    tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
                    deprecated=bool(operation.get("deprecated", False)),
                )
            )

    return endpoints


def _as_list(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _split_parameters(
    params: list[Any],
    path: str,
    method: HTTPMethod,
) -> tuple[list[Parameter], list[Parameter]]:
    """Convert raw parameter dicts and split them into path and query buckets.

    Header, cookie and unrecognised locations are dropped.  Path parameters
    are always emitted as required; a declaration saying otherwise is
    corrected with a warning.
    """
    path_params: list[Parameter] = []
    query_params: list[Parameter] = []

    for param in params:
        if not isinstance(param, dict) or not param.get("name"):
            logger.warning("%s %s: skipping parameter without a name", method.value.upper(), path)
            continue

        try:
            location = ParameterLocation(param.get("in", ""))
        except ValueError:
            logger.warning(
                "%s %s: parameter '%s' has unknown location %r, skipping",
                method.value.upper(), path, param["name"], param.get("in"),
            )
            continue

        if location not in (ParameterLocation.PATH, ParameterLocation.QUERY):
            continue

        required = bool(param.get("required", False))
        if location == ParameterLocation.PATH and not required:
            logger.warning(
                "%s %s: path parameter '%s' is not marked required; treating it as required",
                method.value.upper(), path, param["name"],
            )
            required = True

        parameter = Parameter(
            name=str(param["name"]),
            location=location,
            required=required,
            description=param.get("description"),
            schema=param.get("schema"),
        )
        if location == ParameterLocation.PATH:
            path_params.append(parameter)
        else:
            query_params.append(parameter)

    return path_params, query_params


def _check_placeholders(path: str, method: HTTPMethod, path_params: list[Parameter]) -> None:
    """Warn when placeholders and declared path parameters disagree."""
    placeholders = set(_PLACEHOLDER.findall(path))
    declared = {param.name for param in path_params}

    for name in sorted(placeholders - declared):
        logger.warning(
            "%s %s: placeholder '{%s}' has no declared path parameter",
            method.value.upper(), path, name,
        )
    for name in sorted(declared - placeholders):
        logger.warning(
            "%s %s: path parameter '%s' does not appear in the path",
            method.value.upper(), path, name,
        )


def _extract_responses(
    responses: Any,
    path: str,
    method: HTTPMethod,
) -> dict[str, Any]:
    """Return the status -> response mapping with string keys.

    YAML parses unquoted status codes as integers; keys are normalised to
    strings so that JSON and YAML documents extract identically.
    """
    if not isinstance(responses, dict):
        return {}

    result: dict[str, Any] = {}
    for status_code, response in responses.items():
        status = str(status_code)
        if not _STATUS_CODE.match(status):
            logger.warning(
                "%s %s: unrecognised status code %r",
                method.value.upper(), path, status,
            )
        if not isinstance(response, dict):
            logger.warning(
                "%s %s: response %s is not an object, skipping",
                method.value.upper(), path, status,
            )
            continue
        result[status] = response

    return result


def content_schema(entry: Any) -> Any:
    """Return the schema of a request body or response object.

    ``application/json`` wins, then any ``+json`` media type, then the
    first media type that declares a schema.

    Args:
        entry: A resolved request body or response object (or ``None``).

    Returns:
        The schema, or ``None`` when the entry carries no content schema.
    """
    if not isinstance(entry, dict):
        return None
    content = entry.get("content")
    if not isinstance(content, dict):
        return None

    media = content.get(_JSON_MEDIA_TYPE)
    if isinstance(media, dict) and media.get("schema") is not None:
        return media["schema"]

    for media_type, media in content.items():
        if str(media_type).endswith("+json") and isinstance(media, dict) and media.get("schema") is not None:
            return media["schema"]

    for media in content.values():
        if isinstance(media, dict) and media.get("schema") is not None:
            return media["schema"]

    return None


def content_types(entry: Any) -> list[str]:
    """Media types declared by a request body or response object."""
    if not isinstance(entry, dict) or not isinstance(entry.get("content"), dict):
        return []
    return [str(media_type) for media_type in entry["content"]]
