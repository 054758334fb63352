"""Read OpenAPI documents into plain dictionaries.

A source is a local path, an ``http(s)`` URL or ``-`` for stdin.  Reading
and parsing are separate steps: each reader returns the raw text together
with a format hint (``"json"``, ``"yaml"`` or ``""``), and
:func:`parse_content` turns the text into a dict.  The hint comes from the
file extension, or from the ``Content-Type`` header for URLs; without one
the content is sniffed, JSON first.

``$ref`` pointers are left alone here.  The resolver calls
:func:`load_spec` again for every external document it needs.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import yaml

from specsdk.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_FORMAT_BY_SUFFIX = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}
_FORMAT_ALIASES = {"": "", "json": "json", "yaml": "yaml", "yml": "yaml"}

_FETCH_TIMEOUT = 30.0


def load_spec(source: str) -> dict[str, Any]:
    """Read and parse the document at *source*.

    Args:
        source: A file path, an ``http://``/``https://`` URL, or ``-``.

    Returns:
        The parsed document.

    Raises:
        SpecParseError: If the source cannot be read, is empty, or does not
            parse to a mapping.
    """
    text, fmt = _read_source(source)
    return parse_content(text, fmt)


def detect_format(name: str) -> str:
    """Format implied by the extension of a file name or URL, or ``""``."""
    suffix = Path(name.split("?", 1)[0]).suffix.lower()
    return _FORMAT_BY_SUFFIX.get(suffix, "")


def _read_source(source: str) -> tuple[str, str]:
    if source == "-":
        return _read_stdin(), ""
    if source.startswith(("http://", "https://")):
        return _fetch(source)
    return _read_file(source), detect_format(source)


def _read_stdin() -> str:
    try:
        text = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc
    if not text.strip():
        raise SpecParseError("No input received from stdin")
    return text


def _fetch(url: str) -> tuple[str, str]:
    logger.debug("Fetching %s", url)
    try:
        response = httpx.get(url, timeout=_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(f"HTTP {exc.response.status_code} fetching spec from {url}") from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, detect_format(url)


def _read_file(path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    logger.debug("Reading %s", file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc
    if not text.strip():
        raise SpecParseError(f"Spec file is empty: {path}")
    return text


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise SpecParseError(f"Invalid JSON: {exc}") from exc


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecParseError(f"Invalid YAML: {exc}") from exc


_PARSERS: dict[str, Callable[[str], Any]] = {"json": _parse_json, "yaml": _parse_yaml}


def parse_content(content: str | bytes, fmt: str = "") -> dict[str, Any]:
    """Parse a JSON or YAML document held in memory.

    A declared format uses only that parser.  An empty format tries JSON
    and then YAML; every JSON document is YAML too, but the JSON parser
    rejects more mistakes.

    Args:
        content: Document text, or UTF-8 bytes.
        fmt: ``"json"``, ``"yaml"`` (``"yml"`` accepted) or ``""``.

    Returns:
        The parsed mapping.

    Raises:
        SpecParseError: On undecodable bytes, an unknown format, a syntax
            error, or a document that is not a mapping.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SpecParseError(f"Spec is not valid UTF-8: {exc}") from exc

    declared = _FORMAT_ALIASES.get(fmt.lower())
    if declared is None:
        raise SpecParseError(f"Unsupported spec format: {fmt!r} (expected json or yaml)")
    if declared:
        return _ensure_mapping(_PARSERS[declared](content))

    failures: list[str] = []
    for name, parser in _PARSERS.items():
        try:
            parsed = parser(content)
        except SpecParseError as exc:
            failures.append(f"\n  {name.upper()} error: {exc.__cause__}")
            continue
        return _ensure_mapping(parsed)
    raise SpecParseError("Failed to parse spec as JSON or YAML" + "".join(failures))


def _ensure_mapping(parsed: Any) -> dict[str, Any]:
    if isinstance(parsed, dict):
        return parsed
    kind = "empty document" if parsed is None else type(parsed).__name__
    raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")


def validate_openapi_version(spec: dict[str, Any]) -> Optional[str]:
    """Return the declared OpenAPI version after checking it is 3.x.

    A document without an ``openapi`` field is accepted with a warning,
    which keeps schema fragments and hand-written fixtures loadable.

    Raises:
        SpecParseError: For Swagger 2.x or any non-3.x OpenAPI version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.0.x and 3.1.x are supported; "
            "convert it first, e.g. with https://converter.swagger.io"
        )

    declared = spec.get("openapi")
    if declared is None:
        logger.warning("Missing 'openapi' field; assuming an OpenAPI 3.x document")
        return None

    version = str(declared)
    if not version.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version}. Only 3.0.x and 3.1.x are supported."
        )
    return version
