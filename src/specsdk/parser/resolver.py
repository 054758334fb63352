"""Resolve ``$ref`` JSON Reference pointers in OpenAPI specifications.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  This module
builds a new tree from the spec in which every ``$ref`` is replaced by the
object it points to.  Three kinds of reference are supported:

* internal -- ``#/components/schemas/Pet``;
* sibling files -- ``schemas/pet.yaml#/Pet`` resolved against the location
  of the referring document;
* network -- ``https://example.com/common.yaml#/Error``.

Resolution is structure-preserving rather than textual.  Every container
is registered in a memo table keyed by ``(document URI, JSON pointer)``
before its children are built, so a location reached twice yields the same
Python object.  A schema that contains itself (a tree node with a list of
children) therefore becomes a genuinely cyclic object graph instead of an
infinite expansion.

Schemas living under ``components/schemas`` (and the roots of external
documents) are built as :class:`NamedSchema` instances so that the type
projector can still tell a named type from a structurally equal inline
object after resolution.

The public entry points are :func:`resolve_refs` and :class:`RefResolver`.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import unquote, urljoin

from specsdk.exceptions import ReferenceResolutionError, SpecParseError
from specsdk.parser.naming import to_pascal_case

logger = logging.getLogger(__name__)

_NAMED_POINTER = re.compile(r"^/(?:components/schemas|definitions)/([^/]+)$")


class NamedSchema(dict):
    """A resolved schema that was declared under a name.

    Behaves exactly like the ``dict`` it wraps (and compares equal to a
    plain dict with the same items), but remembers the name it was declared
    under and the canonical reference to it.
    """

    schema_name: str = ""
    ref: str = ""

    def __repr__(self) -> str:
        return f"NamedSchema({self.schema_name!r})"


def resolve_refs(
    spec: dict[str, Any],
    base_uri: Optional[str] = None,
    loader: Optional[Callable[[str], dict[str, Any]]] = None,
) -> dict[str, Any]:
    """Resolve all ``$ref`` JSON Reference pointers in the spec.

    Creates a new tree from the input and replaces every ``{"$ref": ...}``
    dict with the (recursively resolved) object it points to.  The input is
    never mutated.

    Args:
        spec: The raw OpenAPI spec dictionary, as returned by
            :func:`~specsdk.parser.loader.load_spec`.
        base_uri: File path or URL the spec was loaded from; relative
            external references are resolved against it.  Defaults to the
            current working directory.
        loader: Callable used to load external documents.  Defaults to
            :func:`~specsdk.parser.loader.load_spec`.

    Returns:
        A **new** dictionary with every ``$ref`` replaced.  Recursive
        schemas are shared, cyclic objects.

    Raises:
        ReferenceResolutionError: If a ``$ref`` points to a location that
            does not exist, uses an unsupported pointer form, names an
            external document that cannot be loaded, or loops back to
            itself without any content in between.

    Example::

        raw = load_spec("petstore.yaml")
        resolved = resolve_refs(raw, base_uri="petstore.yaml")
        # resolved["paths"]["/pets"]["get"]["responses"]["200"]["content"]
        # now contains the inlined schema instead of a $ref pointer.
    """
    return RefResolver(spec, base_uri=base_uri, loader=loader).resolve()


class RefResolver:
    """Single-use resolver holding the memo table for one resolution pass.

    Args:
        spec: The raw root document.
        base_uri: Location of the root document (file path or URL).
        loader: Callable returning the raw dict for an external document.
    """

    def __init__(
        self,
        spec: dict[str, Any],
        base_uri: Optional[str] = None,
        loader: Optional[Callable[[str], dict[str, Any]]] = None,
    ) -> None:
        if loader is None:
            from specsdk.parser.loader import load_spec

            loader = load_spec
        self._loader = loader
        self._root_uri = _normalize_uri(base_uri) if base_uri else str(Path.cwd() / "<memory>")
        self._documents: dict[str, Any] = {self._root_uri: spec}
        self._memo: dict[tuple[str, str], Any] = {}
        self._following: set[tuple[str, str]] = set()

    def resolve(self) -> dict[str, Any]:
        """Build and return the resolved root document."""
        return self._build(self._documents[self._root_uri], self._root_uri, "")

    # ------------------------------------------------------------------ #
    # Tree construction
    # ------------------------------------------------------------------ #

    def _build(self, node: Any, uri: str, pointer: str) -> Any:
        """Return the resolved counterpart of *node*, located at ``uri#pointer``."""
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                if len(node) > 1:
                    logger.debug("Ignoring keys next to $ref %r at %s#%s", ref, uri, pointer)
                return self._follow(ref, uri)

            key = (uri, pointer)
            if key in self._memo:
                return self._memo[key]

            built = self._new_mapping(uri, pointer)
            self._memo[key] = built
            for name, value in node.items():
                built[name] = self._build(value, uri, f"{pointer}/{_escape(str(name))}")
            return built

        if isinstance(node, list):
            key = (uri, pointer)
            if key in self._memo:
                return self._memo[key]

            built_list: list[Any] = []
            self._memo[key] = built_list
            for index, item in enumerate(node):
                built_list.append(self._build(item, uri, f"{pointer}/{index}"))
            return built_list

        # Scalars pass through unchanged
        return node

    def _new_mapping(self, uri: str, pointer: str) -> dict[str, Any]:
        """Create the container for a mapping, naming it when it is a declared schema."""
        match = _NAMED_POINTER.match(pointer)
        if match:
            name = _unescape(match.group(1))
        elif pointer == "" and uri != self._root_uri:
            name = to_pascal_case(_stem(uri)) or "Schema"
        else:
            return {}

        named = NamedSchema()
        named.schema_name = name
        named.ref = f"#{pointer}" if uri == self._root_uri else f"{uri}#{pointer}"
        return named

    def _follow(self, ref: str, uri: str) -> Any:
        """Resolve *ref* as seen from the document at *uri*."""
        target_uri, pointer = self._split(ref, uri)
        key = (target_uri, pointer)
        if key in self._memo:
            return self._memo[key]
        if key in self._following:
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': reference chain loops back to itself"
            )

        self._following.add(key)
        try:
            document = self._document(target_uri, ref)
            target = _lookup(document, pointer, ref)
            resolved = self._build(target, target_uri, pointer)
        finally:
            self._following.discard(key)

        # Scalars and $ref-to-$ref chains are not memoised by _build
        self._memo.setdefault(key, resolved)
        return resolved

    # ------------------------------------------------------------------ #
    # Locations
    # ------------------------------------------------------------------ #

    def _split(self, ref: str, uri: str) -> tuple[str, str]:
        """Split *ref* into an absolute document URI and a JSON pointer."""
        location, _, fragment = ref.partition("#")
        pointer = unquote(fragment)
        if pointer and not pointer.startswith("/"):
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': only JSON pointer fragments (#/...) are supported"
            )
        if not location:
            return uri, pointer
        return _join_uri(uri, location), pointer

    def _document(self, uri: str, ref: str) -> Any:
        """Return the raw document at *uri*, loading external documents once."""
        if uri in self._documents:
            return self._documents[uri]

        logger.debug("Loading external document %s", uri)
        try:
            document = self._loader(uri)
        except SpecParseError as exc:
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': {exc}"
            ) from exc
        self._documents[uri] = document
        return document


def _lookup(document: Any, pointer: str, ref: str) -> Any:
    """Navigate *document* along an RFC 6901 JSON pointer.

    Raises:
        ReferenceResolutionError: If any segment of the pointer does not
            exist in the document.
    """
    current = document
    if not pointer:
        return current

    for raw_segment in pointer[1:].split("/"):
        segment = _unescape(raw_segment)

        if isinstance(current, dict):
            if segment in current:
                current = current[segment]
            elif segment.isdigit() and int(segment) in current:
                # YAML parses unquoted status codes as integers
                current = current[int(segment)]
            else:
                raise ReferenceResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise ReferenceResolutionError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise ReferenceResolutionError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def _normalize_uri(uri: str) -> str:
    if _is_url(uri):
        return uri
    return str(Path(uri).resolve())


def _join_uri(base: str, location: str) -> str:
    """Resolve *location* relative to the document at *base*."""
    if _is_url(location):
        return location
    if _is_url(base):
        return urljoin(base, location)
    return str((Path(base).parent / unquote(location)).resolve())


def _stem(uri: str) -> str:
    return Path(uri.split("?", 1)[0].rstrip("/")).stem
