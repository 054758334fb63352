"""Identifier generation for endpoints and generated symbols.

:func:`generate_operation_id` is the fallback used by the extractor when an
operation has no ``operationId``.  It is a pure function of
``(path, method)``: equal inputs always give equal identifiers, but two
distinct endpoints can collide (``/users/{id}`` and ``/users/id`` both give
``getUsersId``).  Collisions are resolved later, across all documents, by
:func:`specsdk.pipeline.dedupe_operation_ids`.

The remaining helpers turn arbitrary strings into JavaScript identifiers for
the renderers.
"""

from __future__ import annotations

import re

_PLACEHOLDER = re.compile(r"^\{[^{}]*\}$")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")
_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Words that cannot name a function, variable or type in a TypeScript module.
# They stay usable as property keys.
_RESERVED_WORDS = frozenset({
    "await", "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "implements", "import", "in",
    "instanceof", "interface", "let", "new", "null", "package", "private",
    "protected", "public", "return", "static", "super", "switch", "this",
    "throw", "true", "try", "typeof", "var", "void", "while", "with", "yield",
    "arguments", "eval",
})


def generate_operation_id(path: str, method: str) -> str:
    """Derive a deterministic identifier from a path pattern and HTTP verb.

    The path is split on ``/`` and empty segments are dropped.  When no
    literal segment is left (``/`` or ``/{id}``) the result is
    ``<verb>Root``.  Otherwise every segment, with placeholder braces
    stripped, is converted to PascalCase and appended to the lower-cased
    verb.

    Args:
        path: The path pattern, e.g. ``"/users/{id}"``.
        method: The HTTP verb in any case, e.g. ``"GET"``.

    Returns:
        The identifier, e.g. ``"getUsersId"``.

    Example::

        >>> generate_operation_id("/user-profiles/{profile_id}", "PATCH")
        'patchUserProfilesProfileId'
        >>> generate_operation_id("/", "get")
        'getRoot'
    """
    verb = method.lower()
    segments = [segment for segment in path.split("/") if segment]

    if not any(not _PLACEHOLDER.match(segment) for segment in segments):
        return f"{verb}Root"

    words = "".join(
        to_pascal_case(segment.replace("{", "").replace("}", ""))
        for segment in segments
    )
    if not words:
        return f"{verb}Root"
    return verb + words


def to_pascal_case(text: str) -> str:
    """Join separator-delimited tokens, upper-casing the first letter of each.

    Dashes, underscores and any other non-alphanumeric characters act as
    separators.  The rest of each token keeps its case, so ``"userID"``
    stays ``"UserID"``.
    """
    tokens = [token for token in _SEPARATORS.split(text) if token]
    return "".join(token[0].upper() + token[1:] for token in tokens)


def to_identifier(text: str) -> str:
    """Turn *text* into a JavaScript name usable for a function or variable.

    Valid, non-reserved identifiers are returned unchanged.  Anything else
    is camel-cased on its separators and prefixed with ``_`` if it would
    start with a digit; a reserved word (``delete``, ``new``) gets a
    trailing ``_``.
    """
    if _JS_IDENTIFIER.match(text):
        camel = text
    else:
        pascal = to_pascal_case(text)
        if not pascal:
            return "_"
        camel = pascal[0].lower() + pascal[1:]
        if camel[0].isdigit():
            camel = f"_{camel}"
    return f"{camel}_" if is_reserved(camel) else camel


def is_identifier(text: str) -> bool:
    """Whether *text* can be used unquoted as a JavaScript property key.

    Reserved words pass: they are fine as keys (``params.path.default``)
    but not as declared names, see :func:`is_reserved`.
    """
    return bool(_JS_IDENTIFIER.match(text))


def is_reserved(text: str) -> bool:
    """Whether *text* is a reserved word that cannot name a declaration."""
    return text in _RESERVED_WORDS


def hook_name(operation_id: str) -> str:
    """Name of the React hook generated for *operation_id* (``getUsers`` -> ``useGetUsers``)."""
    if not operation_id:
        return "use"
    return f"use{operation_id[0].upper()}{operation_id[1:]}"


def type_prefix(operation_id: str) -> str:
    """Prefix for the per-endpoint type names (``getUsers`` -> ``GetUsers``)."""
    if not operation_id:
        return ""
    return operation_id[0].upper() + operation_id[1:]
