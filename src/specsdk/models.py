"""Canonical Pydantic models shared across all specsdk modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Configuration models** -- built once per run and passed by parameter to
every component that needs them:
    :class:`GenerationOptions`.

**Parser output models** -- produced by the specification parser and
consumed by the renderers:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Parameter`,
    :class:`ServerInfo`, :class:`SpecDocument`, and
    :class:`EndpointDescriptor`.

Schemas are kept as the resolved ``dict`` objects produced by
:mod:`specsdk.parser.resolver`. Those may be cyclic, so schema-carrying
fields are typed ``Any``: Pydantic then stores the object as-is instead of
rebuilding it, which keeps the :class:`~specsdk.parser.resolver.NamedSchema`
markers and the shared identity of recursive schemas intact.
"""

from __future__ import annotations

import enum
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


# --- Configuration ---


class GenerationOptions(BaseModel):
    """Immutable settings for one generation run.

    Resolved by :func:`~specsdk.config.resolve_options` from CLI flags,
    environment variables and the project config file, then threaded
    explicitly through :func:`~specsdk.pipeline.generate` to every renderer.

    Example::

        GenerationOptions(
            input_files=["openapi.yaml"],
            output_dir="./generated",
            base_url="https://api.example.com/v1",
            http_client="apiClient",
        )
    """

    model_config = ConfigDict(frozen=True)

    input_files: list[str] = Field(
        default_factory=list, description="Paths or URLs of OpenAPI documents"
    )
    output_dir: str = Field(description="Directory receiving generated artifacts")
    base_url: Optional[str] = Field(
        default=None, description="Base URL used by the interactive test page"
    )
    http_client: str = Field(
        default="axios",
        description="Identifier the generated code binds the HTTP client to",
    )

    @field_validator("http_client")
    @classmethod
    def _check_http_client(cls, value: str) -> str:
        if not _JS_IDENTIFIER.match(value):
            raise ValueError(
                f"http_client must be a valid JavaScript identifier, got {value!r}"
            )
        return value


# --- Parser Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP verbs that produce endpoints.

    Declaration order is the extraction priority: for every path, endpoints
    are emitted GET, POST, PUT, DELETE, PATCH, whatever order the document
    declares them in.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    DELETE = "delete"
    PATCH = "patch"

    @property
    def is_mutation(self) -> bool:
        """Whether generated hooks treat this verb as a mutation."""
        return self is not HTTPMethod.GET


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class Parameter(BaseModel):
    """A single path or query parameter of an endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: Any = Field(default=None, alias="schema")


class ServerInfo(BaseModel):
    """A server entry from the document's ``servers`` array."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None


class SpecDocument(BaseModel):
    """One fully resolved OpenAPI document.

    Produced by :func:`~specsdk.parser.extractor.extract_document`. The
    ``paths`` and ``components`` mappings hold the resolved trees; no
    ``$ref`` pointer remains in them.
    """

    model_config = ConfigDict(frozen=True)

    title: str = "Untitled API"
    version: str = "0.0.0"
    description: Optional[str] = None
    openapi_version: Optional[str] = None
    servers: list[ServerInfo] = Field(default_factory=list)
    paths: dict[str, Any] = Field(default_factory=dict)
    components: dict[str, Any] = Field(default_factory=dict)
    source: Optional[str] = Field(
        default=None, description="File path or URL the document was loaded from"
    )

    @property
    def schemas(self) -> dict[str, Any]:
        """Named schemas declared under ``components.schemas``."""
        schemas = self.components.get("schemas")
        return schemas if isinstance(schemas, dict) else {}


class EndpointDescriptor(BaseModel):
    """The renderer-agnostic record of one (path, verb) operation.

    ``request_body`` and the values of ``responses`` are the resolved
    OpenAPI objects, passed through untouched; renderers extract their
    schemas with :func:`~specsdk.parser.extractor.content_schema` and
    project them with :func:`~specsdk.typegen.projector.project_type`.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    path_params: list[Parameter] = Field(default_factory=list)
    query_params: list[Parameter] = Field(default_factory=list)
    request_body: Any = None
    responses: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False
    document_index: int = Field(
        default=0, description="Position of the source document in the input list"
    )
