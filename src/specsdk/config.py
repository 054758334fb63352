"""Configuration resolution and atomic artifact writes.

This module handles everything specsdk reads from or writes to disk besides
the OpenAPI documents themselves:

* **Project config** -- an optional ``./specsdk.json`` in the working
  directory holding defaults for a repository (output directory, base URL,
  HTTP client name).  See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables, the project config and built-in defaults into one
  immutable :class:`~specsdk.models.GenerationOptions`.
* **Artifact writes** -- :func:`write_artifact` stores a rendered file using
  an atomic temp-file-then-rename strategy (:func:`_atomic_write`) so that a
  crash never leaves a half-written ``sdk.ts`` behind.

Example ``specsdk.json``::

    {
        "input_files": ["openapi.yaml"],
        "output_dir": "./generated",
        "base_url": "https://api.example.com",
        "http_client": "apiClient"
    }
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from specsdk.exceptions import ConfigError, RenderError
from specsdk.models import GenerationOptions

logger = logging.getLogger(__name__)

_PROJECT_CONFIG_FILENAME = "specsdk.json"
_DEFAULT_OUTPUT_DIR = "./generated"

ENV_OUTPUT_DIR = "SPECSDK_OUTPUT_DIR"
ENV_BASE_URL = "SPECSDK_BASE_URL"
ENV_HTTP_CLIENT = "SPECSDK_HTTP_CLIENT"

_PROJECT_KEYS = frozenset({"input_files", "output_dir", "base_url", "http_client"})


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def write_artifact(output_dir: str | Path, name: str, content: str) -> Path:
    """Atomically write one generated artifact into *output_dir*.

    Args:
        output_dir: Destination directory, created if missing.
        name: File name of the artifact (``"sdk.ts"``, ``"API.md"``...).
        content: Rendered file content.

    Returns:
        The path of the written file.

    Raises:
        RenderError: If the directory cannot be created or the file cannot
            be written.
    """
    path = Path(output_dir) / name
    try:
        _atomic_write(path, content)
    except OSError as exc:
        raise RenderError(f"Cannot write {path}: {exc}") from exc
    logger.debug("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))
    return path


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``specsdk.json``.

    Args:
        directory: Directory to look in.  Defaults to the current working
            directory.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")

    unknown = sorted(set(data) - _PROJECT_KEYS)
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))
    return data


# --- Precedence resolution ---


def resolve_options(
    input_files: Optional[Sequence[str]] = None,
    output_dir: Optional[str] = None,
    base_url: Optional[str] = None,
    http_client: Optional[str] = None,
    project_dir: Optional[Path] = None,
) -> GenerationOptions:
    """Resolve generation options with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (the arguments of this function)
        2. Environment variables (``SPECSDK_OUTPUT_DIR``,
           ``SPECSDK_BASE_URL``, ``SPECSDK_HTTP_CLIENT``)
        3. Project config (``./specsdk.json``)
        4. Defaults (``./generated``, no base URL, ``axios``)

    Input files come from the CLI or, failing that, the project config;
    there is no environment variable for them.

    Returns:
        The immutable :class:`~specsdk.models.GenerationOptions`.

    Raises:
        ConfigError: If the project config is invalid or a resolved value
            fails validation (e.g. an HTTP client name that is not a
            JavaScript identifier).
    """
    # 4. Defaults
    resolved: dict[str, Any] = {
        "input_files": [],
        "output_dir": _DEFAULT_OUTPUT_DIR,
        "base_url": None,
        "http_client": "axios",
    }

    # 3. Project-local config
    project = load_project_config(project_dir)
    if project is not None:
        for key in _PROJECT_KEYS:
            if project.get(key) is not None:
                resolved[key] = project[key]

    # 2. Environment variables
    for key, env_var in (
        ("output_dir", ENV_OUTPUT_DIR),
        ("base_url", ENV_BASE_URL),
        ("http_client", ENV_HTTP_CLIENT),
    ):
        env_value = os.environ.get(env_var)
        if env_value:
            resolved[key] = env_value

    # 1. CLI flags (highest precedence)
    if input_files:
        resolved["input_files"] = list(input_files)
    if output_dir is not None:
        resolved["output_dir"] = output_dir
    if base_url is not None:
        resolved["base_url"] = base_url
    if http_client is not None:
        resolved["http_client"] = http_client

    if isinstance(resolved["input_files"], str):
        resolved["input_files"] = [resolved["input_files"]]

    try:
        return GenerationOptions.model_validate(resolved)
    except ValidationError as exc:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"Invalid configuration: {messages}") from exc
