"""Shared test fixtures for specsdk.

Provides reusable fixtures for loading spec fixtures, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest
import yaml

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``specsdk`` logger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, and ``configure_logging`` attaches a handler bound to
    them.  When Typer's CliRunner redirects those streams during a test
    and the test finishes, the cached references become stale ("I/O
    operation on closed file").  Resetting forces fresh ones on next use.
    """
    yield
    reset_output()
    logger = logging.getLogger("specsdk")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from fixture files)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    return FIXTURES_DIR / "petstore.yaml"


@pytest.fixture
def petstore_json_path() -> Path:
    return FIXTURES_DIR / "petstore.json"


@pytest.fixture
def tree_path() -> Path:
    return FIXTURES_DIR / "tree.yaml"


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore spec dict (JSON flavour)."""
    with open(FIXTURES_DIR / "petstore.json") as f:
        return json.load(f)


@pytest.fixture
def tree_raw() -> dict[str, Any]:
    """Load the raw recursive tree spec dict."""
    with open(FIXTURES_DIR / "tree.yaml") as f:
        return yaml.safe_load(f)


# ---------------------------------------------------------------------------
# Resolved document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_document(petstore_json_path: Path) -> SpecDocument:
    """Fully resolved petstore document."""
    from specsdk.pipeline import load_specification

    return load_specification(str(petstore_json_path))


@pytest.fixture
def petstore_endpoints(petstore_document: SpecDocument) -> list[EndpointDescriptor]:
    """Endpoint descriptors of the petstore document, in output order."""
    from specsdk.pipeline import collect_endpoints

    return collect_endpoints([petstore_document])


@pytest.fixture
def tree_document(tree_path: Path) -> SpecDocument:
    """Fully resolved tree document, whose ``Node`` schema is cyclic."""
    from specsdk.pipeline import load_specification

    return load_specification(str(tree_path))


@pytest.fixture
def options(tmp_path: Path, petstore_json_path: Path) -> GenerationOptions:
    """Generation options pointing at the petstore fixture and a temp output dir."""
    return GenerationOptions(
        input_files=[str(petstore_json_path)],
        output_dir=str(tmp_path / "generated"),
        base_url="http://localhost:8080",
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Clears all SPECSDK_* environment variables and changes the working
    directory to tmp_path so that no ``specsdk.json`` from the developer's
    checkout leaks into tests.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "SPECSDK_OUTPUT_DIR",
        "SPECSDK_BASE_URL",
        "SPECSDK_HTTP_CLIENT",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output.

    Installs a JSON-format OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
