"""Integration tests for the ``specsdk inspect`` command group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specsdk.app import app
from specsdk.exit_codes import EXIT_INVALID_USAGE, EXIT_REFERENCE_ERROR, EXIT_SUCCESS

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
PETSTORE = str(FIXTURES_DIR / "petstore.yaml")
TREE = str(FIXTURES_DIR / "tree.yaml")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestInspectEndpoints:
    def test_json_table(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "--quiet", "inspect", "endpoints", "-i", PETSTORE])
        assert result.exit_code == EXIT_SUCCESS, result.output
        rows = json.loads(result.stdout)
        assert [row["Operation ID"] for row in rows] == [
            "listPets",
            "createPet",
            "getPetsPetId",
            "deletePet",
            "updatePet",
        ]
        assert rows[2]["Method"] == "GET"
        assert rows[3]["Deprecated"] == "Yes"

    def test_plain_output(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--plain", "inspect", "endpoints", "-i", TREE])
        assert result.exit_code == EXIT_SUCCESS
        assert "GET\t/nodes/{id}\tgetNodesId" in result.output

    def test_duplicates_renamed_across_documents(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        result = runner.invoke(
            app, ["--plain", "inspect", "endpoints", "-i", TREE, "-i", TREE]
        )
        assert result.exit_code == EXIT_SUCCESS
        assert "getNodesId2" in result.output

    def test_requires_input(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["inspect", "endpoints"])
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_broken_reference(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(
            app, ["inspect", "endpoints", "-i", str(FIXTURES_DIR / "broken_ref.yaml")]
        )
        assert result.exit_code == EXIT_REFERENCE_ERROR


class TestInspectSchemas:
    def test_schemas_json(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "--quiet", "inspect", "schemas", "-i", TREE])
        assert result.exit_code == EXIT_SUCCESS, result.output
        rows = json.loads(result.stdout)
        assert [row["Schema"] for row in rows] == ["Node"]
        assert "children?: Array<Node>;" in rows[0]["Type"]

    def test_no_schemas(self, runner: CliRunner, isolated_config: Path) -> None:
        spec = isolated_config / "bare.yaml"
        spec.write_text(
            "openapi: 3.0.0\ninfo: {title: Bare, version: '1'}\npaths: {}\n", encoding="utf-8"
        )
        result = runner.invoke(app, ["inspect", "schemas", "-i", str(spec)])
        assert result.exit_code == EXIT_SUCCESS
        assert "No schemas defined" in result.output


class TestInspectInfo:
    def test_single_document(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "--quiet", "inspect", "info", "-i", PETSTORE])
        assert result.exit_code == EXIT_SUCCESS, result.output
        data = json.loads(result.stdout)
        assert data["title"] == "Pet Store API"
        assert data["openapi_version"] == "3.0.3"
        assert data["servers"] == ["https://petstore.example.com/v1"]
        assert data["endpoints"] == 5
        assert data["schemas"] == 3

    def test_multiple_documents(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(
            app, ["--json", "--quiet", "inspect", "info", "-i", PETSTORE, "-i", TREE]
        )
        assert result.exit_code == EXIT_SUCCESS, result.output
        data = json.loads(result.stdout)
        assert [d["title"] for d in data] == ["Pet Store API", "Tree API"]
