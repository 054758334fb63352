"""Tests for specsdk.pipeline -- loading, endpoint collection and generation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from specsdk.exceptions import InvalidUsageError, ReferenceResolutionError, SpecParseError
from specsdk.models import EndpointDescriptor, GenerationOptions, HTTPMethod, SpecDocument
from specsdk.pipeline import (
    collect_endpoints,
    dedupe_operation_ids,
    disambiguate_schema_names,
    generate,
    load_specification,
    load_specifications,
    parse_specification,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _endpoint(operation_id: str, path: str = "/x") -> EndpointDescriptor:
    return EndpointDescriptor(path=path, method=HTTPMethod.GET, operation_id=operation_id)


def _write_document(directory: Path, name: str, path: str, user_schema: dict) -> str:
    document = {
        "openapi": "3.0.3",
        "info": {"title": name, "version": "1.0.0"},
        "paths": {
            path: {
                "get": {
                    "responses": {
                        "200": {
                            "description": "ok",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/User"}
                                }
                            },
                        }
                    }
                }
            }
        },
        "components": {"schemas": {"User": user_schema}},
    }
    target = directory / f"{name}.json"
    target.write_text(json.dumps(document), encoding="utf-8")
    return str(target)


class TestLoading:
    def test_load_specification(self) -> None:
        document = load_specification(str(FIXTURES_DIR / "petstore.yaml"))
        assert document.title == "Pet Store API"
        assert document.source.endswith("petstore.yaml")

    def test_swagger_rejected(self) -> None:
        with pytest.raises(SpecParseError, match="Swagger"):
            load_specification(str(FIXTURES_DIR / "swagger.json"))

    def test_broken_ref(self) -> None:
        with pytest.raises(ReferenceResolutionError):
            load_specification(str(FIXTURES_DIR / "broken_ref.yaml"))

    def test_parse_specification(self) -> None:
        content = (FIXTURES_DIR / "tree.yaml").read_bytes()
        document = parse_specification(content, "yaml")
        assert document.title == "Tree API"
        assert "Node" in document.schemas

    def test_parse_specification_external_refs(self) -> None:
        main = FIXTURES_DIR / "split" / "main.yaml"
        document = parse_specification(main.read_text(encoding="utf-8"), "yaml", base_uri=str(main))
        assert document.paths["/users/{id}"]["get"]["parameters"][0]["name"] == "id"

    def test_load_specifications_keeps_order(self) -> None:
        sources = [
            str(FIXTURES_DIR / "tree.yaml"),
            str(FIXTURES_DIR / "petstore.json"),
            str(FIXTURES_DIR / "split" / "main.yaml"),
        ]
        titles = [doc.title for doc in load_specifications(sources)]
        assert titles == ["Tree API", "Pet Store API", "Split API"]

    def test_load_specifications_empty(self) -> None:
        assert load_specifications([]) == []

    def test_load_specifications_propagates_failure(self) -> None:
        sources = [str(FIXTURES_DIR / "petstore.yaml"), str(FIXTURES_DIR / "broken_ref.yaml")]
        with pytest.raises(ReferenceResolutionError):
            load_specifications(sources)


class TestDedupe:
    def test_unique_ids_untouched(self) -> None:
        endpoints = [_endpoint("a"), _endpoint("b")]
        result = dedupe_operation_ids(endpoints)
        assert [e.operation_id for e in result] == ["a", "b"]
        assert result[0] is endpoints[0]

    def test_collisions_get_suffixes(self, caplog: pytest.LogCaptureFixture) -> None:
        endpoints = [
            _endpoint("getUsersId", "/users/{id}"),
            _endpoint("getUsersId", "/users/id"),
            _endpoint("getUsersId", "/users/ID"),
        ]
        with caplog.at_level("WARNING", logger="specsdk"):
            result = dedupe_operation_ids(endpoints)
        assert [e.operation_id for e in result] == ["getUsersId", "getUsersId2", "getUsersId3"]
        assert "renamed to 'getUsersId2'" in caplog.text

    def test_suffix_skips_taken_names(self) -> None:
        result = dedupe_operation_ids([_endpoint("a"), _endpoint("a2"), _endpoint("a")])
        assert [e.operation_id for e in result] == ["a", "a2", "a3"]

    def test_invalid_identifiers_normalised(self) -> None:
        result = dedupe_operation_ids([_endpoint("list-pets"), _endpoint("listPets")])
        assert [e.operation_id for e in result] == ["listPets", "listPets2"]

    def test_reserved_word_gets_underscore(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="specsdk"):
            result = dedupe_operation_ids([_endpoint("delete"), _endpoint("delete_")])
        assert [e.operation_id for e in result] == ["delete_", "delete_2"]
        assert "renamed to 'delete_'" in caplog.text


class TestCollectEndpoints:
    def test_document_order_and_index(
        self, petstore_document: SpecDocument, tree_document: SpecDocument
    ) -> None:
        endpoints = collect_endpoints([tree_document, petstore_document])
        assert endpoints[0].operation_id == "getNodesId"
        assert endpoints[0].document_index == 0
        assert {e.document_index for e in endpoints[1:]} == {1}
        assert len(endpoints) == 6

    def test_cross_document_collision(self, petstore_document: SpecDocument) -> None:
        endpoints = collect_endpoints([petstore_document, petstore_document])
        ids = [e.operation_id for e in endpoints]
        assert len(ids) == len(set(ids)) == 10
        assert ids[5] == "listPets2"


class TestGenerate:
    def test_writes_all_artifacts(self, options: GenerationOptions) -> None:
        written = generate(options)
        out = Path(options.output_dir)
        assert [p.name for p in written] == [
            "sdk.ts",
            "hooks.ts",
            "API.md",
            "index.html",
            "package.json",
            "tsconfig.json",
        ]
        assert all(p.parent == out and p.is_file() for p in written)
        assert json.loads((out / "package.json").read_text(encoding="utf-8"))["name"] == (
            "pet-store-api-sdk"
        )

    def test_no_inputs(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidUsageError):
            generate(GenerationOptions(output_dir=str(tmp_path / "out")))

    def test_nothing_written_on_failure(self, tmp_path: Path) -> None:
        out = tmp_path / "out"
        options = GenerationOptions(
            input_files=[str(FIXTURES_DIR / "petstore.yaml"), str(FIXTURES_DIR / "broken_ref.yaml")],
            output_dir=str(out),
        )
        with pytest.raises(ReferenceResolutionError):
            generate(options)
        assert not out.exists()

    def test_regeneration_is_stable(self, options: GenerationOptions) -> None:
        first = {p.name: p.read_text(encoding="utf-8") for p in generate(options)}
        second = {p.name: p.read_text(encoding="utf-8") for p in generate(options)}
        assert first == second


class TestSchemaNames:
    def test_clashing_schema_renamed(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        sources = [
            _write_document(tmp_path, "a", "/a", {"type": "string"}),
            _write_document(
                tmp_path, "b", "/b", {"type": "object", "properties": {"id": {"type": "integer"}}}
            ),
        ]
        with caplog.at_level("WARNING", logger="specsdk"):
            documents = load_specifications(sources)

        assert documents[0].schemas["User"].schema_name == "User"
        assert documents[1].schemas["User"].schema_name == "User2"
        assert "renamed to 'User2'" in caplog.text

        out = tmp_path / "out"
        generate(GenerationOptions(input_files=sources, output_dir=str(out)))
        sdk = (out / "sdk.ts").read_text(encoding="utf-8")
        assert "export type User = string;" in sdk
        assert "export interface User2 {" in sdk
        assert "export async function getA(): Promise<User> {" in sdk
        assert "export async function getB(): Promise<User2> {" in sdk

    def test_identical_schemas_share_name(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        sources = [
            _write_document(tmp_path, "a", "/a", {"type": "string"}),
            _write_document(tmp_path, "b", "/b", {"type": "string"}),
        ]
        with caplog.at_level("WARNING", logger="specsdk"):
            documents = load_specifications(sources)
        assert [doc.schemas["User"].schema_name for doc in documents] == ["User", "User"]
        assert "renamed" not in caplog.text

    def test_suffix_reuses_equal_definition(self, tmp_path: Path) -> None:
        obj = {"type": "object", "properties": {"id": {"type": "integer"}}}
        documents = load_specifications([
            _write_document(tmp_path, "a", "/a", {"type": "string"}),
            _write_document(tmp_path, "b", "/b", obj),
            _write_document(tmp_path, "c", "/c", {"type": "boolean"}),
            _write_document(tmp_path, "d", "/d", obj),
        ])
        assert [doc.schemas["User"].schema_name for doc in documents] == [
            "User", "User2", "User3", "User2",
        ]

    def test_documents_without_schemas(self, petstore_document: SpecDocument) -> None:
        disambiguate_schema_names([petstore_document])
        assert petstore_document.schemas["Pet"].schema_name == "Pet"
