"""Tests for specsdk.renderers.client -- the sdk.ts output."""

from __future__ import annotations

from pathlib import Path

import pytest

from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.parser.extractor import extract_document
from specsdk.parser.resolver import resolve_refs
from specsdk.pipeline import collect_endpoints, dedupe_operation_ids, load_specification
from specsdk.renderers.client import named_schema_declarations, render_client

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def sdk_source(
    petstore_document: SpecDocument,
    petstore_endpoints: list[EndpointDescriptor],
    options: GenerationOptions,
) -> str:
    return render_client([petstore_document], petstore_endpoints, options)


class TestSchemaDeclarations:
    def test_declared_once_in_component_order(self, sdk_source: str) -> None:
        assert sdk_source.count("export interface Pet {") == 1
        assert sdk_source.count("export interface NewPet {") == 1
        assert sdk_source.index("export interface Pet {") < sdk_source.index(
            "export interface NewPet {"
        ) < sdk_source.index("export interface Error {")

    def test_recursive_schema(self, tree_document: SpecDocument) -> None:
        declarations = named_schema_declarations([tree_document])
        assert len(declarations) == 1
        assert "children?: Array<Node>;" in declarations[0]

    def test_external_named_schemas(self) -> None:
        document = load_specification(str(FIXTURES_DIR / "split" / "main.yaml"))
        declarations = "".join(named_schema_declarations([document]))
        assert "export interface User {" in declarations
        assert "manager?: User;" in declarations
        assert "export interface Error {" in declarations

    def test_identifier_clash_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        spec = resolve_refs({
            "components": {
                "schemas": {"pet-v1": {"type": "string"}, "PetV1": {"type": "number"}}
            }
        })
        with caplog.at_level("WARNING", logger="specsdk"):
            declarations = named_schema_declarations([extract_document(spec)])
        assert declarations == ["export type PetV1 = string;\n"]
        assert "already declared" in caplog.text


class TestClientFunctions:
    def test_header_and_import(self, sdk_source: str) -> None:
        assert "Automatically generated by specsdk" in sdk_source
        assert " * Source: Pet Store API 1.0.0" in sdk_source
        assert "import axios from 'axios';" in sdk_source

    def test_functions_in_endpoint_order(self, sdk_source: str) -> None:
        names = ["listPets", "createPet", "getPetsPetId", "deletePet", "updatePet"]
        positions = [sdk_source.index(f"export async function {name}(") for name in names]
        assert positions == sorted(positions)

    def test_signatures(self, sdk_source: str) -> None:
        assert (
            "export async function listPets(params: ListPetsParams = {}): Promise<Array<Pet>> {"
            in sdk_source
        )
        assert "export async function createPet(params: CreatePetParams): Promise<Pet> {" in sdk_source
        assert (
            "export async function getPetsPetId(params: GetPetsPetIdParams): Promise<Pet> {"
            in sdk_source
        )
        assert "export async function deletePet(params: DeletePetParams): Promise<any> {" in sdk_source

    def test_request_options(self, sdk_source: str) -> None:
        assert "axios.request<Array<Pet>>({" in sdk_source
        assert "method: 'post'," in sdk_source
        assert "url: `/pets/${encodeURIComponent(String(params.path.petId))}`," in sdk_source
        assert sdk_source.count("params: params.query,") == 1
        assert sdk_source.count("data: params.body,") == 2

    def test_param_types_declared(self, sdk_source: str) -> None:
        assert "export interface ListPetsQueryParams {" in sdk_source
        assert "  status?: 'available' | 'pending' | 'sold';" in sdk_source
        assert "export type CreatePetRequestBody = NewPet;" in sdk_source
        assert "export interface GetPetsPetIdPathParams {\n  petId: string;\n}" in sdk_source

    def test_deprecated_jsdoc(self, sdk_source: str) -> None:
        delete_block = sdk_source[sdk_source.index("// DELETE /pets/{petId}"):]
        assert "@deprecated" in delete_block.split("export async function")[0]

    def test_custom_http_client(
        self, petstore_document: SpecDocument, petstore_endpoints: list[EndpointDescriptor]
    ) -> None:
        options = GenerationOptions(output_dir="out", http_client="apiClient")
        source = render_client([petstore_document], petstore_endpoints, options)
        assert "import apiClient from 'axios';" in source
        assert "apiClient.request<Pet>({" in source

    def test_endpoint_without_inputs(
        self, petstore_document: SpecDocument, options: GenerationOptions
    ) -> None:
        endpoint = EndpointDescriptor(path="/health", method="get", operation_id="getHealth")
        source = render_client([petstore_document], [endpoint], options)
        assert "export async function getHealth(): Promise<any> {" in source
        assert "url: '/health'," in source

    def test_multiple_documents(
        self,
        petstore_document: SpecDocument,
        tree_document: SpecDocument,
        options: GenerationOptions,
    ) -> None:
        documents = [petstore_document, tree_document]
        source = render_client(documents, collect_endpoints(documents), options)
        assert " * Source: Tree API 2.0.0" in source
        assert "export interface Node {" in source
        assert "export async function getNodesId(params: GetNodesIdParams): Promise<Node> {" in source

    def test_comment_terminator_escaped(
        self, petstore_document: SpecDocument, options: GenerationOptions
    ) -> None:
        endpoint = EndpointDescriptor(
            path="/files",
            method="get",
            operation_id="listFiles",
            summary="Lists /tmp/*/ entries",
            description="Matches a/*/b\nand nothing else */",
        )
        source = render_client([petstore_document], [endpoint], options)
        block = source[source.index("// GET /files"):source.index("export async function listFiles")]
        assert " * Lists /tmp/*\\/ entries" in block
        assert " * Matches a/*\\/b" in block
        assert " * and nothing else *\\/" in block
        assert block.count("*/") == 1

    def test_reserved_operation_id(
        self, petstore_document: SpecDocument, options: GenerationOptions
    ) -> None:
        endpoint = EndpointDescriptor(path="/session", method="delete", operation_id="delete")
        source = render_client([petstore_document], dedupe_operation_ids([endpoint]), options)
        assert "export async function delete_(): Promise<any> {" in source
        assert "export async function delete(" not in source
