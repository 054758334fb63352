"""Tests for specsdk.renderers.base and render_all."""

from __future__ import annotations

import pytest

from specsdk.exceptions import RenderError
from specsdk.models import EndpointDescriptor, GenerationOptions, SpecDocument
from specsdk.pipeline import collect_endpoints
from specsdk.renderers import ARTIFACTS, render_all
from specsdk.renderers.base import (
    build_endpoint_view,
    build_endpoint_views,
    group_by_document,
    jsdoc_text,
    markdown_cell,
    render_template,
    resolve_base_url,
)


class TestEndpointView:
    def test_names(self, petstore_endpoints: list[EndpointDescriptor]) -> None:
        view = build_endpoint_view(petstore_endpoints[2])
        assert view.function_name == "getPetsPetId"
        assert view.hook_name == "useGetPetsPetId"
        assert view.type_prefix == "GetPetsPetId"
        assert view.anchor == "getpetspetid"
        assert view.http_method == "GET"
        assert view.is_mutation is False

    def test_types(self, petstore_endpoints: list[EndpointDescriptor]) -> None:
        view = build_endpoint_view(petstore_endpoints[1])
        assert view.params_type == "CreatePetParams"
        assert view.params_required is True
        assert view.body_type == "CreatePetRequestBody"
        assert view.body_schema_type == "NewPet"
        assert view.body_example == {"name": "string", "tag": "string"}
        assert view.response_type == "Pet"
        assert view.is_mutation is True

    def test_parameters_and_responses(self, petstore_endpoints: list[EndpointDescriptor]) -> None:
        view = build_endpoint_view(petstore_endpoints[0])
        limit, status = view.query_params
        assert (limit.name, limit.type, limit.required, limit.example) == ("limit", "number", False, 0)
        assert status.type == "'available' | 'pending' | 'sold'"
        assert [r.status for r in view.responses] == ["200", "default"]
        assert view.responses[0].type == "Array<Pet>"
        assert view.responses[0].media_types == ("application/json",)

    def test_response_without_content(self, petstore_endpoints: list[EndpointDescriptor]) -> None:
        view = build_endpoint_view(petstore_endpoints[3])
        assert view.deprecated is True
        assert view.responses[0].type == "any"
        assert view.responses[0].media_types == ()


class TestGrouping:
    def test_group_by_document(
        self, petstore_document: SpecDocument, tree_document: SpecDocument
    ) -> None:
        documents = [petstore_document, tree_document]
        views = build_endpoint_views(collect_endpoints(documents))
        groups = group_by_document(documents, views)
        assert [doc.title for doc, _ in groups] == ["Pet Store API", "Tree API"]
        assert len(groups[0][1]) == 5
        assert [v.function_name for v in groups[1][1]] == ["getNodesId"]

    def test_base_url_precedence(
        self, petstore_document: SpecDocument, tree_document: SpecDocument
    ) -> None:
        configured = GenerationOptions(output_dir="out", base_url="http://localhost:8080/")
        assert resolve_base_url([petstore_document], configured) == "http://localhost:8080"

        defaults = GenerationOptions(output_dir="out")
        assert resolve_base_url([tree_document, petstore_document], defaults) == (
            "https://petstore.example.com/v1"
        )
        assert resolve_base_url([tree_document], defaults) == ""


class TestTemplates:
    def test_markdown_cell(self) -> None:
        assert markdown_cell("a | b\nc") == "a \\| b c"
        assert markdown_cell(None) == ""

    def test_jsdoc_text(self) -> None:
        assert jsdoc_text("a */ b */") == "a *\\/ b *\\/"
        assert jsdoc_text("/* ok *") == "/* ok *"
        assert jsdoc_text(None) == ""

    def test_missing_template_raises(self) -> None:
        with pytest.raises(RenderError, match="nope.j2"):
            render_template("nope.j2", {})


class TestRenderAll:
    def test_artifact_order(
        self,
        petstore_document: SpecDocument,
        petstore_endpoints: list[EndpointDescriptor],
        options: GenerationOptions,
    ) -> None:
        rendered = render_all([petstore_document], petstore_endpoints, options)
        assert list(rendered) == list(ARTIFACTS)
        assert list(rendered) == [
            "sdk.ts",
            "hooks.ts",
            "API.md",
            "index.html",
            "package.json",
            "tsconfig.json",
        ]
        assert all(content.endswith("\n") for content in rendered.values())

    def test_deterministic(
        self,
        petstore_document: SpecDocument,
        petstore_endpoints: list[EndpointDescriptor],
        options: GenerationOptions,
    ) -> None:
        first = render_all([petstore_document], petstore_endpoints, options)
        second = render_all([petstore_document], petstore_endpoints, options)
        assert first == second
