from __future__ import annotations

from typing import Any

import pytest

from scaffoldify.apis import collect_apis
from scaffoldify.ir import RequestBodyRef, ResponseRef


def _json(ref: str) -> dict[str, Any]:
    return {"content": {"application/json": {"schema": {"$ref": ref}}}}


class TestCollectAPIs:
    def test_no_paths(self) -> None:
        assert collect_apis(None).apis == {}
        assert collect_apis({}).apis == {}

    def test_path_is_normalized(self) -> None:
        paths: dict[str, Any] = {
            "/pets/{id}/owners/{ownerId}": {"get": {"operationId": "getOwner", "responses": {}}},
        }
        operation = collect_apis(paths).apis["default"][0]
        assert operation.path == "/pets/:id/owners/:ownerId"
        assert operation.path_params == ("id", "ownerId")
        assert operation.method == "GET"
        assert operation.operation_id == "GetOwner"

    @pytest.mark.parametrize(
        ("tags", "expected"),
        [
            pytest.param(["Users"], "users", id="first-tag-lowercased"),
            pytest.param(["Admin", "Users"], "admin", id="only-first-tag"),
            pytest.param([], "default", id="empty"),
            pytest.param(None, "default", id="missing"),
        ],
    )
    def test_tag_grouping(self, tags: list[str] | None, expected: str) -> None:
        operation: dict[str, Any] = {"operationId": "op", "responses": {}}
        if tags is not None:
            operation["tags"] = tags
        apis = collect_apis({"/users": {"get": operation}}).apis
        assert list(apis) == [expected]

    def test_order_is_deterministic(self, petstore_document: dict[str, Any]) -> None:
        apis = collect_apis(petstore_document["paths"], petstore_document).apis
        assert list(apis) == ["default", "pets"]
        assert [operation.operation_id for operation in apis["pets"]] == [
            "ListPets",
            "CreatePet",
            "GetPet",
            "DeletePet",
        ]

    def test_success_response_is_bound(self, petstore_document: dict[str, Any]) -> None:
        apis = collect_apis(petstore_document["paths"], petstore_document).apis
        get_pet = apis["pets"][2]
        assert get_pet.response == ResponseRef(model_name="Pet", status="200")
        assert get_pet.description == "Fetch a single pet."
        create_pet = apis["pets"][1]
        assert create_pet.response == ResponseRef(model_name="Pet", status="201")
        assert create_pet.request_body == RequestBodyRef(model_name="Pet")

    def test_error_responses_only(self) -> None:
        paths: dict[str, Any] = {
            "/pets": {
                "get": {
                    "operationId": "listPets",
                    "responses": {
                        "404": _json("#/components/schemas/Error"),
                        "500": _json("#/components/schemas/Error"),
                    },
                }
            }
        }
        result = collect_apis(paths)
        assert result.apis["default"][0].response is None
        assert result.diagnostics == []

    def test_status_codes_are_sorted(self) -> None:
        paths: dict[str, Any] = {
            "/pets": {
                "post": {
                    "operationId": "createPet",
                    "responses": {
                        "201": _json("#/components/schemas/Created"),
                        "200": _json("#/components/schemas/Existing"),
                    },
                }
            }
        }
        operation = collect_apis(paths).apis["default"][0]
        assert operation.response == ResponseRef(model_name="Existing", status="200")

    def test_integer_status_codes(self) -> None:
        paths: dict[str, Any] = {
            "/pets": {"get": {"operationId": "listPets", "responses": {200: _json("#/components/schemas/Pet")}}}
        }
        operation = collect_apis(paths).apis["default"][0]
        assert operation.response == ResponseRef(model_name="Pet", status="200")

    def test_inline_schemas_are_not_bound(self) -> None:
        paths: dict[str, Any] = {
            "/pets": {
                "post": {
                    "operationId": "createPet",
                    "requestBody": {"content": {"application/json": {"schema": {"type": "object"}}}},
                    "responses": {"200": {"content": {"application/json": {"schema": {"type": "string"}}}}},
                }
            }
        }
        result = collect_apis(paths)
        operation = result.apis["default"][0]
        assert operation.request_body is None
        assert operation.response is None
        assert [diagnostic.code for diagnostic in result.diagnostics] == [
            "unmapped-request-body",
            "unmapped-response",
        ]
        assert result.diagnostics[0].location == "#/paths/~1pets/post/requestBody"

    def test_non_json_media_type_is_not_bound(self) -> None:
        paths: dict[str, Any] = {
            "/pets": {
                "post": {
                    "operationId": "createPet",
                    "requestBody": {"content": {"application/xml": {"schema": {"$ref": "#/components/schemas/Pet"}}}},
                    "responses": {},
                }
            }
        }
        operation = collect_apis(paths).apis["default"][0]
        assert operation.request_body is None

    def test_response_without_content(self) -> None:
        paths: dict[str, Any] = {
            "/pets/{id}": {"delete": {"operationId": "deletePet", "responses": {"204": {"description": "gone"}}}}
        }
        result = collect_apis(paths)
        assert result.apis["default"][0].response is None
        assert result.diagnostics == []

    def test_missing_operation_id_is_derived(self) -> None:
        paths: dict[str, Any] = {"/pets/{id}": {"get": {"summary": "Get a pet", "responses": {}}}}
        result = collect_apis(paths)
        operation = result.apis["default"][0]
        assert operation.operation_id == "GetPetsId"
        assert operation.description == "Get a pet"
        assert [diagnostic.code for diagnostic in result.diagnostics] == ["missing-operation-id"]

    def test_component_references_are_followed(self) -> None:
        document: dict[str, Any] = {
            "openapi": "3.0.3",
            "paths": {
                "/pets": {
                    "post": {
                        "operationId": "createPet",
                        "requestBody": {"$ref": "#/components/requestBodies/PetBody"},
                        "responses": {"200": {"$ref": "#/components/responses/PetResponse"}},
                    }
                }
            },
            "components": {
                "requestBodies": {"PetBody": _json("#/components/schemas/NewPet")},
                "responses": {"PetResponse": _json("#/components/schemas/Pet")},
            },
        }
        operation = collect_apis(document["paths"], document).apis["default"][0]
        assert operation.request_body == RequestBodyRef(model_name="NewPet")
        assert operation.response == ResponseRef(model_name="Pet", status="200")

    def test_unresolved_response_reference(self) -> None:
        paths: dict[str, Any] = {
            "/pets": {"get": {"operationId": "listPets", "responses": {"200": {"$ref": "#/components/responses/Nope"}}}}
        }
        result = collect_apis(paths)
        assert result.apis["default"][0].response is None
        assert [diagnostic.code for diagnostic in result.diagnostics] == ["unresolved-reference"]
