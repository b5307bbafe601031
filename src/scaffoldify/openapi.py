from __future__ import annotations

from typing import TypedDict

SchemaObject = TypedDict(
    "SchemaObject",
    {
        # OpenAPI 3.1 allows a list of types, e.g. ["string", "null"]
        "type": "str | list[str]",
        "format": str,
        "properties": dict[str, "SchemaObject"],
        "items": "SchemaObject",
        "required": list[str],
        "nullable": bool,
        "enum": list[object],
        "additionalProperties": object,
        "default": object,
        "description": str,
        "title": str,
        "$ref": str,
    },
    total=False,
)

MediaTypeObject = TypedDict(
    "MediaTypeObject",
    {
        "schema": SchemaObject,
    },
    total=False,
)

ResponseObject = TypedDict(
    "ResponseObject",
    {
        "description": str,
        "content": dict[str, MediaTypeObject],
        "$ref": str,
    },
    total=False,
)

RequestBodyObject = TypedDict(
    "RequestBodyObject",
    {
        "description": str,
        "content": dict[str, MediaTypeObject],
        "required": bool,
        "$ref": str,
    },
    total=False,
)

OperationObject = TypedDict(
    "OperationObject",
    {
        "operationId": str,
        "summary": str,
        "description": str,
        "tags": list[str],
        "requestBody": RequestBodyObject,
        "responses": dict[str, ResponseObject],
    },
    total=False,
)

PathItemObject = TypedDict(
    "PathItemObject",
    {
        "get": OperationObject,
        "put": OperationObject,
        "post": OperationObject,
        "delete": OperationObject,
        "options": OperationObject,
        "head": OperationObject,
        "patch": OperationObject,
        "trace": OperationObject,
    },
    total=False,
)

ComponentsObject = TypedDict(
    "ComponentsObject",
    {
        "schemas": dict[str, SchemaObject],
        "responses": dict[str, ResponseObject],
        "requestBodies": dict[str, RequestBodyObject],
    },
    total=False,
)

InfoObject = TypedDict(
    "InfoObject",
    {
        "title": str,
        "version": str,
    },
    total=False,
)

OpenAPIDocument = TypedDict(
    "OpenAPIDocument",
    {
        "openapi": str,
        "info": InfoObject,
        "paths": dict[str, PathItemObject],
        "components": ComponentsObject,
    },
    total=False,
)
