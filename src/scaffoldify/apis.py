"""Flatten the paths of an OpenAPI document into operations grouped by tag.

A request body or response is bound to a model only when it has an
``application/json`` media type whose schema is a named reference. Inline
schemas are left unbound and reported as diagnostics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, cast

from .errors import SpecError
from .ir import APICollection, APIs, Diagnostic, Operation, RequestBodyRef, ResponseRef
from .loader import json_pointer, resolve_pointer
from .naming import capitalize_first, model_name, normalize_path, operation_name, path_params, ref_name
from .openapi import MediaTypeObject, OperationObject, PathItemObject

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
JSON_MEDIA_TYPE = "application/json"
DEFAULT_TAG = "default"


@dataclass
class APIMapper:
    """Builds Operations for one document, accumulating diagnostics."""

    document: Mapping[str, object]
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def map_operation(self, path: str, method: str, operation: OperationObject) -> Operation:
        location = json_pointer("paths", path, method)
        return Operation(
            operation_id=self._operation_id(operation, method, path, location),
            method=method.upper(),
            path=normalize_path(path),
            description=operation.get("description") or operation.get("summary") or "",
            request_body=self._request_body(operation, location),
            response=self._response(operation, location),
            path_params=tuple(path_params(path)),
        )

    def _operation_id(self, operation: OperationObject, method: str, path: str, location: str) -> str:
        operation_id = operation.get("operationId")
        if isinstance(operation_id, str) and operation_id:
            return capitalize_first(operation_id)
        derived = operation_name(method, path)
        self._warn("missing-operation-id", location, f"No operationId, using {derived!r}")
        return derived

    def _request_body(self, operation: OperationObject, location: str) -> RequestBodyRef | None:
        if "requestBody" not in operation:
            return None
        body_location = f"{location}/requestBody"
        request_body = self._deref(operation["requestBody"], body_location)
        if request_body is None:
            return None
        content = _content(request_body)
        name = _json_model_name(content)
        if name is not None:
            return RequestBodyRef(model_name=name)
        if content:
            self._warn(
                "unmapped-request-body",
                body_location,
                f"Request body has no {JSON_MEDIA_TYPE} schema reference; no model is bound",
            )
        return None

    def _response(self, operation: OperationObject, location: str) -> ResponseRef | None:
        responses = operation.get("responses")
        if not isinstance(responses, dict):
            return None
        unmapped: list[str] = []
        # YAML loads unquoted status codes as integers.
        for status in sorted(responses, key=str):
            code = str(status)
            if not code.startswith("2"):
                continue
            response = self._deref(responses[status], f"{location}/responses/{code}")
            if response is None:
                continue
            content = _content(response)
            name = _json_model_name(content)
            if name is not None:
                return ResponseRef(model_name=name, status=code)
            if content:
                unmapped.append(code)
        if unmapped:
            self._warn(
                "unmapped-response",
                f"{location}/responses",
                f"Responses {', '.join(unmapped)} have no {JSON_MEDIA_TYPE} schema reference; no model is bound",
            )
        return None

    def _deref(self, value: object, location: str) -> dict[str, object] | None:
        """Follow a $ref on a response or request body object."""
        if not isinstance(value, dict):
            return None
        ref = value.get("$ref")
        if not isinstance(ref, str):
            return value
        try:
            target = resolve_pointer(self.document, ref)
        except SpecError as exc:
            self._warn("unresolved-reference", location, str(exc))
            return None
        return target if isinstance(target, dict) else None

    def _warn(self, code: str, location: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(code=code, location=location, message=message))


def collect_apis(
    paths: Mapping[str, PathItemObject] | None,
    document: Mapping[str, object] | None = None,
) -> APICollection:
    """Collect the operations of all paths, grouped by tag.

    Paths are visited in sorted order and methods in a fixed order, so each
    tag's operations come out the same on every run. An operation is grouped
    under its first tag, lower-cased, or under "default" when it has none.

    Args:
        paths: The document's paths mapping; None or empty yields no groups
        document: The full document, for resolving $ref pointers

    Returns:
        Operations grouped by tag, with tags sorted, and any diagnostics
    """
    paths = paths or {}
    mapper = APIMapper(document if document is not None else {"paths": paths})
    groups: APIs = {}
    for path in sorted(paths):
        item = paths[path]
        if not isinstance(item, dict):
            continue
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, dict):
                continue
            operation = cast(OperationObject, operation)
            groups.setdefault(_tag(operation), []).append(mapper.map_operation(path, method, operation))
    logger.debug("Collected %d operations in %d tags", sum(len(ops) for ops in groups.values()), len(groups))
    return APICollection(apis={tag: groups[tag] for tag in sorted(groups)}, diagnostics=mapper.diagnostics)


def _tag(operation: OperationObject) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str) and tags[0]:
        return tags[0].lower()
    return DEFAULT_TAG


def _content(obj: Mapping[str, object]) -> dict[str, MediaTypeObject]:
    content = obj.get("content")
    return cast(dict[str, MediaTypeObject], content) if isinstance(content, dict) else {}


def _json_model_name(content: dict[str, MediaTypeObject]) -> str | None:
    """Return the model named by the JSON media type's schema reference.

    If several media types qualify, the last one wins.
    """
    name = None
    for media_type, media in content.items():
        if media_type != JSON_MEDIA_TYPE or not isinstance(media, dict):
            continue
        schema = media.get("schema")
        if isinstance(schema, dict):
            ref = schema.get("$ref")
            if isinstance(ref, str) and ref:
                name = model_name(ref_name(ref))
    return name
