from __future__ import annotations

import logging
from typing import Mapping, cast

from .apis import collect_apis
from .ir import APIs, Diagnostic, IRDocument, Model
from .mapper import collect_models
from .openapi import ComponentsObject, OpenAPIDocument, PathItemObject, SchemaObject

logger = logging.getLogger(__name__)


def build_ir(document: OpenAPIDocument, *, inline_nested_schemas: bool = False) -> IRDocument:
    """Build the intermediate representation of a loaded OpenAPI document.

    Args:
        document: The loaded document, with $refs left in place
        inline_nested_schemas: Map anonymous nested objects to plain mappings
            instead of generating models for them

    Returns:
        An IRDocument with models, tag-grouped operations and diagnostics
    """
    components = cast(ComponentsObject, document.get("components") or {})
    schemas = cast(Mapping[str, SchemaObject], components.get("schemas") or {})
    paths = cast(Mapping[str, PathItemObject], document.get("paths") or {})

    model_result = collect_models(schemas, document, inline_nested_schemas=inline_nested_schemas)
    api_result = collect_apis(paths, document)

    diagnostics = [
        *model_result.diagnostics,
        *api_result.diagnostics,
        *_unknown_models(model_result.models, api_result.apis),
    ]
    logger.debug(
        "Built IR: %d models, %d tags, %d diagnostics",
        len(model_result.models),
        len(api_result.apis),
        len(diagnostics),
    )
    return IRDocument(models=model_result.models, apis=api_result.apis, diagnostics=diagnostics)


def _unknown_models(models: list[Model], apis: APIs) -> list[Diagnostic]:
    """Report bindings to schemas that did not produce a model (e.g. array schemas)."""
    known = {model.name for model in models}
    diagnostics: list[Diagnostic] = []
    for operations in apis.values():
        for operation in operations:
            bound = []
            if operation.request_body is not None:
                bound.append(operation.request_body.model_name)
            if operation.response is not None:
                bound.append(operation.response.model_name)
            for name in bound:
                if name not in known:
                    diagnostics.append(
                        Diagnostic(
                            code="unknown-model",
                            location=f"{operation.method} {operation.path}",
                            message=f"{name!r} is not an object schema; no model was generated for it",
                        )
                    )
    return diagnostics
