"""Map OpenAPI schemas to models.

The TypeMapper walks one schema node at a time and returns a TypeRef. Every
object schema it meets, at any depth, is registered as a Model; anonymous
nested objects get a name synthesized from their parent and property:

  Person.profile         -> PersonProfile
  Person.tags[] (object) -> PersonTagsItem

The registry doubles as the visited set. An object schema is marked as
pending before its properties are walked, so a schema that refers back to
itself (directly, through an array, or through a $ref) resolves to a
reference to its model instead of recursing forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, cast

from .errors import SpecError
from .ir import PRIMITIVE_NAMES, Diagnostic, Field, Model, ModelCollection, PrimitiveName, TypeRef
from .loader import json_pointer, resolve_pointer
from .naming import field_name, model_name, pascal_case, ref_name
from .openapi import SchemaObject

logger = logging.getLogger(__name__)

_SCHEMA_REF_PREFIX = "#/components/schemas/"


@dataclass
class TypeMapper:
    """Resolves schema nodes to TypeRefs, accumulating models as it goes.

    One mapper is used for a single collection run; ``models`` and
    ``diagnostics`` hold the accumulated results.

    Attributes:
        document: The document used to resolve local $ref pointers
        inline_nested_schemas: Map anonymous nested objects to a plain mapping
            type instead of registering a model for them
        models: Registered models, in registration order
        diagnostics: Warnings about references that could not be followed
    """

    document: Mapping[str, object]
    inline_nested_schemas: bool = False
    models: list[Model] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _visited: dict[int, str] = field(default_factory=dict, init=False)
    _owners: dict[str, int] = field(default_factory=dict, init=False)
    _following: set[str] = field(default_factory=set, init=False)

    def resolve(
        self,
        name: str,
        schema: SchemaObject | None,
        location: str,
        *,
        original_name: str = "",
        nested: bool = False,
    ) -> TypeRef:
        """Resolve a schema node to a TypeRef.

        Args:
            name: The model name to use if the node is an object
            schema: The schema node, or None when it is missing
            location: JSON pointer of the node, used in diagnostics
            original_name: The components/schemas key of the node, if any
            nested: Whether the node is anonymous and inside another schema

        Returns:
            The resolved type. Missing or untyped nodes resolve to unknown.
        """
        if not isinstance(schema, dict):
            return TypeRef.unknown()

        ref = schema.get("$ref")
        if isinstance(ref, str):
            return self._resolve_ref(ref, location)

        schema_type = _schema_type(schema)
        if schema_type in PRIMITIVE_NAMES:
            return TypeRef.primitive(cast(PrimitiveName, schema_type))
        if schema_type == "array":
            item = self.resolve(
                name + "Item",
                schema.get("items"),
                f"{location}/items",
                nested=True,
            )
            return TypeRef.array(item)
        if schema_type == "object":
            return self._resolve_object(name, schema, location, original_name, nested)
        return TypeRef.unknown()

    def _resolve_ref(self, ref: str, location: str) -> TypeRef:
        try:
            target = resolve_pointer(self.document, ref)
        except SpecError as exc:
            self._warn("unresolved-reference", location, str(exc))
            return TypeRef.unknown()
        if not isinstance(target, dict):
            self._warn("unresolved-reference", location, f"Reference {ref} does not point at a schema")
            return TypeRef.unknown()
        known = self._visited.get(id(target))
        if known is not None:
            return TypeRef.model(known)
        # Only chains of bare references can loop here; objects are caught above.
        if ref in self._following:
            self._warn("circular-reference", location, f"Reference {ref} refers back to itself")
            return TypeRef.unknown()

        name = ref_name(ref)
        original_name = name if ref.startswith(_SCHEMA_REF_PREFIX) else ""
        self._following.add(ref)
        try:
            return self.resolve(name, cast(SchemaObject, target), ref, original_name=original_name)
        finally:
            self._following.discard(ref)

    def _resolve_object(
        self,
        name: str,
        schema: SchemaObject,
        location: str,
        original_name: str,
        nested: bool,
    ) -> TypeRef:
        key = id(schema)
        known = self._visited.get(key)
        if known is not None:
            return TypeRef.model(known)
        if nested and self.inline_nested_schemas:
            return TypeRef.mapping()

        class_name = model_name(name)
        self._visited[key] = class_name

        properties = schema.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        required = schema.get("required")
        required_set = {str(item) for item in required} if isinstance(required, list) else set()

        fields: list[Field] = []
        for key_name, prop_schema in properties.items():
            # YAML loads unquoted numeric keys as integers.
            prop_name = str(key_name)
            prop_type = self.resolve(
                class_name + pascal_case(prop_name),
                prop_schema,
                f"{location}/properties/{_escape(prop_name)}",
                nested=True,
            )
            fields.append(
                Field(
                    name=field_name(prop_name, (existing.name for existing in fields)),
                    type=prop_type,
                    json_name=prop_name,
                    description=self._describe(prop_schema),
                    required=prop_name in required_set,
                )
            )

        self._register(
            Model(
                name=class_name,
                original_name=original_name,
                fields=tuple(fields),
                description=self._describe(schema),
            ),
            key,
            location,
        )
        return TypeRef.model(class_name)

    def _register(self, model: Model, key: int, location: str) -> None:
        owner = self._owners.get(model.name)
        if owner is not None and owner != key:
            self._warn(
                "duplicate-model-name",
                location,
                f"Model name {model.name!r} is already used by another schema",
            )
        self._owners[model.name] = key
        self.models.append(model)
        logger.debug("Registered model %s from %s", model.name, location)

    def _describe(self, schema: object) -> str:
        """Return a schema's description, following a $ref when it has none."""
        if not isinstance(schema, dict):
            return ""
        description = schema.get("description")
        if isinstance(description, str):
            return description
        ref = schema.get("$ref")
        if isinstance(ref, str):
            try:
                target = resolve_pointer(self.document, ref)
            except SpecError:
                return ""
            if isinstance(target, dict) and isinstance(target.get("description"), str):
                return target["description"]
        return ""

    def _warn(self, code: str, location: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(code=code, location=location, message=message))


def collect_models(
    schemas: Mapping[str, SchemaObject | None],
    document: Mapping[str, object] | None = None,
    *,
    inline_nested_schemas: bool = False,
) -> ModelCollection:
    """Collect models for all component schemas.

    Schemas are visited in name order, so the result is the same on every run
    for the same input. Schemas without a value are skipped.

    Args:
        schemas: The components/schemas mapping
        document: The full document, for resolving $ref pointers. Defaults to
            a document holding only ``schemas``.
        inline_nested_schemas: See TypeMapper

    Returns:
        The models in registration order and any diagnostics
    """
    if document is None:
        document = {"components": {"schemas": schemas}}
    mapper = TypeMapper(document, inline_nested_schemas=inline_nested_schemas)
    for key_name in sorted(schemas, key=str):
        name = str(key_name)
        schema = schemas[key_name]
        if schema is None:
            continue
        mapper.resolve(
            name,
            schema,
            json_pointer("components", "schemas", name),
            original_name=name,
        )
    logger.debug("Collected %d models from %d schemas", len(mapper.models), len(schemas))
    return ModelCollection(models=mapper.models, diagnostics=mapper.diagnostics)


def _schema_type(schema: SchemaObject) -> str | None:
    """Return the single type tag of a schema, or None if there is not exactly one."""
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        types = [item for item in schema_type if item != "null"]
        return types[0] if len(types) == 1 and isinstance(types[0], str) else None
    return schema_type if isinstance(schema_type, str) else None


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")
