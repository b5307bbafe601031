"""Intermediate Representation (IR) produced from OpenAPI documents.

The IR is what the collectors hand to the render driver: a flat, ordered list
of models (including models synthesized for anonymous nested objects) and the
document's operations grouped by tag.

Key classes:
- TypeRef: A resolved type (primitive, array, model reference, mapping, unknown)
- Field: One property of a model
- Model: A named record generated for one object schema
- Operation: One HTTP method bound to one path
- RequestBodyRef / ResponseRef: Model bindings of an operation
- Diagnostic: A warning about input the collectors skipped or degraded
- IRDocument: Root container handed to the render driver
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

TypeKind = Literal["primitive", "array", "model", "mapping", "unknown"]
PrimitiveName = Literal["string", "integer", "number", "boolean"]

PRIMITIVE_NAMES: tuple[PrimitiveName, ...] = ("string", "integer", "number", "boolean")


@dataclass(frozen=True)
class TypeRef:
    """A resolved type reference.

    Attributes:
        kind: What the reference points at
        name: The primitive name for primitives, the model name for models
        item: The element type of an array
    """

    kind: TypeKind
    name: str = ""
    item: TypeRef | None = None

    @classmethod
    def primitive(cls, name: PrimitiveName) -> TypeRef:
        return cls(kind="primitive", name=name)

    @classmethod
    def array(cls, item: TypeRef) -> TypeRef:
        return cls(kind="array", item=item)

    @classmethod
    def model(cls, name: str) -> TypeRef:
        return cls(kind="model", name=name)

    @classmethod
    def mapping(cls) -> TypeRef:
        return cls(kind="mapping")

    @classmethod
    def unknown(cls) -> TypeRef:
        return cls(kind="unknown")

    def models(self) -> list[str]:
        """Return the model names this type refers to, outermost first."""
        if self.kind == "model":
            return [self.name]
        if self.kind == "array" and self.item is not None:
            return self.item.models()
        return []

    def __str__(self) -> str:
        if self.kind == "array":
            return f"[]{self.item}"
        if self.kind in ("primitive", "model"):
            return self.name
        return self.kind


@dataclass(frozen=True)
class Field:
    """One property of a model.

    Attributes:
        name: The exposed identifier in generated code
        type: The resolved type of the property
        json_name: The property key in the source schema
        description: The property description, if any
        required: Whether the parent schema lists the property as required
    """

    name: str
    type: TypeRef
    json_name: str
    description: str = ""
    required: bool = False


@dataclass(frozen=True)
class Model:
    """A named record generated for one object schema.

    Attributes:
        name: The derived class name
        original_name: The components/schemas key, empty for synthesized models
        fields: The properties in declaration order
        description: The schema description, if any
    """

    name: str
    original_name: str
    fields: tuple[Field, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class RequestBodyRef:
    model_name: str


@dataclass(frozen=True)
class ResponseRef:
    model_name: str
    status: str


@dataclass(frozen=True)
class Operation:
    """One HTTP method bound to one path.

    Attributes:
        operation_id: The capitalized operation identifier
        method: The upper-cased HTTP method
        path: The path with ``{param}`` rewritten to ``:param``
        description: Human-readable description of the operation
        request_body: The request body model binding, if any
        response: The success response model binding, if any
        path_params: The path parameter names, in path order
    """

    operation_id: str
    method: str
    path: str
    description: str = ""
    request_body: RequestBodyRef | None = None
    response: ResponseRef | None = None
    path_params: tuple[str, ...] = ()


APIs = dict[str, list[Operation]]


@dataclass(frozen=True)
class Diagnostic:
    """A structured warning about input that was skipped or degraded.

    Attributes:
        code: A stable, machine-readable kind (e.g. "unmapped-response")
        location: Where in the document the problem is (JSON pointer style)
        message: Human-readable explanation
    """

    code: str
    location: str
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message} [{self.code}]"


@dataclass(frozen=True)
class ModelCollection:
    models: list[Model]
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class APICollection:
    apis: APIs
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass(frozen=True)
class IRDocument:
    """Root container for the intermediate representation.

    Attributes:
        models: All models, in emission order
        apis: Operations grouped by lower-cased tag, tags sorted
        diagnostics: Warnings from both collectors
    """

    models: list[Model]
    apis: APIs
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def model_names(self) -> list[str]:
        return [model.name for model in self.models]
