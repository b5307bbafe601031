"""Turn resolved TypeRefs into Python source fragments.

This module provides the AnnotationEmitter class which renders a TypeRef as a
type annotation, and as the expressions that convert a JSON value to and from
that type in generated models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ir import TypeRef

_PRIMITIVES = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
}


@dataclass
class AnnotationEmitter:
    """Converts TypeRefs to Python annotation and conversion expressions.

    Attributes:
        imports: Names from ``typing`` required by the emitted annotations

    Note:
        emit() has side effects: it adds to self.imports. When one emitter is
        shared across a file, imports accumulate across all emit() calls.

    Example:
        >>> emitter = AnnotationEmitter()
        >>> emitter.emit(TypeRef.array(TypeRef.primitive("string")))
        'list[str]'
        >>> emitter.decode(TypeRef.model("Pet"), "data['pet']")
        "Pet.from_dict(data['pet'])"
    """

    imports: set[str] = field(default_factory=set)

    def emit(self, type_ref: TypeRef) -> str:
        """Return the annotation for a type.

        Side Effects:
            Adds ``Any`` to self.imports for mapping and unknown types
        """
        if type_ref.kind == "primitive":
            return _PRIMITIVES[type_ref.name]
        if type_ref.kind == "array" and type_ref.item is not None:
            return f"list[{self.emit(type_ref.item)}]"
        if type_ref.kind == "model":
            return type_ref.name
        self.imports.add("Any")
        if type_ref.kind == "mapping":
            return "dict[str, Any]"
        return "Any"

    def decode(self, type_ref: TypeRef, expr: str, depth: int = 0) -> str:
        """Return an expression converting the JSON value ``expr`` to the type."""
        if type_ref.kind == "model":
            return f"{type_ref.name}.from_dict({expr})"
        if type_ref.kind == "array" and type_ref.item is not None:
            if not _needs_conversion(type_ref.item):
                return f"list({expr})"
            var = f"item{depth}"
            return f"[{self.decode(type_ref.item, var, depth + 1)} for {var} in {expr}]"
        return expr

    def encode(self, type_ref: TypeRef, expr: str, depth: int = 0) -> str:
        """Return an expression converting ``expr`` of the type to a JSON value."""
        if type_ref.kind == "model":
            return f"{expr}.to_dict()"
        if type_ref.kind == "array" and type_ref.item is not None:
            if not _needs_conversion(type_ref.item):
                return f"list({expr})"
            var = f"item{depth}"
            return f"[{self.encode(type_ref.item, var, depth + 1)} for {var} in {expr}]"
        return expr


def _needs_conversion(type_ref: TypeRef) -> bool:
    return bool(type_ref.models())
