"""Identifier rules shared by the collectors and the templates.

Examples:
  capitalize_first("getUser")            -> "GetUser"
  pascal_case("home_address")            -> "HomeAddress"
  snake_case("PersonProfile")            -> "person_profile"
  camel_case("person_profile")           -> "personProfile"
  normalize_path("/pets/{id}")           -> "/pets/:id"
  ref_name("#/components/schemas/Pet")   -> "Pet"
  operation_name("get", "/pets/{id}")    -> "GetPetsId"
"""

from __future__ import annotations

import keyword
import re
from typing import Iterable

_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")
_PATH_PARAM = re.compile(r"\{([^{}]+)\}")

# Generated models define these methods, so fields must not shadow them.
_RESERVED_FIELD_NAMES = frozenset({"from_dict", "to_dict"})


def capitalize_first(value: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    if not value:
        return value
    return value[:1].upper() + value[1:]


def pascal_case(value: str) -> str:
    """Join separator-delimited words, capitalizing the first letter of each.

    Inner capitals are kept, so ``homeAddress`` becomes ``HomeAddress``.
    """
    return "".join(capitalize_first(part) for part in _SEPARATORS.split(value) if part)


def snake_case(value: str) -> str:
    """Convert camelCase, PascalCase or separator-delimited text to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", value)
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1)
    return _SEPARATORS.sub("_", s2).strip("_").lower()


def camel_case(value: str) -> str:
    name = pascal_case(snake_case(value).replace("_", " "))
    return name[:1].lower() + name[1:]


def model_name(value: str) -> str:
    """Return a valid class name for a schema key or synthesized name."""
    name = pascal_case(value)
    if not name or name[0].isdigit():
        name = f"Model{name}"
    return name


def python_identifier(value: str, default: str = "value") -> str:
    """Return a snake_case identifier that is safe to use as a variable or attribute."""
    name = snake_case(value) or default
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def field_name(value: str, taken: Iterable[str] = ()) -> str:
    """Return a field identifier not already in ``taken``."""
    name = python_identifier(value, default="field")
    if name in _RESERVED_FIELD_NAMES:
        name = f"{name}_"
    used = set(taken)
    candidate = name
    counter = 2
    while candidate in used:
        candidate = f"{name}_{counter}"
        counter += 1
    return candidate


def normalize_path(path: str) -> str:
    """Rewrite path-template braces to the colon parameter syntax."""
    return path.replace("{", ":").replace("}", "")


def path_params(path: str) -> list[str]:
    """Return the template parameter names of a path, in order."""
    return _PATH_PARAM.findall(path)


def ref_name(ref: str) -> str:
    """Extract the referenced name from a JSON reference.

    >>> ref_name("#/components/schemas/User")
    'User'
    """
    return ref.rsplit("/", 1)[-1].replace("~1", "/").replace("~0", "~")


def operation_name(method: str, path: str) -> str:
    """Derive an operation identifier from an HTTP method and path template."""
    segments = [segment.strip("{}") for segment in path.split("/") if segment]
    return pascal_case(method.lower()) + "".join(pascal_case(segment) for segment in segments)
