from __future__ import annotations

import json
import logging
from os import PathLike
from pathlib import Path
from typing import Mapping, cast
from urllib.parse import urlparse
from urllib.request import Request, urlopen

import yaml

from .errors import SpecError
from .openapi import OpenAPIDocument

logger = logging.getLogger(__name__)

OpenAPISource = str | PathLike[str] | Mapping[str, object]


def load_openapi(source: OpenAPISource) -> OpenAPIDocument:
    """Load an OpenAPI document from various sources.

    References are left in place: the collectors need to see which schemas
    are named references and which are inline.

    Args:
        source: Can be a file path (str or PathLike), URL, or a dict-like object

    Returns:
        The loaded OpenAPI document

    Raises:
        SpecError: If the document cannot be read or is structurally invalid
    """
    document = _read_source(source)
    _check_structure(document)
    return cast(OpenAPIDocument, document)


def resolve_pointer(document: Mapping[str, object], ref: str) -> object:
    """Resolve a local JSON reference within a document.

    Args:
        document: The document to resolve within
        ref: The reference (e.g., "#/components/schemas/User")

    Returns:
        The value at the pointer location

    Raises:
        SpecError: If the reference is not local or cannot be resolved
    """
    if not ref.startswith("#"):
        raise SpecError(f"Only local $ref values are supported: {ref}")
    fragment = ref[1:]
    if fragment in {"", "/"}:
        return document
    current: object = document
    for part in fragment.lstrip("/").split("/"):
        key = part.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            raise SpecError(f"Unresolvable $ref pointer: {ref}")
    return current


def json_pointer(*parts: str) -> str:
    """Build a local JSON reference from unescaped path segments.

    >>> json_pointer("paths", "/pets/{id}", "get")
    '#/paths/~1pets~1{id}/get'
    """
    escaped = (part.replace("~", "~0").replace("/", "~1") for part in parts)
    return "#/" + "/".join(escaped)


def _check_structure(document: object) -> None:
    if not isinstance(document, dict):
        raise SpecError("OpenAPI document must be an object")
    if "swagger" in document and "openapi" not in document:
        raise SpecError("Swagger 2.0 documents are not supported; convert to OpenAPI 3")
    openapi_version = document.get("openapi")
    if not isinstance(openapi_version, str):
        raise SpecError("Missing or invalid 'openapi' field in document")
    if not openapi_version.startswith("3."):
        logger.warning("Unsupported OpenAPI version %s, continuing", openapi_version)
    paths = document.get("paths", {})
    if paths is not None and not isinstance(paths, dict):
        raise SpecError("'paths' must be an object")
    components = document.get("components", {})
    if components is not None and not isinstance(components, dict):
        raise SpecError("'components' must be an object")
    schemas = (components or {}).get("schemas", {})
    if schemas is not None and not isinstance(schemas, dict):
        raise SpecError("'components.schemas' must be an object")


def _is_url(source: str) -> bool:
    """Check if the source string is a URL."""
    parsed = urlparse(source)
    return parsed.scheme in {"http", "https"}


def _fetch_url(url: str) -> str:
    """Fetch content from a URL.

    Raises:
        SpecError: If the URL cannot be fetched
    """
    try:
        request = Request(url, headers={"User-Agent": "scaffoldify"})
        with urlopen(request, timeout=30) as response:  # noqa: S310
            return response.read().decode("utf-8")
    except OSError as exc:
        raise SpecError(f"Failed to fetch URL: {url}") from exc


def _get_url_extension(url: str) -> str:
    """Extract file extension from URL path."""
    path = urlparse(url).path
    if "." in path:
        return "." + path.rsplit(".", 1)[-1].lower()
    return ""


def _read_source(source: OpenAPISource) -> object:
    """Read an OpenAPI document from a mapping, URL or file path."""
    if isinstance(source, Mapping):
        return dict(source)

    source_str = str(source) if isinstance(source, PathLike) else source

    if _is_url(source_str):
        logger.debug("Fetching OpenAPI document from %s", source_str)
        text = _fetch_url(source_str)
        if _get_url_extension(source_str) in {".yaml", ".yml"}:
            return _load_yaml(text)
        return _load_json_or_yaml(text)

    path = Path(source_str)
    logger.debug("Reading OpenAPI document from %s", path)
    text = path.read_text(encoding="utf-8")
    if path.suffix in {".yaml", ".yml"}:
        return _load_yaml(text)
    return _load_json_or_yaml(text)


def _load_json_or_yaml(text: str) -> object:
    """Try to load as JSON, fall back to YAML if that fails."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _load_yaml(text)


def _load_yaml(text: str) -> object:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecError(f"Invalid YAML: {exc}") from exc
