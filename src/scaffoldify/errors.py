from __future__ import annotations


class ScaffoldifyError(Exception):
    """Base class for all errors raised by scaffoldify."""


class SpecError(ScaffoldifyError):
    """The OpenAPI document cannot be loaded or is structurally invalid."""


class ConfigError(ScaffoldifyError):
    """The generator configuration is missing or invalid."""


class RenderError(ScaffoldifyError):
    """A template could not be found or failed to render."""
