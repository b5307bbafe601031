"""Generator configuration.

The configuration file is YAML, by default ``scaffoldify.yaml``:

    module: petstore
    input: openapi.yaml
    output: gen
    packages:
      models: models
      api: api
    options:
      splitModels: true
      splitAPIs: true
      inlineNestedSchemas: false
      generateRegister: false
    fileNaming:
      modelSuffix: _model.py
      apiSuffix: _api.py

Only ``input`` is required. Empty values fall back to the defaults.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "scaffoldify.yaml"


@dataclass(frozen=True)
class Packages:
    models: str = "models"
    api: str = "api"


@dataclass(frozen=True)
class Options:
    split_models: bool = True
    split_apis: bool = True
    inline_nested_schemas: bool = False
    generate_register: bool = False


@dataclass(frozen=True)
class FileNaming:
    model_suffix: str = "_model.py"
    api_suffix: str = "_api.py"


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generator run.

    Attributes:
        input: Path or URL of the OpenAPI document
        module: Top-level package the generated code lives in
        output: Directory, relative to the project root, that receives the
            models and api packages
        templates: Directory with template overrides
        packages: Directory names of the models and api packages
        options: Generation switches
        file_naming: Suffixes of generated model and api files
    """

    input: str
    module: str = ""
    output: str = ""
    templates: str | None = None
    packages: Packages = field(default_factory=Packages)
    options: Options = field(default_factory=Options)
    file_naming: FileNaming = field(default_factory=FileNaming)


def load_config(path: str | PathLike[str], input_override: str | None = None) -> GeneratorConfig:
    """Read a YAML configuration file.

    Relative ``input`` and ``templates`` paths are resolved against the
    directory of the configuration file. ``input_override`` replaces the
    file's ``input`` as given, so the file may leave ``input`` out.

    Raises:
        ConfigError: If the file is not valid YAML or a value is invalid
        FileNotFoundError: If the file does not exist
    """
    config_path = Path(path)
    text = config_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping: {config_path}")
    logger.debug("Loaded configuration from %s", config_path)
    return config_from_mapping(data, base_dir=config_path.parent, input_override=input_override)


def config_from_mapping(
    data: Mapping[str, Any],
    base_dir: Path | None = None,
    input_override: str | None = None,
) -> GeneratorConfig:
    """Build a GeneratorConfig from parsed configuration data.

    Raises:
        ConfigError: If ``input`` is missing or a value has the wrong type
    """
    input_path = input_override or _string(data, "input")
    if not input_path:
        raise ConfigError("input is required")
    templates = _string(data, "templates") or None
    if base_dir is not None:
        if not input_override:
            input_path = _relative_to(input_path, base_dir)
        if templates is not None:
            templates = _relative_to(templates, base_dir)

    packages = _section(data, "packages")
    options = _section(data, "options")
    file_naming = _section(data, "fileNaming")
    return GeneratorConfig(
        input=input_path,
        module=_string(data, "module"),
        output=_string(data, "output"),
        templates=templates,
        packages=Packages(
            models=_string(packages, "models") or Packages.models,
            api=_string(packages, "api") or Packages.api,
        ),
        options=Options(
            split_models=_bool(options, "splitModels", Options.split_models),
            split_apis=_bool(options, "splitAPIs", Options.split_apis),
            inline_nested_schemas=_bool(options, "inlineNestedSchemas", Options.inline_nested_schemas),
            generate_register=_bool(options, "generateRegister", Options.generate_register),
        ),
        file_naming=FileNaming(
            model_suffix=_string(file_naming, "modelSuffix") or FileNaming.model_suffix,
            api_suffix=_string(file_naming, "apiSuffix") or FileNaming.api_suffix,
        ),
    )


def read_module_name(root: str | PathLike[str]) -> str:
    """Read the project package name from ``pyproject.toml`` in ``root``.

    Returns an empty string when there is no pyproject.toml or it has no
    ``[project].name``.
    """
    pyproject = Path(root) / "pyproject.toml"
    if not pyproject.is_file():
        return ""
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject}: {exc}") from exc
    name = data.get("project", {}).get("name", "")
    if not isinstance(name, str):
        return ""
    return name.replace("-", "_").replace(".", "_")


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def _bool(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false")
    return value


def _relative_to(value: str, base_dir: Path) -> str:
    if "://" in value or Path(value).is_absolute():
        return value
    return str(base_dir / value)
