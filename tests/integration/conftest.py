"""Pytest fixtures for integration tests.

This module provides fixtures for:
- Generating a package from the OpenAPI document next to this file
- Importing the generated models and api packages
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterator

import pytest

from scaffoldify import GeneratorConfig, IRDocument, build_ir, generate_package, load_openapi
from scaffoldify.config import Options

SPEC_PATH = Path(__file__).parent / "openapi.yaml"
PACKAGE_NAME = "petstore_sdk"


@pytest.fixture(scope="session")
def petstore_ir() -> IRDocument:
    return build_ir(load_openapi(SPEC_PATH))


@pytest.fixture(scope="session")
def generated_root(tmp_path_factory: pytest.TempPathFactory, petstore_ir: IRDocument) -> Iterator[Path]:
    """Generate the package into ``<tmp>/petstore_sdk/gen`` and put ``<tmp>`` on sys.path."""
    root = tmp_path_factory.mktemp("generated")
    config = GeneratorConfig(
        input=str(SPEC_PATH),
        module=PACKAGE_NAME,
        output="gen",
        options=Options(generate_register=True),
    )
    generate_package(config, petstore_ir, root=root / PACKAGE_NAME)

    sys.path.insert(0, str(root))
    yield root / PACKAGE_NAME / "gen"
    sys.path.remove(str(root))
    for name in [name for name in sys.modules if name.split(".")[0] == PACKAGE_NAME]:
        del sys.modules[name]


@pytest.fixture(scope="session")
def models_module(generated_root: Path) -> ModuleType:
    return importlib.import_module(f"{PACKAGE_NAME}.gen.models")


@pytest.fixture(scope="session")
def api_module(generated_root: Path) -> ModuleType:
    return importlib.import_module(f"{PACKAGE_NAME}.gen.api")
