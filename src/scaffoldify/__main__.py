from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from .builder import build_ir
from .config import DEFAULT_CONFIG_FILE, GeneratorConfig, load_config, read_module_name
from .errors import ConfigError, ScaffoldifyError
from .generator import generate_package
from .loader import load_openapi

logger = logging.getLogger("scaffoldify")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="scaffoldify",
        description="Generate Python models and API scaffolding from an OpenAPI document.",
    )
    parser.add_argument("-c", "--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_FILE})")
    parser.add_argument("-i", "--input", help="Path or URL of the OpenAPI document")
    parser.add_argument("-o", "--output", help="Output directory, relative to the project root")
    parser.add_argument("-m", "--module", help="Top-level package of the project")
    parser.add_argument("--root", type=Path, default=Path("."), help="Project root directory")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.ERROR if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        config = _resolve_config(args)
        document = load_openapi(config.input)
        ir = build_ir(document, inline_nested_schemas=config.options.inline_nested_schemas)
        for diagnostic in ir.diagnostics:
            logger.warning("%s", diagnostic)
        written = generate_package(config, ir, root=args.root)
    except ScaffoldifyError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    logger.info("Wrote %d files", len(written))
    return 0


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    """Load the config file, if any, and apply command line overrides."""
    config_path = args.config
    if config_path is None and (args.root / DEFAULT_CONFIG_FILE).is_file():
        config_path = args.root / DEFAULT_CONFIG_FILE

    if config_path is not None:
        config = load_config(config_path, input_override=args.input)
    elif args.input:
        config = GeneratorConfig(input=args.input)
    else:
        raise ConfigError("input is required")

    overrides = {
        key: value
        for key, value in (("output", args.output), ("module", args.module))
        if value is not None
    }
    config = dataclasses.replace(config, **overrides)
    if not config.module:
        config = dataclasses.replace(config, module=read_module_name(args.root))
    return config


if __name__ == "__main__":
    raise SystemExit(main())
