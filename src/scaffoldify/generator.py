from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path

from .config import GeneratorConfig
from .generation import (
    AnnotationEmitter,
    TemplateRenderer,
    api_filename,
    build_api_contexts,
    build_model_context,
    model_file_context,
    model_filename,
    models_import_path,
    unique_filenames,
)
from .ir import IRDocument

logger = logging.getLogger(__name__)


def generate_package(
    config: GeneratorConfig,
    ir: IRDocument,
    root: str | PathLike[str] = ".",
    renderer: TemplateRenderer | None = None,
) -> list[Path]:
    """Render the models and api packages for an IR document.

    Files are written below ``root / config.output``. One model file per model
    and one api file per tag are written, unless the split options are off, in
    which case each package gets a single ``__init__.py``.

    Returns:
        The paths of all written files, in write order
    """
    renderer = renderer or TemplateRenderer(config.templates)
    base_dir = Path(root) / config.output
    models_dir = base_dir / config.packages.models
    api_dir = base_dir / config.packages.api
    models_dir.mkdir(parents=True, exist_ok=True)
    api_dir.mkdir(parents=True, exist_ok=True)

    written = _render_models(config, ir, renderer, models_dir)
    written.extend(_render_apis(config, ir, renderer, api_dir))
    return written


def _render_models(
    config: GeneratorConfig,
    ir: IRDocument,
    renderer: TemplateRenderer,
    models_dir: Path,
) -> list[Path]:
    written: list[Path] = []
    if not config.options.split_models:
        emitter = AnnotationEmitter()
        models = [build_model_context(model, config, emitter) for model in ir.models]
        context = {
            "models": models,
            "typing_imports": sorted({"Any", "Mapping", *emitter.imports}),
        }
        written.append(_write(models_dir / "__init__.py", renderer.render("models.py.j2", context)))
        return written

    emitters = {}
    contexts = {}
    filenames = unique_filenames((model.name for model in ir.models), lambda name: model_filename(name, config))
    for name, filename in filenames.items():
        if filename != model_filename(name, config):
            logger.warning("Model %s shares a file name with another model, writing it to %s", name, filename)
    for model in ir.models:
        emitter = AnnotationEmitter()
        contexts[model.name] = build_model_context(model, config, emitter, filenames[model.name])
        emitters[model.name] = emitter
    for name, context in contexts.items():
        path = models_dir / context.filename
        written.append(_write(path, renderer.render("model.py.j2", model_file_context(context, contexts, emitters[name]))))
    written.append(_write(models_dir / "__init__.py", renderer.render("models_init.py.j2", {"models": list(contexts.values())})))
    return written


def _render_apis(
    config: GeneratorConfig,
    ir: IRDocument,
    renderer: TemplateRenderer,
    api_dir: Path,
) -> list[Path]:
    known_models = set(ir.model_names)
    models_path = models_import_path(config)
    apis = build_api_contexts(ir.apis, known_models, config)
    for api in apis:
        if api.filename != api_filename(api.tag_key, config):
            logger.warning("Tag %r shares a file name with another tag, writing it to %s", api.tag_key, api.filename)
    register = config.options.generate_register

    written: list[Path] = []
    if not config.options.split_apis:
        model_imports = sorted({name for api in apis for name in api.model_imports})
        context = {
            "apis": apis,
            "models_path": models_path,
            "model_imports": model_imports,
            "register": register,
        }
        written.append(_write(api_dir / "__init__.py", renderer.render("apis.py.j2", context)))
        return written

    for api in apis:
        context = {
            "api": api,
            "tag": api.tag,
            "operations": api.source,
            "models_path": models_path,
        }
        written.append(_write(api_dir / api.filename, renderer.render("api.py.j2", context)))
    written.append(_write(api_dir / "__init__.py", renderer.render("api_init.py.j2", {"apis": apis, "register": register})))
    return written


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    logger.info("Generated %s", path)
    return path
