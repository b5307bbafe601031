from .annotations import AnnotationEmitter
from .context import (
    APIContext,
    ModelContext,
    OperationContext,
    api_filename,
    build_api_context,
    build_api_contexts,
    build_model_context,
    model_file_context,
    model_filename,
    models_import_path,
    unique_filenames,
)
from .render import TemplateRenderer

__all__ = [
    "AnnotationEmitter",
    "APIContext",
    "ModelContext",
    "OperationContext",
    "TemplateRenderer",
    "api_filename",
    "build_api_context",
    "build_api_contexts",
    "build_model_context",
    "model_file_context",
    "model_filename",
    "models_import_path",
    "unique_filenames",
]
