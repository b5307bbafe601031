from .apis import collect_apis
from .builder import build_ir
from .config import GeneratorConfig, load_config
from .errors import ConfigError, RenderError, ScaffoldifyError, SpecError
from .generation import AnnotationEmitter, TemplateRenderer
from .generator import generate_package
from .ir import Diagnostic, Field, IRDocument, Model, Operation, RequestBodyRef, ResponseRef, TypeRef
from .loader import load_openapi, resolve_pointer
from .mapper import TypeMapper, collect_models

__all__ = [
    "ScaffoldifyError",
    "SpecError",
    "ConfigError",
    "RenderError",
    "GeneratorConfig",
    "load_config",
    "AnnotationEmitter",
    "TemplateRenderer",
    "generate_package",
    "Diagnostic",
    "Field",
    "IRDocument",
    "Model",
    "Operation",
    "RequestBodyRef",
    "ResponseRef",
    "TypeRef",
    "TypeMapper",
    "build_ir",
    "collect_apis",
    "collect_models",
    "load_openapi",
    "resolve_pointer",
]
