"""Template contexts for generated model and API files."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import PurePosixPath
from typing import Any, Callable, Iterable, Mapping

from ..config import GeneratorConfig
from ..ir import Model, Operation
from ..naming import capitalize_first, field_name, model_name, python_identifier, snake_case
from .annotations import AnnotationEmitter


@dataclass(frozen=True)
class FieldContext:
    name: str
    json_name: str
    annotation: str
    decode: str
    encode: str
    description: str


@dataclass(frozen=True)
class ModelContext:
    name: str
    original_name: str
    description: str
    filename: str
    module: str
    fields: list[FieldContext]
    dependencies: list[str]


@dataclass(frozen=True)
class OperationContext:
    operation_id: str
    method: str
    path: str
    method_name: str
    description: str
    params: list[tuple[str, str]]
    request_model: str | None
    response_model: str | None
    response_status: str | None

    @property
    def return_annotation(self) -> str:
        return self.response_model or "httpx.Response"

    @property
    def docstring(self) -> str:
        parts = [self.description] if self.description else []
        if self.response_model:
            parts.append(f"Returns {self.response_model} on HTTP {self.response_status}.")
        return "\n\n".join(parts)


@dataclass(frozen=True)
class APIContext:
    tag: str
    tag_key: str
    class_name: str
    attr: str
    filename: str
    module: str
    operations: list[OperationContext]
    source: list[Operation]

    @property
    def model_imports(self) -> list[str]:
        names = set()
        for operation in self.operations:
            if operation.request_model:
                names.add(operation.request_model)
            if operation.response_model:
                names.add(operation.response_model)
        return sorted(names)


def module_name(filename: str) -> str:
    return filename.removesuffix(".py")


def model_filename(name: str, config: GeneratorConfig) -> str:
    return snake_case(name) + config.file_naming.model_suffix


def api_filename(tag: str, config: GeneratorConfig) -> str:
    return snake_case(tag) + config.file_naming.api_suffix


def unique_filenames(names: Iterable[str], filename: Callable[[str], str]) -> dict[str, str]:
    """Map each distinct name to a file name that no other name gets.

    Names are snake-cased into file names, so ``HTTPServer`` and ``HttpServer``
    both want ``http_server_model.py``. Later names get a numeric suffix in
    front of the extension instead:

    >>> unique_filenames(["HTTPServer", "HttpServer"], lambda name: snake_case(name) + ".py")
    {'HTTPServer': 'http_server.py', 'HttpServer': 'http_server_2.py'}
    """
    result: dict[str, str] = {}
    taken: set[str] = set()
    for name in names:
        if name in result:
            continue
        base = filename(name)
        stem, dot, extension = base.rpartition(".")
        if not dot:
            stem, extension = base, ""
        candidate = base
        counter = 2
        while candidate in taken:
            candidate = f"{stem}_{counter}{dot}{extension}"
            counter += 1
        taken.add(candidate)
        result[name] = candidate
    return result


def models_import_path(config: GeneratorConfig) -> str:
    """Return the dotted import path of the generated models package.

    >>> models_import_path(GeneratorConfig(input="x", module="petstore", output="gen"))
    'petstore.gen.models'
    """
    parts = [config.module] if config.module else []
    parts.extend(part for part in PurePosixPath(config.output.replace("\\", "/")).parts if part not in ("", ".", "/"))
    parts.append(config.packages.models)
    return ".".join(parts)


def build_model_context(
    model: Model,
    config: GeneratorConfig,
    emitter: AnnotationEmitter,
    filename: str | None = None,
) -> ModelContext:
    filename = filename or model_filename(model.name, config)
    fields: list[FieldContext] = []
    dependencies: list[str] = []
    for item in model.fields:
        value = f"data[{item.json_name!r}]"
        fields.append(
            FieldContext(
                name=item.name,
                json_name=item.json_name,
                annotation=emitter.emit(item.type),
                decode=emitter.decode(item.type, value),
                encode=emitter.encode(item.type, f"self.{item.name}"),
                description=item.description,
            )
        )
        for dependency in item.type.models():
            if dependency != model.name and dependency not in dependencies:
                dependencies.append(dependency)
    return ModelContext(
        name=model.name,
        original_name=model.original_name,
        description=model.description,
        filename=filename,
        module=module_name(filename),
        fields=fields,
        dependencies=dependencies,
    )


def build_api_context(
    tag: str,
    operations: list[Operation],
    known_models: set[str],
    config: GeneratorConfig,
) -> APIContext:
    """Build the context for one tag's API class.

    Bindings to models that were not generated are dropped, so such
    operations return the raw response.
    """
    contexts: list[OperationContext] = []
    method_names: list[str] = []
    for operation in operations:
        method = field_name(operation.operation_id, method_names)
        method_names.append(method)

        params: list[tuple[str, str]] = []
        taken = ["self", "body", "kwargs"]
        for param in operation.path_params:
            arg = field_name(param, taken)
            taken.append(arg)
            params.append((arg, param))

        request_model = operation.request_body.model_name if operation.request_body else None
        response_model = operation.response.model_name if operation.response else None
        contexts.append(
            OperationContext(
                operation_id=operation.operation_id,
                method=operation.method,
                path=operation.path,
                method_name=method,
                description=operation.description,
                params=params,
                request_model=request_model if request_model in known_models else None,
                response_model=response_model if response_model in known_models else None,
                response_status=operation.response.status if operation.response else None,
            )
        )
    filename = api_filename(tag, config)
    return APIContext(
        tag=capitalize_first(tag),
        tag_key=tag,
        class_name=model_name(tag) + "API",
        attr=python_identifier(tag, default="default"),
        filename=filename,
        module=module_name(filename),
        operations=contexts,
        source=operations,
    )


def build_api_contexts(
    apis: Mapping[str, list[Operation]],
    known_models: set[str],
    config: GeneratorConfig,
) -> list[APIContext]:
    """Build the contexts of all tags, keeping their classes, files and attributes apart.

    Tags that differ only in case or separators, such as ``pet-store`` and
    ``pet_store``, would otherwise share a class name and a file. Later tags get
    a numeric suffix.
    """
    filenames = unique_filenames(apis, lambda tag: api_filename(tag, config))
    contexts: list[APIContext] = []
    class_names: set[str] = set()
    attrs: list[str] = []
    for tag, operations in apis.items():
        context = build_api_context(tag, operations, known_models, config)
        class_name = context.class_name
        counter = 2
        while class_name in class_names:
            class_name = f"{context.class_name}{counter}"
            counter += 1
        class_names.add(class_name)
        attr = field_name(context.attr, attrs)
        attrs.append(attr)
        filename = filenames[tag]
        contexts.append(
            replace(context, class_name=class_name, attr=attr, filename=filename, module=module_name(filename))
        )
    return contexts


def model_file_context(model: ModelContext, models: dict[str, ModelContext], emitter: AnnotationEmitter) -> dict[str, Any]:
    imports = [(models[name].module, name) for name in model.dependencies if name in models]
    typing_imports = {"Any", "Mapping", *emitter.imports}
    if imports:
        typing_imports.add("TYPE_CHECKING")
    return {
        "model": model,
        "imports": imports,
        "typing_imports": sorted(typing_imports),
    }
