"""Jinja2 rendering for generated files.

Templates are looked up in the user's template directory first, then in the
templates bundled with the package, so single templates can be overridden.
Besides the Jinja2 built-ins, templates get these filters:

  upper, lower, snake, camel, pascal   case conversion
  pyrepr                               Python literal of a value
  docstring                            text safe inside a triple-quoted string
  comment                              text collapsed onto one line
"""

from __future__ import annotations

from os import PathLike
from typing import Any, Mapping

import jinja2

from ..errors import RenderError
from ..naming import camel_case, pascal_case, snake_case

BUNDLED_TEMPLATES = ("scaffoldify", "generation/templates")


def _docstring(value: str) -> str:
    text = value.replace("\\", "\\\\").replace('"""', '\\"\\"\\"').strip()
    if text.endswith('"') and not text.endswith('\\"'):
        text = text[:-1] + '\\"'
    return text


def _comment(value: str) -> str:
    return " ".join(value.split())


class TemplateRenderer:
    def __init__(self, template_dir: str | PathLike[str] | None = None) -> None:
        loaders: list[jinja2.BaseLoader] = []
        if template_dir is not None:
            loaders.append(jinja2.FileSystemLoader(str(template_dir)))
        loaders.append(jinja2.PackageLoader(*BUNDLED_TEMPLATES))
        self.env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=jinja2.StrictUndefined,
        )
        self.env.filters.update(
            upper=str.upper,
            lower=str.lower,
            snake=snake_case,
            camel=camel_case,
            pascal=pascal_case,
            pyrepr=repr,
            docstring=_docstring,
            comment=_comment,
        )

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """Render a template by name.

        Raises:
            RenderError: If the template is missing or fails to render
        """
        try:
            template = self.env.get_template(name)
            return template.render(**context)
        except jinja2.TemplateError as exc:
            raise RenderError(f"Failed to render template {name}: {exc}") from exc
