"""
Template renderer for the generated MCP server.

The templates produce source code, not markup, so autoescaping is off and
undefined variables are errors instead of empty strings.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import jinja2

from .errors import SerializationError, TemplateRegisterError, TemplateRenderError, UnknownTemplateError

CURRENT_DIR = Path(__file__).parent.resolve().absolute()
TEMPLATE_DIR = CURRENT_DIR.parent / "templates"

# Template name -> file in TEMPLATE_DIR
TEMPLATE_FILES = {
    "__main__.py": "main.py.jinja2",
    "__init__.py": "init.py.jinja2",
    "pyproject.toml": "pyproject.toml.jinja2",
}


def length(value: Any) -> int:
    """Length of a list, mapping or string; 0 for anything else."""
    if isinstance(value, (list, tuple, dict, str)):
        return len(value)
    return 0


def py_literal(value: Any) -> str:
    """Python source literal for a string, number, bool or None."""
    return repr(value)


def toml_str(value: Any) -> str:
    """TOML basic string for ``value``."""
    return json.dumps(str(value), ensure_ascii=False)


DEFAULT_HELPERS: dict[str, Callable[..., Any]] = {
    "length": length,
    "py_literal": py_literal,
    "toml_str": toml_str,
}


def _load_template_sources() -> dict[str, str]:
    sources = {}
    for name, filename in TEMPLATE_FILES.items():
        try:
            sources[name] = (TEMPLATE_DIR / filename).read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateRegisterError(name, str(e)) from e
    return sources


def _as_data(context: Any) -> Any:
    if dataclasses.is_dataclass(context) and not isinstance(context, type):
        return dataclasses.asdict(context)
    return context


class TemplateRenderer:
    """Holds the compiled templates and renders them against a context."""

    def __init__(self, templates: dict[str, str] | None = None, helpers: dict[str, Callable[..., Any]] | None = None):
        """
        Compile the templates.

        Args:
            templates: Template name -> source; the built-in server templates when omitted
            helpers: Extra helper functions, added to the default ones

        Raises:
            TemplateRegisterError: If a template fails to compile
        """
        self.jinja_env = jinja2.Environment(
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        for name, helper in {**DEFAULT_HELPERS, **(helpers or {})}.items():
            self.register_helper(name, helper)

        self._templates: dict[str, jinja2.Template] = {}
        for name, source in (templates if templates is not None else _load_template_sources()).items():
            try:
                self._templates[name] = self.jinja_env.from_string(source)
            except jinja2.TemplateSyntaxError as e:
                raise TemplateRegisterError(name, str(e)) from e

    def register_helper(self, name: str, helper: Callable[..., Any]) -> None:
        """Expose ``helper`` to templates as a global function and as a filter."""
        self.jinja_env.globals[name] = helper
        self.jinja_env.filters[name] = helper

    @property
    def template_names(self) -> list[str]:
        return list(self._templates)

    def render(self, template_name: str, context: Any) -> str:
        """
        Render a template.

        The context (a mapping or a dataclass) is first normalized to plain
        JSON data, so templates only ever see dicts, lists and scalars.

        Raises:
            UnknownTemplateError: If no template has that name
            SerializationError: If the context is not JSON serializable
            TemplateRenderError: If rendering fails
        """
        template = self._templates.get(template_name)
        if template is None:
            raise UnknownTemplateError(template_name)

        try:
            data = json.loads(json.dumps(_as_data(context)))
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e)) from e
        if not isinstance(data, dict):
            raise SerializationError(f"context must be a mapping, got {type(data).__name__}")

        try:
            return template.render(**data)
        except jinja2.TemplateError as e:
            raise TemplateRenderError(template_name, str(e)) from e
