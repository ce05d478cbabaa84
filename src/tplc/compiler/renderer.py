"""Renderer - converts CompiledTemplate IR to a Python module."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from tplc.compiler.spec import CompiledTemplate

TEMPLATES_DIR = Path(__file__).parent / "templates"


class Renderer:
    """Renders CompiledTemplate IR to Python source text."""

    def __init__(self, template: str = "module.py.j2"):
        self._env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
        )
        self._template = template

    def render(self, compiled: CompiledTemplate) -> str:
        """Render a compiled template to an importable Python module.

        The module defines one function, named by `compiled.entrypoint`, that
        takes the runtime and returns the template value.

        Args:
            compiled: The CompiledTemplate IR to render.

        Returns:
            Python module source as a string.
        """
        tmpl = self._env.get_template(self._template)
        return tmpl.render(
            header=compiled.header,
            source=compiled.source,
            entrypoint=compiled.entrypoint,
            runtime=compiled.runtime,
            expression=compiled.expression,
        )
