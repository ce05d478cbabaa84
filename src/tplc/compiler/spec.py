"""Compiler IR spec - a compiled template ready to be rendered as a module."""

from dataclasses import dataclass
from typing import Optional


DEFAULT_HEADER = "Generated by tplc. Do not edit."


@dataclass
class CompiledTemplate:
    """A compiled template expression plus what the module wrapper needs."""

    expression: str  # compiled Python expression
    runtime: str = "runtime"  # parameter name the expression refers to
    entrypoint: str = "render"  # name of the generated function
    source: Optional[str] = None  # e.g., "templates/page.yaml"
    header: str = DEFAULT_HEADER
