"""tplc Compiler - lowers template expression trees to Python."""

from tplc.compiler.compiler import Compiler
from tplc.compiler.nodes import (
    Block,
    Command,
    Condition,
    Expression,
    For,
    If,
    String,
    While,
    indent_code,
    token_to_expression,
)
from tplc.compiler.renderer import Renderer
from tplc.compiler.spec import CompiledTemplate

__all__ = [
    "Compiler",
    "Renderer",
    "CompiledTemplate",
    "Expression",
    "String",
    "Command",
    "Block",
    "Condition",
    "If",
    "For",
    "While",
    "indent_code",
    "token_to_expression",
]
