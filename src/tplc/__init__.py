"""tplc - compiles template expression trees to Python."""

from tplc._version import __version__
from tplc.compiler import (
    Block,
    Command,
    CompiledTemplate,
    Compiler,
    Condition,
    Expression,
    For,
    If,
    Renderer,
    String,
    While,
    indent_code,
    token_to_expression,
)
from tplc.config import CompilerConfig, RuntimeNames, load_config
from tplc.errors import UNKNOWN_LINE, CompileError, ConfigError, TplcError

__all__ = [
    "__version__",
    "Block",
    "Command",
    "CompiledTemplate",
    "Compiler",
    "Condition",
    "Expression",
    "For",
    "If",
    "Renderer",
    "String",
    "While",
    "indent_code",
    "token_to_expression",
    "CompilerConfig",
    "RuntimeNames",
    "load_config",
    "UNKNOWN_LINE",
    "CompileError",
    "ConfigError",
    "TplcError",
]
