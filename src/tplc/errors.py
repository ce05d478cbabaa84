"""tplc Exceptions

Errors raised while building and compiling template expression trees.
"""

from __future__ import annotations

UNKNOWN_LINE = -1


class TplcError(Exception):
    """Base exception for all tplc errors."""

    pass


class CompileError(TplcError):
    """Raised when an expression tree cannot be compiled."""

    def __init__(self, message: str, line: int = UNKNOWN_LINE) -> None:
        self.message = message
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


class ConfigError(TplcError):
    """Raised when a config file cannot be loaded."""

    pass
