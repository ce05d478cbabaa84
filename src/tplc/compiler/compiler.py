"""Compiler - transforms expression trees into CompiledTemplate IR."""

from __future__ import annotations

import logging
from typing import Optional

from tplc.compiler.nodes import Expression
from tplc.compiler.spec import CompiledTemplate
from tplc.config import CompilerConfig
from tplc.errors import CompileError

log = logging.getLogger(__name__)


class Compiler:
    """Compiles Expression trees to CompiledTemplate IR."""

    def __init__(self, config: Optional[CompilerConfig] = None):
        """Initialize compiler with an optional configuration.

        Args:
            config: Runtime names and module options. Defaults apply when None.
        """
        self.config = config or CompilerConfig()

    def compile(
        self, expression: Expression, source: Optional[str] = None
    ) -> CompiledTemplate:
        """Compile an expression tree into a CompiledTemplate IR.

        Args:
            expression: The root of the expression tree.
            source: Optional label of where the tree came from.

        Returns:
            CompiledTemplate ready for rendering to a module.
        """
        code = self.compile_expression(expression)
        return CompiledTemplate(
            expression=code,
            runtime=self.config.names.runtime,
            entrypoint=self.config.entrypoint,
            source=source,
        )

    def compile_expression(self, expression: Expression) -> str:
        """Compile an expression tree to a bare Python expression.

        The generated code is parsed, with the extra parentheses the module
        wrapper adds, before it is returned. Trees nested
        deeper than the interpreter can parse raise CompileError here rather
        than when the module is imported.
        """
        log.debug("compiling %s expression", type(expression).__name__)
        code = expression.compile(self.config.names)
        try:
            compile(f"(\n{code}\n)", "<tplc>", "eval")
        except (SyntaxError, RecursionError, MemoryError) as exc:
            message = getattr(exc, "msg", None) or type(exc).__name__
            raise CompileError(f"generated code cannot be parsed: {message}") from exc
        log.debug("compiled to %d lines", code.count("\n") + 1)
        return code
