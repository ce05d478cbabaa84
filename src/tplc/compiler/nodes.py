"""Expression nodes - the compiled IR of a template.

Every node compiles to a single Python expression. Constructs that need
statements in other languages (blocks, branches, loops) become lambdas that
are invoked in place, so any node can be nested as an argument of any other:

    Block([String("a"), String("b")]).compile()

    (lambda: (
      "a",
      "b",
    )[-1])()

Generated code only touches the runtime through the names in `RuntimeNames`.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from tplc.config import DEFAULT_NAMES, RuntimeNames
from tplc.errors import UNKNOWN_LINE, CompileError

INDENTATION_PREFIX = "  "

# Locals bound by loop lambdas. The runtime name may not start with "_",
# so these never shadow it.
ITEMS_LOCAL = "_items"
INDEX_LOCAL = "_i"
RESULT_LOCAL = "_r"

# UTF-8 source cannot hold lone surrogates, so they are written as escapes.
SURROGATE = re.compile("[\ud800-\udfff]")

Token = Union[str, Sequence["Token"]]


def indent_code(code: str, prefix: str = INDENTATION_PREFIX) -> str:
    """Add one level of indentation to every line of code."""
    return "\n".join(prefix + line for line in code.split("\n"))


class Expression(ABC):
    """Base class for template expressions."""

    @abstractmethod
    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        """Compile this expression to Python source.

        Args:
            names: Identifiers used to reach the runtime.

        Returns:
            A Python expression evaluating to the template value.
        """
        pass


@dataclass(frozen=True)
class String(Expression):
    """A literal string."""

    value: str

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        literal = json.dumps(self.value, ensure_ascii=False)
        return SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", literal)


@dataclass(frozen=True)
class Command(Expression):
    """A call into the runtime command table."""

    line_number: int
    name: Expression
    arguments: Tuple[Expression, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @classmethod
    def from_tokens(
        cls, tokens: Sequence[Token], line_number: int = UNKNOWN_LINE
    ) -> "Command":
        """Build a command from its name token followed by argument tokens."""
        if len(tokens) == 0:
            raise CompileError("empty command cannot be compiled", line_number)

        name, *arguments = [token_to_expression(t, line_number) for t in tokens]
        return cls(line_number=line_number, name=name, arguments=tuple(arguments))

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        args = "".join(f", {arg.compile(names)}" for arg in self.arguments)
        return (
            f"{names.command_table}[{self.name.compile(names)}]"
            f"({self.line_number}{args})"
        )


@dataclass(frozen=True)
class Block(Expression):
    """A sequence of expressions whose value is the value of the last one."""

    expressions: Tuple[Expression, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "expressions", tuple(self.expressions))
        if not self.expressions:
            raise CompileError("empty block cannot be compiled")

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        lines = [indent_code(expr.compile(names) + ",") for expr in self.expressions]
        return "(lambda: (\n" + "\n".join(lines) + "\n)[-1])()"


@dataclass(frozen=True)
class Condition(Expression):
    """A boolean test over zero or more operands.

    One operand tests for presence (the value is not empty), several operands
    test that all values are equal. `negated` inverts either test.
    """

    negated: bool
    operands: Tuple[Expression, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "operands", tuple(self.operands))

    @classmethod
    def from_tokens(
        cls,
        tokens: Sequence[Token],
        negation_marker: str = "not",
        line_number: int = UNKNOWN_LINE,
    ) -> "Condition":
        tokens = list(tokens)
        negated = bool(tokens) and tokens[0] == negation_marker
        if negated:
            tokens = tokens[1:]

        operands = tuple(token_to_expression(t, line_number) for t in tokens)
        return cls(negated=negated, operands=operands)

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        if not self.operands:
            return "False" if self.negated else "True"

        if len(self.operands) == 1:
            test = f"{names.is_empty_ref}({self.operands[0].compile(names)})"
            # a bare operand is true when present
            return test if self.negated else f"not {test}"

        values = ", ".join(op.compile(names) for op in self.operands)
        test = f"{names.are_all_equal_ref}({values})"
        return f"not {test}" if self.negated else test


@dataclass(frozen=True)
class If(Expression):
    """A chain of guarded branches; the first true condition wins.

    When no condition holds the value is None. There is no default branch,
    an always-true final condition serves as one.
    """

    conditions: Tuple[Expression, ...]
    branches: Tuple[Expression, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", tuple(self.conditions))
        object.__setattr__(self, "branches", tuple(self.branches))
        if len(self.conditions) != len(self.branches):
            raise CompileError(
                f"if has {len(self.conditions)} conditions "
                f"but {len(self.branches)} branches"
            )

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        lines = []
        for condition, branch in zip(self.conditions, self.branches):
            lines.append(
                indent_code(
                    f"{branch.compile(names)} if ({condition.compile(names)}) else"
                )
            )
        lines.append(indent_code("None"))
        return "(lambda: (\n" + "\n".join(lines) + "\n))()"


@dataclass(frozen=True)
class For(Expression):
    """Loop over the elements of a collection.

    The index (when `index` names a variable) is bound before the element
    (when `variable` names one). Each iteration replaces the result, so the
    value is the body's value on the last element, or "" for no elements.
    """

    line_number: int
    iterable: Expression
    body: Expression
    variable: Optional[Expression] = None
    index: Optional[Expression] = None

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        steps = []
        if self.index is not None:
            steps.append(
                f"{names.set_ref}({self.line_number}, "
                f"{self.index.compile(names)}, {INDEX_LOCAL}),"
            )
        if self.variable is not None:
            steps.append(
                f"{names.set_ref}({self.line_number}, "
                f"{self.variable.compile(names)}, {ITEMS_LOCAL}[{INDEX_LOCAL}]),"
            )
        steps.append(f"({RESULT_LOCAL} := {self.body.compile(names)}),")

        iteration = "if (\n" + indent_code("\n".join(steps)) + "\n) and False"
        loop = f"None\nfor {INDEX_LOCAL} in range(len({ITEMS_LOCAL}))\n{iteration}"
        collection = f"{names.elements_ref}({self.iterable.compile(names)})"
        return (
            f'(lambda {ITEMS_LOCAL}, {RESULT_LOCAL}="": [\n'
            + indent_code(loop)
            + f"\n] or {RESULT_LOCAL})({collection})"
        )


@dataclass(frozen=True)
class While(Expression):
    """Loop while a condition holds; the value is the last body value or ""."""

    condition: Expression
    body: Expression

    def compile(self, names: RuntimeNames = DEFAULT_NAMES) -> str:
        loop = (
            "None\n"
            f"for _ in iter(lambda: bool({self.condition.compile(names)}), False)\n"
            f"if ({RESULT_LOCAL} := {self.body.compile(names)}) and False"
        )
        return (
            f'(lambda {RESULT_LOCAL}="": [\n'
            + indent_code(loop)
            + f"\n] or {RESULT_LOCAL})()"
        )


def token_to_expression(
    token: Union[Token, Expression], line_number: int = UNKNOWN_LINE
) -> Expression:
    """Turn a raw token into a String or Command expression.

    Tokens are strings or sequences of tokens. Expressions pass through
    unchanged.
    """
    if isinstance(token, str):
        return String(token)
    if isinstance(token, Expression):
        return token
    if isinstance(token, (list, tuple)):
        return Command.from_tokens(token, line_number)

    raise CompileError(
        f"token must be a string or a list, got {type(token).__name__}", line_number
    )
