"""Shared fixtures: a small in-memory runtime for executing compiled code."""

import logging
from typing import Any, Dict, List, Tuple

import pytest

from tplc.compiler import Expression
from tplc.config import DEFAULT_NAMES, RuntimeNames


class CommandTable(dict):
    """Command table with the variable binding collaborator."""

    def __init__(self, runtime: "FakeRuntime"):
        super().__init__()
        self.runtime = runtime

    def set(self, line: int, name: str, value: Any) -> str:
        self.runtime.bindings.append((name, value))
        self.runtime.variables[name] = value
        return ""


class FakeRuntime:
    def __init__(self) -> None:
        self.variables: Dict[str, Any] = {}
        self.bindings: List[Tuple[str, Any]] = []
        self.calls: List[Tuple[str, int, tuple]] = []
        self.commands = CommandTable(self)

        self.register("get", lambda name: str(self.variables.get(name, "")))
        self.register("echo", lambda *args: "".join(args))
        self.register("list", lambda *args: list(args))
        self.register("greet", lambda name: f"Hello, {name}!")
        self.register("log", lambda value: value)
        self.register("pop", self._pop)
        self.register("remaining", lambda: self.variables.get("stack", ""))

    def register(self, name: str, fn) -> None:
        def command(line: int, *args: Any) -> Any:
            self.calls.append((name, line, args))
            return fn(*args)

        self.commands[name] = command

    def _pop(self) -> str:
        stack = self.variables["stack"]
        self.variables["stack"] = stack[:-1]
        return f"popped {stack[-1]}"

    def is_empty(self, value: Any) -> bool:
        return value is None or len(value) == 0

    def are_all_equal(self, *values: Any) -> bool:
        return all(v == values[0] for v in values)

    def elements(self, value: Any) -> list:
        return list(value)


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def evaluate(runtime):
    """Compile an expression and evaluate it against the fake runtime."""

    def _evaluate(expr: Expression, names: RuntimeNames = DEFAULT_NAMES) -> Any:
        code = expr.compile(names)
        return eval(code, {names.runtime: runtime})

    return _evaluate


@pytest.fixture(autouse=True)
def reset_tplc_logger():
    """The CLI installs its own handler; undo it so caplog keeps working."""
    yield
    logger = logging.getLogger("tplc")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
