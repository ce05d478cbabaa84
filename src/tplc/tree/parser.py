"""Tree documents - build expression trees from YAML or JSON.

A tree document describes an already-tokenized template:

    block:
      - command: [set, name, World]
        line: 1
      - if:
          - when: [[get, name]]
            then: [greet, [get, name]]
        line: 2
      - for: [list, a, b, c]
        as: item
        index: i
        do: [get, item]
        line: 3

Strings are literals and lists are commands. Mappings carry exactly one
node kind key plus an optional `line`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from tplc.compiler.nodes import (
    Block,
    Command,
    Condition,
    Expression,
    For,
    If,
    While,
    token_to_expression,
)
from tplc.config import CompilerConfig
from tplc.errors import UNKNOWN_LINE, CompileError

log = logging.getLogger(__name__)

NODE_KINDS = ("command", "block", "if", "for", "while")

ALLOWED_KEYS = {
    "command": {"command", "line"},
    "block": {"block", "line"},
    "if": {"if", "line"},
    "for": {"for", "do", "as", "index", "line"},
    "while": {"while", "do", "line"},
}
CLAUSE_KEYS = {"when", "then", "line"}


class Parser:
    """Builds Expression trees from tree documents."""

    _file_loader: Callable[[str], str]

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        file_loader: Callable[[str], str] | None = None,
    ):
        self.config = config or CompilerConfig()
        self._file_loader = file_loader or read_file

    def parse_file(self, filepath: str) -> Expression:
        source = self._file_loader(filepath)
        log.debug("loaded tree document %s", filepath)
        return self.parse(source)

    def parse(self, source: str) -> Expression:
        data = parse_yaml(source)
        if data is None:
            raise CompileError("tree document is empty")
        return self.build(data)

    def build(self, node: Any, line: int = UNKNOWN_LINE) -> Expression:
        """Build an Expression from a decoded document node."""
        if isinstance(node, (str, int, float, list)) and not isinstance(node, bool):
            return token_to_expression(_normalize(node), line)
        if not isinstance(node, dict):
            raise CompileError(
                f"node must be a string, list or mapping, got {type(node).__name__}",
                line,
            )

        line = _line_of(node, line)
        kinds = [k for k in NODE_KINDS if k in node]
        if len(kinds) != 1:
            raise CompileError(
                f"node must have exactly one of {', '.join(NODE_KINDS)}", line
            )

        kind = kinds[0]
        _check_keys(node, ALLOWED_KEYS[kind], kind, line)
        return getattr(self, f"_build_{kind}")(node, line)

    def _build_command(self, node: dict, line: int) -> Expression:
        tokens = node["command"]
        if not isinstance(tokens, list):
            raise CompileError("'command' must be a list of tokens", line)
        return Command.from_tokens(_normalize(tokens), line)

    def _build_block(self, node: dict, line: int) -> Expression:
        items = node["block"]
        if not isinstance(items, list):
            raise CompileError("'block' must be a list of nodes", line)
        if not items:
            raise CompileError("empty block cannot be compiled", line)
        return Block(tuple(self.build(item, line) for item in items))

    def _build_if(self, node: dict, line: int) -> Expression:
        clauses = node["if"]
        if not isinstance(clauses, list):
            raise CompileError("'if' must be a list of when/then clauses", line)

        conditions, branches = [], []
        for clause in clauses:
            if not isinstance(clause, dict) or "then" not in clause:
                raise CompileError("if clause must be a mapping with 'then'", line)
            clause_line = _line_of(clause, line)
            _check_keys(clause, CLAUSE_KEYS, "if clause", clause_line)
            conditions.append(self._condition(clause.get("when", []), clause_line))
            branches.append(self.build(clause["then"], clause_line))

        return If(tuple(conditions), tuple(branches))

    def _build_for(self, node: dict, line: int) -> Expression:
        if "do" not in node:
            raise CompileError("'for' requires a 'do' body", line)

        variable = node.get("as")
        index = node.get("index")
        return For(
            line_number=line,
            iterable=self.build(node["for"], line),
            body=self.build(node["do"], line),
            variable=None if variable is None else self.build(variable, line),
            index=None if index is None else self.build(index, line),
        )

    def _build_while(self, node: dict, line: int) -> Expression:
        if "do" not in node:
            raise CompileError("'while' requires a 'do' body", line)
        return While(
            condition=self._condition(node["while"], line),
            body=self.build(node["do"], line),
        )

    def _condition(self, tokens: Any, line: int) -> Condition:
        if tokens is None:
            tokens = []
        if not isinstance(tokens, list):
            raise CompileError("condition must be a list of tokens", line)
        return Condition.from_tokens(
            _normalize(tokens), self.config.negation_marker, line
        )


def _normalize(token: Any) -> Any:
    """Turn YAML numbers into string tokens."""
    if isinstance(token, list):
        return [_normalize(t) for t in token]
    if isinstance(token, (int, float)) and not isinstance(token, bool):
        return str(token)
    return token


def _check_keys(node: dict, allowed: set, kind: str, line: int) -> None:
    unknown = sorted(str(key) for key in node if key not in allowed)
    if unknown:
        raise CompileError(f"unknown keys for {kind}: {', '.join(unknown)}", line)


def _line_of(node: dict, default: int) -> int:
    line = node.get("line", default)
    if isinstance(line, bool) or not isinstance(line, int):
        raise CompileError(f"'line' must be an integer, got {line!r}", default)
    return line


def read_file(filepath: str) -> str:
    try:
        with open(filepath, "r", encoding="utf-8") as file:
            return file.read()
    except OSError as exc:
        raise FileNotFoundError(f"Could not read file: {filepath}") from exc


def parse_yaml(source: str) -> Any:
    import yaml
    from yaml import YAMLError

    if not isinstance(source, str):
        raise TypeError("`source` must be a string containing YAML")

    try:
        data = yaml.safe_load(source)
    except YAMLError as exc:
        raise CompileError(f"Failed to parse YAML: {exc}") from exc

    return data
