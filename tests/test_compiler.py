"""Tests for the compiler facade and module renderer."""

import logging

import pytest

from tplc.compiler import Block, Command, Compiler, Renderer, String
from tplc.config import CompilerConfig, RuntimeNames
from tplc.errors import CompileError


def _exec_module(source: str) -> dict:
    namespace: dict = {}
    exec(compile(source, "<tplc>", "exec"), namespace)
    return namespace


def test_compile_expression_uses_config_names():
    config = CompilerConfig(names=RuntimeNames(runtime="ctx"))
    code = Compiler(config).compile_expression(Command.from_tokens(["a"], 2))
    assert code == 'ctx.commands["a"](2)'


def test_compile_builds_template_ir():
    compiler = Compiler(CompilerConfig(entrypoint="page"))
    compiled = compiler.compile(String("hi"), source="page.yaml")

    assert compiled.expression == '"hi"'
    assert compiled.entrypoint == "page"
    assert compiled.runtime == "runtime"
    assert compiled.source == "page.yaml"


def test_compile_logs_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="tplc"):
        Compiler().compile_expression(Block([String("a")]))
    assert "compiling Block expression" in caplog.text


def test_rendered_module_defines_entrypoint(runtime):
    tree = Block(
        [
            Command.from_tokens(["log", "first"], 1),
            Command.from_tokens(["greet", "World"], 2),
        ]
    )
    source = Renderer().render(Compiler().compile(tree, source="hello.yaml"))

    assert source.startswith('"""Generated by tplc. Do not edit.')
    assert "Source: hello.yaml" in source
    assert "def render(runtime):" in source

    namespace = _exec_module(source)
    assert namespace["render"](runtime) == "Hello, World!"
    assert [call[0] for call in runtime.calls] == ["log", "greet"]


def test_rendered_module_with_custom_names(runtime):
    config = CompilerConfig(names=RuntimeNames(runtime="ctx"), entrypoint="page")
    source = Renderer().render(Compiler(config).compile(String("static")))

    assert "Source:" not in source
    assert "def page(ctx):" in source
    assert _exec_module(source)["page"](runtime) == "static"


def test_too_deep_tree_raises_compile_error():
    tree = String("x")
    for _ in range(150):
        tree = Block([tree])

    with pytest.raises(CompileError) as excinfo:
        Compiler().compile_expression(tree)
    assert "cannot be parsed" in excinfo.value.message


def test_nested_tree_within_limit_compiles(runtime):
    tree = String("x")
    for _ in range(20):
        tree = Block([tree])

    code = Compiler().compile_expression(tree)
    assert eval(code, {"runtime": runtime}) == "x"
