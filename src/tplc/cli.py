"""tplc CLI Main Entry Point

Compiles a template tree document (YAML or JSON) into a Python module.

Usage:
    tplc tree.yaml                 # Print the compiled module
    tplc tree.yaml -o page.py      # Write the compiled module to a file
    tplc tree.yaml --expression    # Print only the compiled expression
    tplc tree.yaml -c tplc.yaml    # Use a config file for runtime names
    tplc -v                        # Show version
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from tplc._version import __version__
from tplc.compiler import Compiler, Renderer
from tplc.config import CompilerConfig, load_config
from tplc.errors import TplcError
from tplc.tree import Parser

log = logging.getLogger(__name__)

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the tplc CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (--verbose): INFO level
    - Debug (TPLC_DEBUG=1): DEBUG level - shows every compile step
    """
    if os.environ.get("TPLC_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=bool(os.environ.get("TPLC_DEBUG")),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    tplc_logger = logging.getLogger("tplc")
    tplc_logger.setLevel(level)
    tplc_logger.handlers = [handler]
    tplc_logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


typer_app = typer.Typer()


@typer_app.command()
def cli(
    tree: Optional[Path] = typer.Argument(
        None, help="Path to a tree document (YAML or JSON)."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the compiled module to a file."
    ),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to a tplc config file."
    ),
    expression: bool = typer.Option(
        False, "--expression", help="Emit only the compiled expression."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress logs."),
    version: bool = typer.Option(
        False, "-v", "--version", help="Show version and exit."
    ),
) -> None:
    """Compile a template tree document to Python."""
    if version:
        typer.echo(f"tplc {__version__}")
        raise typer.Exit()

    setup_logging(verbose)

    if tree is None:
        exit_with_error("No tree document given.")

    try:
        config = load_config(config_path) if config_path else CompilerConfig()
        root = Parser(config).parse_file(str(tree))

        compiler = Compiler(config)
        if expression:
            code = compiler.compile_expression(root) + "\n"
        else:
            code = Renderer().render(compiler.compile(root, source=str(tree)))
    except (TplcError, OSError, ValidationError) as exc:
        exit_with_error(str(exc))

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(code, encoding="utf-8")
        log.info("wrote compiled module to %s", output)
    else:
        typer.echo(code, nl=False)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
