"""
modscope CLI - Entry point.

Commands:
- expand: print a script's source after keyword rewriting
- run: compile and run a script, printing its result
"""

from __future__ import annotations

import platform
from pathlib import Path

import typer
from rich.console import Console

from ._version import get_version
from .config import ModscopeConfig, resolve_config
from .core.errors import ModscopeError
from .host import compile_source, run_source

app = typer.Typer(
    help="modscope – module keyword rewriting for brace-delimited scripts",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        console.print(f"modscope {get_version()}")
        console.print(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """modscope command line."""


def _load(script: Path, config_path: Path | None) -> tuple[str, ModscopeConfig]:
    if not script.is_file():
        err_console.print(f"No such script: {script}", style="red", markup=False)
        raise typer.Exit(code=1)
    try:
        config = resolve_config(config_path, script)
    except ModscopeError as e:
        err_console.print(str(e), style="red", markup=False)
        raise typer.Exit(code=1)
    config.logging.apply()
    return script.read_text(encoding="utf-8"), config


@app.command()
def expand(
    script: Path = typer.Argument(..., help="Script to rewrite"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="modscope.toml to use instead of the nearest one"
    ),
) -> None:
    """Print the script after every declaration has been rewritten."""
    text, config = _load(script, config_path)
    try:
        compiled = compile_source(
            text, file=script, package=config.package, prelude=config.prelude()
        )
    except ModscopeError as e:
        err_console.print(str(e), style="red", markup=False)
        raise typer.Exit(code=1)
    console.print(compiled.source, markup=False, highlight=False, soft_wrap=True)


@app.command()
def run(
    script: Path = typer.Argument(..., help="Script to run"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="modscope.toml to use instead of the nearest one"
    ),
) -> None:
    """Compile and run the script, printing its result."""
    text, config = _load(script, config_path)
    try:
        result = run_source(
            text, file=script, package=config.package, prelude=config.prelude()
        )
    except ModscopeError as e:
        err_console.print(str(e), style="red", markup=False)
        raise typer.Exit(code=1)
    console.print(repr(result), markup=False, highlight=False, soft_wrap=True)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main()
