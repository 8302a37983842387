"""Utility functions for CLI commands."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from erdiagram.config import Config, ProjectConfig
from erdiagram.models import ERDiagram
from erdiagram.schema import VersionError, decode

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich, at DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def get_config() -> ProjectConfig:
    """Load project config from the current directory, falling back to defaults."""
    return Config().load_or_default()


def read_text(path: Path) -> str:
    """Read an input file, exiting with a message if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]❌ Cannot read {path}: {e}[/red]")
        raise typer.Exit(1)


def write_output(text: str, output: Optional[Path]) -> None:
    """Write to ``output`` if given, otherwise to stdout."""
    if output is None:
        typer.echo(text)
        return
    output.write_text(text if text.endswith("\n") else text + "\n", encoding="utf-8")
    err_console.print(f"[green]✅ Wrote {output}[/green]")


def load_diagram(path: Path) -> ERDiagram:
    """Decode a persisted diagram file, exiting on version or shape errors."""
    try:
        diagram = decode(read_text(path))
    except VersionError as e:
        err_console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    if diagram is None:
        err_console.print(f"[red]❌ {path} does not contain diagram data[/red]")
        raise typer.Exit(1)
    return diagram
