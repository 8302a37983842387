"""Schema envelope commands for the erdiagram CLI."""

from pathlib import Path
from typing import Optional

import typer

from erdiagram.cli.utils import console, load_diagram, read_text, write_output
from erdiagram.schema import (
    CURRENT_SCHEMA_VERSION,
    MIN_SUPPORTED_SCHEMA_VERSION,
    PayloadKind,
    classify,
    encode_json,
)

app = typer.Typer(help="Schema envelope commands", invoke_without_command=True)


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def migrate(
    path: Path = typer.Argument(..., help="Envelope or legacy diagram JSON file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the migrated envelope here instead of stdout"
    ),
):
    """Re-encode a diagram at the current schema version."""
    diagram = load_diagram(path)
    write_output(encode_json(diagram), output)


@app.command()
def inspect(path: Path = typer.Argument(..., help="File to inspect")):
    """Show how a file would be classified by the decoder."""
    kind, version, payload = classify(read_text(path))

    console.print(f"\n[bold]{path.name}[/bold]")
    console.print(f"Format: {kind.value}")
    if kind is PayloadKind.INVALID:
        console.print("[yellow]Not diagram data[/yellow]")
        raise typer.Exit(1)

    console.print(f"Schema version: {version}")
    if version > CURRENT_SCHEMA_VERSION:
        console.print("[yellow]Newer than this release[/yellow]")
    elif version < MIN_SUPPORTED_SCHEMA_VERSION:
        console.print("[red]Older than the supported window[/red]")
    elif version < CURRENT_SCHEMA_VERSION:
        console.print(f"Migrates to: {CURRENT_SCHEMA_VERSION}")

    if isinstance(payload, dict):
        for key in ("tables", "relations", "memos"):
            items = payload.get(key)
            count = len(items) if isinstance(items, list) else "-"
            console.print(f"{key.capitalize()}: {count}")
