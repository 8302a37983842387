"""DSL commands for the erdiagram CLI."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table as RichTable

from erdiagram.cli.utils import (
    console,
    err_console,
    get_config,
    load_diagram,
    read_text,
    write_output,
)
from erdiagram.dsl import DSLSyntaxError, compute_levels, parse_dsl, serialize_dsl
from erdiagram.models import ERDiagram
from erdiagram.schema import encode_json

app = typer.Typer(help="DSL conversion commands", invoke_without_command=True)


@app.callback()
def callback(ctx: typer.Context):
    """Show help when no subcommand is provided."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


def parse_file(path: Path) -> ERDiagram:
    """Parse a DSL file using the project's layout settings."""
    config = get_config()
    try:
        return parse_dsl(read_text(path), layout=config.layout)
    except DSLSyntaxError as e:
        err_console.print(f"[red]❌ {path}: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def parse(
    path: Path = typer.Argument(..., help="DSL file to parse"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the envelope JSON here instead of stdout"
    ),
):
    """Parse a DSL file into a versioned envelope.

    Examples:
        erd dsl parse schema.erd
        erd dsl parse schema.erd -o diagram.json
    """
    diagram = parse_file(path)
    write_output(encode_json(diagram), output)


@app.command(name="export")
def export_dsl(
    path: Path = typer.Argument(..., help="Envelope or legacy diagram JSON file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the DSL here instead of stdout"
    ),
    header: Optional[bool] = typer.Option(
        None, "--header/--no-header", help="Include the comment header"
    ),
):
    """Export a persisted diagram as DSL text."""
    diagram = load_diagram(path)
    include_header = get_config().dsl.include_header if header is None else header
    write_output(serialize_dsl(diagram, include_header=include_header), output)


@app.command()
def check(path: Path = typer.Argument(..., help="DSL file to check")):
    """Parse a DSL file and summarize its tables."""
    diagram = parse_file(path)
    levels = compute_levels(diagram.tables, diagram.relations)

    table = RichTable(title=f"Tables in {path.name}", title_justify="left")
    table.add_column("Name", style="cyan")
    table.add_column("Columns", style="green")
    table.add_column("Key", style="yellow")
    table.add_column("Level", style="magenta")

    for tbl in diagram.tables:
        key = next((c.name for c in tbl.columns if c.is_key), "-")
        table.add_row(tbl.name, str(len(tbl.columns)), key, str(levels[tbl.id]))

    console.print(table)
    console.print(
        f"[green]✅ {len(diagram.tables)} tables, {len(diagram.relations)} relations, "
        f"{len(diagram.memos)} memos[/green]"
    )
