"""Main CLI entry point for erdiagram."""

import typer
from typing import Optional
from pathlib import Path

from erdiagram.cli.commands import dsl, schema
from erdiagram.cli.utils import configure_logging

app = typer.Typer(
    name="erd",
    help="erdiagram - text DSL and versioned persistence for ER diagrams",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """
    erdiagram - text DSL and versioned persistence for ER diagrams
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit(0)


app.add_typer(dsl.app, name="dsl", help="DSL conversion commands")
app.add_typer(schema.app, name="schema", help="Schema envelope commands")


@app.command()
def init(
    path: Optional[Path] = typer.Argument(
        None, help="Directory to initialize project in (default: current directory)"
    ),
):
    """Initialize a project with a default .erdiagram/config.toml."""
    from erdiagram.config import Config

    project_path = path or Path.cwd()

    try:
        Config(project_path).init_project()
        typer.secho(
            f"✅ Initialized erdiagram project in {project_path}", fg=typer.colors.GREEN
        )
    except FileExistsError:
        typer.secho(f"❌ Project already exists in {project_path}", fg=typer.colors.RED)
        raise typer.Exit(1)


@app.command(name="import")
def import_file(
    path: Path = typer.Argument(..., help="DSL or JSON file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the envelope JSON here instead of stdout"
    ),
):
    """Import DSL or JSON, detecting the format, and emit a current envelope."""
    from erdiagram.cli.utils import err_console, load_diagram, read_text, write_output
    from erdiagram.dsl import is_dsl_format, is_json_format
    from erdiagram.schema import encode_json

    text = read_text(path)
    if is_dsl_format(text):
        diagram = dsl.parse_file(path)
    elif is_json_format(text):
        diagram = load_diagram(path)
    else:
        err_console.print(f"[red]❌ {path} is neither DSL nor JSON[/red]")
        raise typer.Exit(1)

    write_output(encode_json(diagram), output)


@app.command()
def version():
    """Show erdiagram version."""
    from erdiagram import __version__

    typer.echo(f"erdiagram version {__version__}")


@app.command()
def status():
    """Show the effective configuration and schema versions."""
    from erdiagram.cli.utils import get_config
    from erdiagram.config import Config
    from erdiagram.schema import CURRENT_SCHEMA_VERSION, MIN_SUPPORTED_SCHEMA_VERSION
    from rich.console import Console

    console = Console()

    try:
        config = Config()
        config_data = get_config()

        console.print("\n[bold]erdiagram Status[/bold]")
        if config.exists:
            console.print(f"Project: {config.project_dir}")
        else:
            console.print("Project: [dim]None (defaults)[/dim]")
        console.print(
            f"Schema version: {CURRENT_SCHEMA_VERSION} "
            f"(reads {MIN_SUPPORTED_SCHEMA_VERSION}-{CURRENT_SCHEMA_VERSION})"
        )
        console.print(f"Horizontal spacing: {config_data.layout.horizontal_spacing}")
        console.print(f"Vertical spacing: {config_data.layout.vertical_spacing}")
        console.print(f"DSL header: {config_data.dsl.include_header}")

    except Exception as e:
        console.print(f"[red]❌ Error: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
