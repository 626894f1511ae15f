"""Main Typer application — imports and registers all CLI commands.

Entry point: ``logtree`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from logtree.cli.commands.demo import demo_cmd
from logtree.cli.commands.rotating import rotating_cmd

app = typer.Typer(
    name="logtree",
    help="logtree: runtime-configurable log routing trees.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="demo", help="Route sample records through a stdout and a file branch.")(demo_cmd)
app.command(name="rotating-demo", help="Write records through a date-based rotating file.")(
    rotating_cmd
)


@app.command(name="levels", help="List level names and their numeric values.")
def levels_cmd() -> None:
    """Print the level filters a dispatch node can be configured with."""
    from rich.console import Console
    from rich.table import Table

    from logtree.models.levels import LevelFilter

    table = Table(title="Level filters")
    table.add_column("Name", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Lets through")

    for level in LevelFilter:
        passing = [name for name in LevelFilter.__members__ if name != "OFF" and LevelFilter[name] >= level]
        table.add_row(level.name, str(int(level)), ", ".join(passing) or "[dim]nothing[/dim]")

    Console().print(table)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
