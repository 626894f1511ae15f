"""``logtree rotating-demo`` — write records through a date-based rotating file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from logtree.config import config
from logtree.models.levels import Level
from logtree.models.records import Record
from logtree.routing.dispatcher import Dispatch
from logtree.routing.sinks.rotating import date_based

console = Console()


def rotating_cmd(
    prefix: Path = typer.Option(
        Path("program."),
        "--prefix",
        "-p",
        help="File name prefix; the formatted time suffix is appended directly.",
    ),
    suffix: str = typer.Option(
        None,
        "--suffix",
        "-s",
        help="strftime suffix (default: LOGTREE_ROTATE_SUFFIX).",
    ),
    utc: Optional[bool] = typer.Option(
        None,
        "--utc/--local",
        help="Format the suffix in UTC or local time (default: LOGTREE_UTC_TIME).",
    ),
    size_limit: int = typer.Option(
        None,
        "--size-limit",
        min=1,
        help="Roll to a numbered file once the current one reaches this many bytes.",
    ),
    count: int = typer.Option(5, "--count", "-n", min=1, help="Records to write."),
) -> None:
    """Log COUNT records through a rotating file sink and report the file used."""
    sink = date_based(
        prefix,
        suffix or config.rotate_suffix,
        line_sep=config.line_sep,
        utc_time=config.utc_time if utc is None else utc,
        size_limit=size_limit,
    )
    _, tree = Dispatch().level(Level.INFO).chain(sink).into_log()

    for i in range(count):
        tree.log(Record(level=Level.INFO, target="logtree::rotating", msg="record %d", args=(i,)))

    path = sink.current_path
    sink.close()

    if path is None:
        console.print("[bold red]No log file could be opened.[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]Wrote {count} records[/bold green] to [cyan]{path}[/cyan]")
