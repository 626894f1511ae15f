"""``logtree demo`` — route a burst of sample records through a two-branch tree.

The tree mirrors a typical command-line program: everything at INFO and up
goes to stdout in a short format and to a log file with a full timestamp,
while a chatty dependency target is held back to WARN unless ``--verbose``
is given.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from logtree.config import config
from logtree.errors import InitError
from logtree.models.levels import Level
from logtree.models.records import Location, Record
from logtree.routing.dispatcher import Dispatch, FormatCallback
from logtree.routing.sinks.callback import call
from logtree.routing.sinks.writer import file, stdout

console = Console()

NOISY_TARGET = "overly-verbose-target"
DEMO_TARGET = "logtree::demo"


def _file_format(out: FormatCallback, message: str, record: Record) -> None:
    stamp = datetime.now().strftime("[%Y-%m-%d][%H:%M:%S]")
    out.finish(f"{stamp}[{record.target}][{record.level}] {message}")


def _stdout_format(out: FormatCallback, message: str, record: Record) -> None:
    stamp = datetime.now().strftime("%H:%M")
    if record.level <= Level.DEBUG and record.target == DEMO_TARGET:
        out.finish(f"---\nDEBUG: {stamp}: {message}\n---")
    else:
        out.finish(f"[{stamp}][{record.target}][{record.level}] {message}")


def demo_cmd(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Include DEBUG records and the noisy dependency's INFO records.",
    ),
    log_file: Path = typer.Option(
        None,
        "--log-file",
        "-f",
        help="File receiving the timestamped branch (default: LOGTREE_LOG_FILE or program.log).",
    ),
    sections: int = typer.Option(
        3,
        "--sections",
        "-n",
        min=1,
        help="Number of simulated work sections to log.",
    ),
) -> None:
    """Route sample records through a stdout branch and a file branch."""
    path = log_file or config.log_file or Path("program.log")

    base = Dispatch.from_config(config).level(Level.DEBUG if verbose else Level.INFO)
    if not verbose:
        base.level_for(NOISY_TARGET, Level.WARN)

    try:
        log_file_sink = file(path, config.line_sep)
    except InitError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc

    delivered: list[Record] = []
    file_branch = Dispatch().format(_file_format).chain(log_file_sink)
    stdout_branch = Dispatch().format(_stdout_format).chain(stdout(config.line_sep))
    min_level, tree = (
        base.chain(file_branch).chain(stdout_branch).chain(call(delivered.append)).into_log()
    )

    def emit(level: Level, target: str, msg: str, *args: object) -> None:
        tree.log(
            Record(
                level=level,
                target=target,
                msg=msg,
                args=args,
                location=Location(module_path=__name__, file=__file__),
            )
        )

    console.print(
        Panel(
            f"[bold]logtree demo[/bold]\n\n"
            f"Minimum level: [cyan]{min_level}[/cyan]  "
            f"File branch: [cyan]{path}[/cyan]",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    emit(Level.INFO, DEMO_TARGET, "MyProgram v0.0.1 starting up!")
    if verbose:
        emit(Level.INFO, DEMO_TARGET, "DEBUG output enabled.")
    emit(Level.INFO, NOISY_TARGET, "hey, another library here, we're starting.")

    for i in range(sections):
        emit(Level.INFO, DEMO_TARGET, "executing section: %d", i)
        emit(Level.DEBUG, DEMO_TARGET, "section %d 1/2 complete.", i)
        emit(Level.INFO, NOISY_TARGET, "completed operation.")
        emit(Level.INFO, DEMO_TARGET, "section %d completed!", i)

    emit(Level.WARN, NOISY_TARGET, "AHHH something's on fire.")
    emit(Level.INFO, DEMO_TARGET, "MyProgram operation completed, shutting down.")
    tree.flush()
    log_file_sink.close()

    console.print(
        Panel(
            "\n".join([
                "[bold green]Demo complete![/bold green]",
                "",
                f"[bold]Records delivered:[/bold] {len(delivered)}",
                f"[bold]Log file:[/bold]          {path}",
            ]),
            title="[bold]Summary[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
