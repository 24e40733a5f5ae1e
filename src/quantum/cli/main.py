# src/quantum/cli/main.py

"""
CLI entrypoint.

Each invocation resolves settings, opens the store, runs one command and exits.
QuantumError subclasses become a message on stderr and exit code 1; usage errors
also print the command help.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from ..errors import QuantumError, UsageError
from ..tasks import task_filters
from ..tasks.task_filters import TaskFilter
from ..tasks.task_store import parse_hours
from .bootstrap import AppState, create_initial_state
from .render import inprogress_table, tasks_table

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="quantum",
    help="Simple command line application for tracking time spent on tasks.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


@app.callback()
def _root(
    ctx: typer.Context,
    data_dir: Path | None = typer.Option(
        None,
        "--data-dir",
        help="Store directory (default: $QUANTUM_DATA_DIR or ~/.quantum).",
    ),
) -> None:
    """Simple time tracking."""
    opts = ctx.ensure_object(dict)
    if data_dir is not None:
        opts["data_dir"] = data_dir


def _state(ctx: typer.Context) -> AppState:
    opts = ctx.ensure_object(dict)
    if "state" not in opts:
        opts["state"] = create_initial_state(data_dir=opts.get("data_dir"))
    return opts["state"]


@contextlib.contextmanager
def _reported(ctx: typer.Context, command: str) -> Iterator[None]:
    try:
        yield
    except UsageError as e:
        logger.debug("Usage error in %s: %s", command, e)
        err_console.print(f"Incorrect usage of {command}: {e}", markup=False, highlight=False)
        # Typer's rich formatter prints the help itself and returns "".
        help_text = ctx.get_help()
        if help_text:
            typer.echo(help_text)
        raise typer.Exit(code=e.exit_code)
    except QuantumError as e:
        logger.debug("%s failed: %s", command, e, exc_info=True)
        err_console.print(f"Error: {e}", style="red", markup=False, highlight=False)
        raise typer.Exit(code=e.exit_code)


# ---- commands ----


def add(
    ctx: typer.Context,
    task: str | None = typer.Argument(None, metavar="TASK", help="Task name (mandatory)."),
    hours: str | None = typer.Argument(None, metavar="HOURS", help="Hours spent (mandatory)."),
    ref: str = typer.Argument("", metavar="[REF]", help="Reference tag (optional)."),
) -> None:
    """Add a task."""
    with _reported(ctx, "add"):
        if not task or not hours:
            raise UsageError("TASK and HOURS are required", command="add")
        # Validate before touching the store so a bad call persists nothing.
        value = parse_hours(hours)
        created = _state(ctx).task_store.add_task(task, value, ref)
        console.print(
            f"[green]✓[/green] Added [bold]{escape(created.name)}[/bold] "
            f"({created.hours:.2f}h) [dim]{created.uid}[/dim]"
        )


def start(
    ctx: typer.Context,
    task: str | None = typer.Argument(None, metavar="TASK", help="Task name."),
    ref: str = typer.Argument("", metavar="[REF]", help="Reference tag (optional)."),
) -> None:
    """Start a task."""
    with _reported(ctx, "start"):
        if not task:
            raise UsageError("TASK is required", command="start")
        entry = _state(ctx).task_store.start_task(task, ref)
        console.print(f"[green]✓[/green] Started tracking: [bold]{escape(entry.name)}[/bold]")


def stop(
    ctx: typer.Context,
    task: str | None = typer.Argument(None, metavar="TASK", help="Task name."),
) -> None:
    """Stop a task."""
    with _reported(ctx, "stop"):
        if not task:
            raise UsageError("TASK is required", command="stop")
        done = _state(ctx).task_store.stop_task(task)
        console.print(
            f"[green]✓[/green] Stopped: [bold]{escape(done.name)}[/bold] "
            f"({done.hours:.2f}h) [dim]{done.uid}[/dim]"
        )


def _list_filter(args: list[str]) -> TaskFilter:
    if not args:
        return task_filters.within_days()

    mode, values = args[0], args[1:]
    if mode in ("month", "year"):
        if values:
            raise UsageError(f"'{mode}' takes no values", command="list")
        return task_filters.within_month() if mode == "month" else task_filters.within_year()
    if mode in ("task", "ref"):
        if not values:
            raise UsageError(f"'{mode}' needs at least one value", command="list")
        return task_filters.name_in(values) if mode == "task" else task_filters.ref_in(values)
    if values:
        raise UsageError(f"Unexpected arguments: {' '.join(values)}", command="list")
    return task_filters.within_days(task_filters.parse_days(mode))


def list_(
    ctx: typer.Context,
    args: list[str] | None = typer.Argument(
        None,
        metavar="[DAYS | month | year | task VALUES... | ref VALUES... | inprogress]",
        help="Time filter (default: last 7 days) or data filter.",
    ),
) -> None:
    """List tasks."""
    with _reported(ctx, "list"):
        args = list(args or [])
        if args and args[0] == "inprogress":
            if len(args) > 1:
                raise UsageError("'inprogress' takes no values", command="list")
            console.print(inprogress_table(_state(ctx).task_store.list_inprogress()))
            return
        predicate = _list_filter(args)
        console.print(tasks_table(_state(ctx).task_store.filter_tasks(predicate)))


def delete(
    ctx: typer.Context,
    uids: list[str] | None = typer.Argument(None, metavar="UID... | all", help="Task uids, or 'all'."),
) -> None:
    """Delete tasks by uid, or all of them."""
    with _reported(ctx, "delete"):
        uids = list(uids or [])
        if not uids:
            raise UsageError("At least one UID (or 'all') is required", command="delete")
        store = _state(ctx).task_store
        if uids == ["all"]:
            store.delete_all_tasks()
            console.print("[green]✓[/green] Deleted all tasks")
            return
        n = store.delete_tasks(uids)
        console.print(f"[green]✓[/green] Deleted {n} task(s)")


app.command("add")(add)
app.command("a", hidden=True)(add)
app.command("start")(start)
app.command("stop")(stop)
app.command("list")(list_)
app.command("l", hidden=True)(list_)
app.command("delete")(delete)
app.command("d", hidden=True)(delete)


def main() -> None:
    # Typer exits 2 on parse errors; every failure of this tool exits 1.
    try:
        app()
    except SystemExit as e:
        sys.exit(0 if e.code in (0, None) else 1)


if __name__ == "__main__":
    main()
