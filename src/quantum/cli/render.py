# src/quantum/cli/render.py

from __future__ import annotations

from datetime import datetime

from rich.table import Table

from ..tasks.task_models import DISPLAY_FORMAT, InProgress, TaskListing


def _fmt_hours(hours: float) -> str:
    return f"{hours:.2f}"


def _fmt_local(dt: datetime) -> str:
    return dt.astimezone().strftime(DISPLAY_FORMAT)


def tasks_table(listing: TaskListing) -> Table:
    """Task/Hours/Ref/Date/UID table with a total-hours footer."""
    table = Table(show_footer=True)
    table.add_column("Task", style="bold")
    table.add_column("Hours", justify="right")
    table.add_column("Ref", style="cyan")
    table.add_column("Date", style="dim", no_wrap=True, footer="Total hours")
    table.add_column("UID", no_wrap=True, footer=_fmt_hours(listing.total_hours))

    for task in listing.tasks:
        table.add_row(
            task.name,
            _fmt_hours(task.hours),
            task.ref,
            _fmt_local(task.date),
            task.uid,
        )
    return table


def inprogress_table(entries: list[InProgress]) -> Table:
    table = Table()
    table.add_column("Task", style="bold")
    table.add_column("Ref", style="cyan")
    table.add_column("Started", style="dim", no_wrap=True)

    for entry in entries:
        table.add_row(entry.name, entry.ref, _fmt_local(entry.start_time))
    return table
