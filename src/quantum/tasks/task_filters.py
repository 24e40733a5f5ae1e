# src/quantum/tasks/task_filters.py

"""
List predicates.

Time windows compare strictly: a task is kept only when its date is after the
cutoff, so a task stamped exactly at the cutoff is excluded.
"""

from __future__ import annotations

import calendar
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from .task_models import Task

TaskFilter = Callable[[Task], bool]

DEFAULT_DAYS = 7


def _wall_now() -> datetime:
    return datetime.now()


def _cutoff(now: datetime | None, shift: Callable[[datetime], datetime]) -> datetime:
    # Without an explicit now, shift the local wall clock and localize afterwards so
    # the cutoff lands on the same time of day across a DST change.
    if now is not None:
        return shift(now)
    return shift(_wall_now()).astimezone()


def shift_months(dt: datetime, months: int) -> datetime:
    """Move dt by whole months, clamping the day to the target month's length."""
    idx = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(idx, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def after(cutoff: datetime) -> TaskFilter:
    def _pred(task: Task) -> bool:
        return task.date > cutoff

    return _pred


def within_days(days: int = DEFAULT_DAYS, *, now: datetime | None = None) -> TaskFilter:
    if days <= 0:
        days = DEFAULT_DAYS
    try:
        cutoff = _cutoff(now, lambda dt: dt - timedelta(days=days))
    except OverflowError:
        cutoff = datetime.min.replace(tzinfo=timezone.utc)
    return after(cutoff)


def within_month(*, now: datetime | None = None) -> TaskFilter:
    return after(_cutoff(now, lambda dt: shift_months(dt, -1)))


def within_year(*, now: datetime | None = None) -> TaskFilter:
    return after(_cutoff(now, lambda dt: shift_months(dt, -12)))


def name_in(values: Iterable[str]) -> TaskFilter:
    wanted = frozenset(values)

    def _pred(task: Task) -> bool:
        return task.name in wanted

    return _pred


def ref_in(values: Iterable[str]) -> TaskFilter:
    wanted = frozenset(values)

    def _pred(task: Task) -> bool:
        return task.ref in wanted

    return _pred


def parse_days(raw: str | None) -> int:
    """Lenient day-count parsing: anything that is not a positive integer means the default."""
    if raw is None:
        return DEFAULT_DAYS
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        return DEFAULT_DAYS
    days = int(text)
    return days if days > 0 else DEFAULT_DAYS
