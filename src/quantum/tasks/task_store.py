# src/quantum/tasks/task_store.py

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path

from ksuid import Ksuid

from ..errors import NotFoundError, UsageError
from .json_db import JsonDB
from .task_filters import TaskFilter
from .task_models import InProgress, Task, TaskListing

logger = logging.getLogger(__name__)

TASKS = "tasks"
INPROGRESS = "inprogress"

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


def parse_hours(raw: float | int | str) -> float:
    """Coerce user input to a non-negative, finite number of hours."""
    if isinstance(raw, bool):
        raise UsageError(f"Invalid hours: {raw!r}", command="add")
    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            raise UsageError(f"Invalid hours: {raw!r}", command="add") from None
    else:
        value = float(raw)
    if not math.isfinite(value) or value < 0:
        raise UsageError(f"Invalid hours: {raw!r}", command="add")
    return value


class TaskStore:
    """
    Task store on top of a JsonDB directory.

    Collections:
    - tasks: completed Task records keyed by uid (KSUID, so file order is creation order)
    - inprogress: InProgress records keyed by task name (one per name)

    Every mutation is written through immediately. stop_task writes the Task before
    removing the InProgress record; a crash in between leaves both.
    """

    def __init__(self, data_dir: str | Path, *, clock: Clock | None = None) -> None:
        self._db = JsonDB(data_dir)
        self._clock: Clock = clock or local_now
        logger.info("TaskStore ready dir=%s", self._db.root)

    def _new_uid(self) -> str:
        return str(Ksuid())

    def _write_task(self, task: Task) -> None:
        self._db.write(TASKS, task.uid, task.to_doc())

    # ---- create ----

    def add_task(self, name: str, hours: float | int | str, ref: str = "") -> Task:
        if not name or not name.strip():
            raise UsageError("Task name is required", command="add")
        task = Task(
            name=name,
            hours=parse_hours(hours),
            ref=ref or "",
            uid=self._new_uid(),
            date=self._clock(),
        )
        self._write_task(task)
        logger.debug("Task added uid=%s name=%s hours=%.4f ref=%s", task.uid, name, task.hours, ref)
        return task

    def start_task(self, name: str, ref: str = "") -> InProgress:
        """Begin timing name; an existing in-progress entry for the same name is replaced."""
        if not name or not name.strip():
            raise UsageError("Task name is required", command="start")
        entry = InProgress(name=name, ref=ref or "", start_time=self._clock())
        if self._db.exists(INPROGRESS, name):
            logger.info("Restarting in-progress task %s", name)
        self._db.write(INPROGRESS, name, entry.to_doc())
        return entry

    def stop_task(self, name: str) -> Task:
        if not name or not name.strip():
            raise UsageError("Task name is required", command="stop")
        entry = InProgress.from_doc(self._db.read(INPROGRESS, name), key=name)

        now = self._clock()
        elapsed = (now - entry.start_time).total_seconds() / 3600.0
        task = Task(
            name=name,
            hours=max(0.0, elapsed),
            ref=entry.ref,
            uid=self._new_uid(),
            date=now,
        )
        self._write_task(task)
        self._db.delete(INPROGRESS, name)
        logger.debug("Task stopped uid=%s name=%s hours=%.4f", task.uid, name, task.hours)
        return task

    # ---- read ----

    def get_task(self, uid: str) -> Task:
        return Task.from_doc(self._db.read(TASKS, uid), key=uid)

    def count_tasks(self) -> int:
        return self._db.count(TASKS)

    def list_tasks(self) -> list[Task]:
        return [Task.from_doc(doc, key=key) for key, doc in self._db.read_all(TASKS)]

    def list_inprogress(self) -> list[InProgress]:
        return [InProgress.from_doc(doc, key=key) for key, doc in self._db.read_all(INPROGRESS)]

    def filter_tasks(self, predicate: TaskFilter | None = None) -> TaskListing:
        listing = TaskListing()
        for task in self.list_tasks():
            if predicate is None or predicate(task):
                listing.tasks.append(task)
                listing.total_hours += task.hours
        return listing

    # ---- delete ----

    def delete_tasks(self, uids: Iterable[str]) -> int:
        """
        Delete the given uids.

        Every uid is checked first; if any is missing NotFoundError is raised and
        nothing is removed.
        """
        wanted = list(dict.fromkeys(uids))
        if not wanted:
            raise UsageError("At least one uid is required", command="delete")
        for uid in wanted:
            if not self._db.exists(TASKS, uid):
                raise NotFoundError(TASKS, uid)
        for uid in wanted:
            self._db.delete(TASKS, uid)
        logger.info("Deleted %d task(s)", len(wanted))
        return len(wanted)

    def delete_task(self, uid: str) -> None:
        self.delete_tasks([uid])

    def delete_all_tasks(self) -> None:
        self._db.drop(TASKS)
        logger.info("Deleted all tasks in %s", self._db.root)
