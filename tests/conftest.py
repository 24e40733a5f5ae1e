# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from quantum.tasks.task_store import TaskStore

from .fakes import FakeClock

T0 = datetime(2026, 3, 31, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(now=T0)


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "quantum"


@pytest.fixture()
def store(data_dir: Path, clock: FakeClock) -> TaskStore:
    """
    Real TaskStore on a per-test directory.

    The JSON files are part of what we want to test, so nothing is faked except time.
    """
    return TaskStore(data_dir, clock=clock)
