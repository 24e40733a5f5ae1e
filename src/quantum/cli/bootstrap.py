# src/quantum/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once (optionally overriding the data directory),
- configures logging,
- wires the TaskStore into AppState.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from ..errors import StorageError
from ..logging_setup import level_from_name, setup_logging
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    task_store: TaskStore


def load_settings(*, data_dir: Path | None = None) -> Settings:
    settings = Settings.from_env()
    if data_dir is not None:
        settings = dataclasses.replace(settings, data_dir=Path(data_dir).expanduser())
    return settings


def init_logging(settings: Settings) -> None:
    try:
        setup_logging(
            log_file=settings.log_path,
            console_level=level_from_name(settings.log_level),
        )
    except OSError as e:
        raise StorageError(f"Unable to open log file {settings.log_path}: {e}") from e


def create_initial_state(*, settings: Settings | None = None, data_dir: Path | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None they are read from the environment; data_dir overrides the
    configured store location either way.
    """
    if settings is None:
        settings = load_settings(data_dir=data_dir)
    elif data_dir is not None:
        settings = dataclasses.replace(settings, data_dir=Path(data_dir).expanduser())

    init_logging(settings)
    logger.debug("Starting %s data_dir=%s", settings.app_name, settings.data_dir)

    return AppState(settings=settings, task_store=TaskStore(settings.data_dir))
