# src/quantum/config.py

"""Settings loaded from environment variables (+ optional .env).

One Settings object is built at startup and handed to the store explicitly;
nothing else in the package looks up the home directory on its own.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import HomeDirResolutionError

ENV_PREFIX = "QUANTUM"
DEFAULT_DIR_NAME = ".quantum"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def default_data_dir() -> Path:
    """Return ~/.quantum, or raise HomeDirResolutionError."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise HomeDirResolutionError("Unable to resolve user home dir") from e
    return home / DEFAULT_DIR_NAME


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    data_dir: Path
    log_level: str
    # File name inside data_dir; None disables the file handler.
    log_file: str | None

    @property
    def log_path(self) -> Path | None:
        if not self.log_file:
            return None
        return self.data_dir / self.log_file

    @staticmethod
    def from_env(*, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        app_name = _env(_k("APP_NAME"), "quantum") or "quantum"
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"

        # Only touch the home directory when no explicit location is configured.
        data_dir = _env_path(_k("DATA_DIR"), None)
        if data_dir is None:
            data_dir = default_data_dir()

        raw_log_file = os.getenv(_k("LOG_FILE"))
        if raw_log_file is None:
            log_file: str | None = "quantum.log"
        else:
            log_file = raw_log_file.strip() or None

        return Settings(
            app_name=app_name,
            data_dir=data_dir,
            log_level=log_level,
            log_file=log_file,
        )
