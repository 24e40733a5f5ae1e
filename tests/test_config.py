# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from quantum.config import Settings
from quantum.errors import HomeDirResolutionError


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("QUANTUM_DATA_DIR", "QUANTUM_LOG_LEVEL", "QUANTUM_LOG_FILE", "QUANTUM_APP_NAME"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_live_under_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

    s = Settings.from_env(dotenv=False)

    assert s.data_dir == tmp_path / ".quantum"
    assert s.log_level == "WARNING"
    assert s.log_path == tmp_path / ".quantum" / "quantum.log"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("QUANTUM_DATA_DIR", str(tmp_path / "store"))
    monkeypatch.setenv("QUANTUM_LOG_LEVEL", "debug")
    monkeypatch.setenv("QUANTUM_LOG_FILE", "")

    s = Settings.from_env(dotenv=False)

    assert s.data_dir == tmp_path / "store"
    assert s.log_level == "DEBUG"
    assert s.log_file is None
    assert s.log_path is None


def test_unresolvable_home(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear_env(monkeypatch)

    def _no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", classmethod(_no_home))

    with pytest.raises(HomeDirResolutionError):
        Settings.from_env(dotenv=False)


def test_explicit_data_dir_skips_home_lookup(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("QUANTUM_DATA_DIR", str(tmp_path))

    def _no_home(cls):
        raise RuntimeError("Could not determine home directory.")

    monkeypatch.setattr(Path, "home", classmethod(_no_home))

    assert Settings.from_env(dotenv=False).data_dir == tmp_path
