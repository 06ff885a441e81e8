# tests/test_config.py

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import pytest

from sitetasks.cli.bootstrap import create_initial_state
from sitetasks.config import Settings
from sitetasks.logging_setup import setup_logging
from sitetasks.tasks.task_models import InvalidTaskError


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SITETASKS_APP_NAME",
        "SITETASKS_DATA_DIR",
        "SITETASKS_TASKS_DB_PATH",
        "SITETASKS_STORAGE_KEY",
        "SITETASKS_STRICT_VALIDATION",
        "SITETASKS_TODAY",
    ):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.app_name == "sitetasks"
    assert s.tasks_db_path == Path(".local/sitetasks") / "tasks.sqlite3"
    assert s.storage_key == "tasks"
    assert s.strict_validation is False
    assert s.today_override is None


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SITETASKS_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("SITETASKS_TASKS_DB_PATH", raising=False)
    monkeypatch.setenv("SITETASKS_STORAGE_KEY", "tower-b")
    monkeypatch.setenv("SITETASKS_STRICT_VALIDATION", "yes")
    monkeypatch.setenv("SITETASKS_TODAY", "2025-05-16")

    s = Settings.from_env()
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.storage_key == "tower-b"
    assert s.strict_validation is True
    assert s.today_override == date(2025, 5, 16)

    state = create_initial_state(settings=s)
    assert state.today() == date(2025, 5, 16)
    assert len(state.board.tasks) == 6
    with pytest.raises(InvalidTaskError):
        state.board.set_status(2, "in progress", 120)


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("sitetasks.test").info("hello from test")
        for h in root.handlers:
            h.flush()
        assert log_file.exists()
        assert "hello from test" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
