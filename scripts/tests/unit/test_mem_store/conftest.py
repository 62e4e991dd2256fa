"""Pytest fixtures for mem_store tests."""

import pytest

from mem_store import conf
from mem_store.log import store_log_clear


@pytest.fixture(autouse=True)
def isolated_log(tmp_path, monkeypatch):
    """Point the store log at a temp file and enable it, so logging paths run."""
    monkeypatch.setattr(conf, "LOG_FILE", tmp_path / "mem_store.log")
    monkeypatch.setattr(conf, "LOG_ENABLED", True)
    monkeypatch.setattr(conf, "LOG_TO_STDERR", False)
    store_log_clear()
    yield tmp_path / "mem_store.log"
    store_log_clear()
