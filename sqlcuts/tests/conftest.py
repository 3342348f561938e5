from __future__ import annotations

import logging
import os
import sqlite3
import sys
from pathlib import Path

import pytest

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from sqlcuts.db import DEFAULTS
from sqlcuts.sandbox import LocalSandbox


class RecordingAccess:
    """ScopedAccess fake that counts every start/stop call."""

    def __init__(self, grant: bool = True):
        self.grant = grant
        self.started: list[str] = []
        self.stopped: list[str] = []
        self.parent_checks = 0

    @property
    def acquire_count(self) -> int:
        return len(self.started)

    @property
    def release_count(self) -> int:
        return len(self.stopped)

    def start_accessing(self, handle) -> bool:
        self.started.append(handle.path)
        return self.grant

    def stop_accessing(self, handle) -> None:
        self.stopped.append(handle.path)

    def is_parent_directory(self, directory, database) -> bool:
        self.parent_checks += 1
        return os.path.dirname(database.path) == directory.path


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    # Never pick up a developer's config.yaml or SQLCUTS_* variables
    for k in list(os.environ):
        if k.startswith("SQLCUTS_"):
            monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("SQLCUTS_CONFIG", str(tmp_path / "no-config.yaml"))
    yield
    root = logging.getLogger("sqlcuts")
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


@pytest.fixture()
def settings():
    return dict(DEFAULTS)


@pytest.fixture()
def access():
    return RecordingAccess()


@pytest.fixture()
def access_cls():
    return RecordingAccess


@pytest.fixture()
def sandbox():
    return LocalSandbox()


@pytest.fixture()
def db_path(tmp_path) -> str:
    """A database holding t(a INTEGER, b TEXT, c) with one row (1, 'hi', NULL)."""
    path = tmp_path / "data" / "sample.db"
    path.parent.mkdir()
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(
            "CREATE TABLE t (a INTEGER, b TEXT, c);"
            "INSERT INTO t VALUES (1, 'hi', NULL);"
        )
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture()
def read_db():
    def _read(path: str, sql: str):
        conn = sqlite3.connect(path)
        try:
            rows = conn.execute(sql).fetchall()
            conn.commit()
            return rows
        finally:
            conn.close()
    return _read


@pytest.fixture()
def client():
    from fastapi.testclient import TestClient
    from sqlcuts.api import app
    return TestClient(app)
