from __future__ import annotations

# sqlcuts/db.py
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import yaml

from .utils.exceptions import ConfigError

# Settings resolution order:
# 1) environment variables SQLCUTS_* (highest priority)
# 2) the YAML file named by SQLCUTS_CONFIG, else ./config.yaml
# 3) DEFAULTS
DEFAULTS = {
    "journal_mode": "TRUNCATE",
    "busy_timeout": 0.0,
    "scoped_roots": [],
    "log_level": "INFO",
}

# WAL leaves -wal/-shm sidecar files next to the database
JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "OFF")


def _config_path(config_path: str | None = None) -> str:
    return config_path or os.environ.get("SQLCUTS_CONFIG") or os.path.join(os.getcwd(), "config.yaml")


def _read_config_yaml(config_path: str | None = None) -> dict:
    cfg_path = _config_path(config_path)
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read {cfg_path}: {e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping")
    return {k: cfg[k] for k in DEFAULTS if k in cfg}


def get_settings(config_path: str | None = None) -> dict:
    """
    Merged settings; read fresh on every call so no state survives an invocation.
    An explicit config_path takes the place of SQLCUTS_CONFIG.
    """
    cfg = {**DEFAULTS, **_read_config_yaml(config_path)}

    env = os.environ
    if env.get("SQLCUTS_JOURNAL_MODE"):
        cfg["journal_mode"] = env["SQLCUTS_JOURNAL_MODE"]
    if env.get("SQLCUTS_BUSY_TIMEOUT"):
        cfg["busy_timeout"] = env["SQLCUTS_BUSY_TIMEOUT"]
    if env.get("SQLCUTS_SCOPED_ROOTS"):
        cfg["scoped_roots"] = [p for p in env["SQLCUTS_SCOPED_ROOTS"].split(os.pathsep) if p]
    if env.get("SQLCUTS_LOG_LEVEL"):
        cfg["log_level"] = env["SQLCUTS_LOG_LEVEL"]

    mode = str(cfg["journal_mode"]).strip().upper()
    if mode not in JOURNAL_MODES:
        raise ConfigError(f"journal_mode must be one of {', '.join(JOURNAL_MODES)}, got {mode!r}")
    cfg["journal_mode"] = mode

    try:
        cfg["busy_timeout"] = float(cfg["busy_timeout"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"busy_timeout must be a number, got {cfg['busy_timeout']!r}") from e
    if cfg["busy_timeout"] < 0:
        raise ConfigError("busy_timeout must not be negative")

    roots = cfg["scoped_roots"]
    if isinstance(roots, str):
        roots = [roots]
    cfg["scoped_roots"] = [os.path.abspath(os.path.expanduser(str(r))) for r in roots or []]
    cfg["log_level"] = str(cfg["log_level"]).upper()
    return cfg


def _database_uri(path: str, mode: str) -> str:
    return f"{Path(path).absolute().as_uri()}?mode={mode}"


def _decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", "replace")


@contextmanager
def get_conn(db_path: str, readonly: bool = True, settings: dict | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a fresh SQLite connection for a single request.

    Read-only connections use ``mode=ro`` and never create the file. Writable
    connections use ``mode=rwc`` and switch the journal to a non-WAL mode
    before handing the connection out. No type detection is done, so column
    values arrive as None/int/float/str/bytes only.
    """
    cfg = settings or get_settings()
    conn = sqlite3.connect(
        _database_uri(db_path, "ro" if readonly else "rwc"),
        uri=True,
        timeout=cfg["busy_timeout"],
        isolation_level=None,
    )
    # SQLite does not validate TEXT encoding; undecodable bytes become U+FFFD
    conn.text_factory = _decode_text
    try:
        if not readonly:
            conn.execute(f"PRAGMA journal_mode = {cfg['journal_mode']};")
        yield conn
    finally:
        conn.close()
