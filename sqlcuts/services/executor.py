from __future__ import annotations

# sqlcuts/services/executor.py
import logging
import sqlite3

from ..db import get_conn
from ..domain.requests import ExecutionOutcome, Failure, Success
from ..domain.values import to_row

logger = logging.getLogger(__name__)

# UnicodeEncodeError: SQL text the engine cannot take as UTF-8 (lone surrogates)
ENGINE_ERRORS = (sqlite3.Error, UnicodeEncodeError)


def execute_read(db_path: str, sql: str, settings: dict | None = None) -> ExecutionOutcome:
    """
    Run one statement on a read-only connection and materialize the full
    result set. Rows come back as tuples of Value.

    Returns:
        Success(rows) on success, Failure(engine message) on any engine error.
    """
    logger.debug("read %s: %s", db_path, sql)
    try:
        with get_conn(db_path, readonly=True, settings=settings) as conn:
            cur = conn.execute(sql)
            rows = tuple(to_row(r) for r in cur.fetchall())
    except ENGINE_ERRORS as e:
        return Failure(str(e))
    return Success(rows)


def split_statements(sql: str) -> list[str]:
    """
    Cut a script into complete statements at semicolons the engine considers
    terminal (so ';' inside strings, comments and trigger bodies is kept).
    A trailing unterminated piece is returned as-is for the engine to judge.
    """
    out = []
    buf = ""
    for part in sql.split(";")[:-1]:
        buf += part + ";"
        if sqlite3.complete_statement(buf):
            if buf.strip() != ";":
                out.append(buf)
            buf = ""
    buf += sql.split(";")[-1]
    if buf.strip():
        out.append(buf)
    return out


def execute_write(db_path: str, sql: str, settings: dict | None = None) -> ExecutionOutcome:
    """
    Run the caller's SQL in one write transaction and discard any rows.

    A script with several statements runs them in order; if any of them
    fails the whole transaction is rolled back.
    """
    logger.debug("write %s: %s", db_path, sql)
    try:
        with get_conn(db_path, readonly=False, settings=settings) as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                for stmt in split_statements(sql):
                    conn.execute(stmt)
                if conn.in_transaction:
                    conn.commit()
            except ENGINE_ERRORS:
                if conn.in_transaction:
                    conn.rollback()
                raise
    except ENGINE_ERRORS as e:
        return Failure(str(e))
    return Success()
