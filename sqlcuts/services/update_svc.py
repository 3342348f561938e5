from __future__ import annotations

# sqlcuts/services/update_svc.py
from ..db import get_settings
from ..domain.requests import Failure, NeedsValue, UpdateIntent, UpdateResponse
from ..logs import LogContext
from ..sandbox import ScopedAccess, resource_scope
from .executor import execute_write
from .resolver import resolve

DIRECTORY_MISMATCH = (
    "Parent folder must be set to the directory that contains the selected SQLite database file."
)


def handle_update(intent: UpdateIntent, access: ScopedAccess, settings: dict | None = None) -> UpdateResponse:
    """
    Run a write statement against the database.

    Both the database file and its parent directory are scoped: journal files
    are created and removed next to the database, so the directory must be
    writable for the duration of the statement.
    """
    log = LogContext("UPDATE_DB")
    resolution = resolve(intent)
    if isinstance(resolution, NeedsValue):
        log.write("NEEDS_VALUE", resolution.field)
        return UpdateResponse(code="needs_value", needs_value=resolution.field)

    req = resolution.request
    log.set_entity("database", req.database.path)
    log.set_payload({"directory": req.directory.path})

    if not access.is_parent_directory(req.directory, req.database):
        log.write("ERROR", DIRECTORY_MISMATCH)
        return UpdateResponse(code="failure", error_text=DIRECTORY_MISMATCH)

    cfg = settings or get_settings()
    with resource_scope(req.directory, access), resource_scope(req.database, access):
        outcome = execute_write(req.database.path, req.statement, cfg)

    if isinstance(outcome, Failure):
        log.write("ERROR", outcome.message)
        return UpdateResponse(code="failure", error_text=outcome.message)

    log.write("OK")
    return UpdateResponse(code="success")
