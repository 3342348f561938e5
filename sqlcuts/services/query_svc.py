from __future__ import annotations

# sqlcuts/services/query_svc.py
from ..db import get_settings
from ..domain.requests import Failure, NeedsValue, QueryIntent, QueryResponse
from ..domain.values import format_row
from ..logs import LogContext
from ..sandbox import ScopedAccess, resource_scope
from .executor import execute_read
from .resolver import resolve


def handle_query(intent: QueryIntent, access: ScopedAccess, settings: dict | None = None) -> QueryResponse:
    """
    Run a read-only query and return each row as one formatted string.

    The database handle is held in a scope for exactly the duration of the
    read; a response never carries partial rows.
    """
    log = LogContext("QUERY_DB")
    resolution = resolve(intent)
    if isinstance(resolution, NeedsValue):
        log.write("NEEDS_VALUE", resolution.field)
        return QueryResponse(code="needs_value", needs_value=resolution.field)

    req = resolution.request
    log.set_entity("database", req.database.path)
    log.set_payload({
        "column_separator": req.column_separator,
        "null_value": req.null_value,
        "quote_strings": req.quote_strings,
    })

    cfg = settings or get_settings()
    with resource_scope(req.database, access):
        outcome = execute_read(req.database.path, req.query, cfg)

    if isinstance(outcome, Failure):
        log.write("ERROR", outcome.message)
        return QueryResponse(code="failure", error_text=outcome.message)

    opts = req.format_options
    rows = [format_row(r, opts) for r in outcome.rows]
    log.write("OK")
    return QueryResponse(code="success", rows=rows)
