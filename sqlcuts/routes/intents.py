from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..db import get_settings
from ..domain.requests import QueryIntent, UpdateIntent
from ..sandbox import LocalSandbox
from ..services.query_svc import handle_query
from ..services.update_svc import handle_update
from ..utils.exceptions import ConfigError

router = APIRouter()


class QueryBody(BaseModel):
    database: Optional[str] = None
    query: Optional[str] = None
    column_separator: Optional[str] = None
    null_value: Optional[str] = None
    quote_strings: Optional[bool] = None


class UpdateBody(BaseModel):
    database: Optional[str] = None
    directory: Optional[str] = None
    statement: Optional[str] = None


def get_sandbox() -> LocalSandbox:
    try:
        return LocalSandbox(get_settings()["scoped_roots"])
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))


def _to_handle(sandbox: LocalSandbox, path: Optional[str]):
    return sandbox.handle_for(path) if path else None


def _raise_for(resp):
    if resp.code == "needs_value":
        raise HTTPException(status_code=422, detail={"needs_value": resp.needs_value})
    if resp.code == "failure":
        raise HTTPException(status_code=400, detail=resp.error_text)


@router.post("/api/query")
def api_query(body: QueryBody, sandbox: LocalSandbox = Depends(get_sandbox)):
    intent = QueryIntent(
        database=_to_handle(sandbox, body.database),
        query=body.query,
        column_separator=body.column_separator,
        null_value=body.null_value,
        quote_strings=body.quote_strings,
    )
    resp = handle_query(intent, sandbox)
    _raise_for(resp)
    return {"rows": resp.rows}


@router.post("/api/update")
def api_update(body: UpdateBody, sandbox: LocalSandbox = Depends(get_sandbox)):
    intent = UpdateIntent(
        database=_to_handle(sandbox, body.database),
        directory=_to_handle(sandbox, body.directory),
        statement=body.statement,
    )
    resp = handle_update(intent, sandbox)
    _raise_for(resp)
    return {"message": "ok"}
