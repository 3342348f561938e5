from __future__ import annotations

# sqlcuts/services/resolver.py
from typing import Callable, Optional, Union

from ..domain.requests import (
    NeedsValue,
    QueryIntent,
    QueryRequest,
    Resolution,
    Resolved,
    UpdateIntent,
    UpdateRequest,
)


def _present(v) -> bool:
    return v is not None


def _non_empty(v) -> bool:
    return isinstance(v, str) and v != ""


def _boolean(v) -> bool:
    return isinstance(v, bool)


# Required fields in the order a caller is prompted for them
QUERY_FIELDS: dict[str, Callable[[object], bool]] = {
    "database": _present,
    "query": _non_empty,
    "column_separator": _non_empty,
    "null_value": lambda v: isinstance(v, str),  # "" is a valid null substitute
    "quote_strings": _boolean,
}

UPDATE_FIELDS: dict[str, Callable[[object], bool]] = {
    "database": _present,
    "directory": _present,
    "statement": _non_empty,
}


def _rules_for(intent: Union[QueryIntent, UpdateIntent]) -> dict[str, Callable[[object], bool]]:
    if isinstance(intent, QueryIntent):
        return QUERY_FIELDS
    if isinstance(intent, UpdateIntent):
        return UPDATE_FIELDS
    raise TypeError(f"unknown intent type: {type(intent).__name__}")


def resolve_field(intent: Union[QueryIntent, UpdateIntent], name: str) -> Optional[NeedsValue]:
    """Check one required field; None means it is resolved."""
    rules = _rules_for(intent)
    if name not in rules:
        raise KeyError(name)
    return None if rules[name](getattr(intent, name)) else NeedsValue(name)


def resolve(intent: Union[QueryIntent, UpdateIntent]) -> Resolution:
    """
    Validate every required field before anything is opened or acquired.

    Returns NeedsValue for the first unresolved field, otherwise Resolved with
    the fully-typed request.
    """
    for name in _rules_for(intent):
        missing = resolve_field(intent, name)
        if missing is not None:
            return missing

    if isinstance(intent, QueryIntent):
        return Resolved(QueryRequest(
            database=intent.database,
            query=intent.query,
            column_separator=intent.column_separator,
            null_value=intent.null_value,
            quote_strings=intent.quote_strings,
        ))
    return Resolved(UpdateRequest(
        database=intent.database,
        directory=intent.directory,
        statement=intent.statement,
    ))
