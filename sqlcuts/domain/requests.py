from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

from pydantic import BaseModel

from ..sandbox import ResourceHandle
from .values import FormatOptions, Row


# ---------------- raw intents (what a caller might send) ----------------

@dataclass
class QueryIntent:
    database: Optional[ResourceHandle] = None
    query: Optional[str] = None
    column_separator: Optional[str] = None
    null_value: Optional[str] = None
    quote_strings: Optional[bool] = None


@dataclass
class UpdateIntent:
    database: Optional[ResourceHandle] = None
    directory: Optional[ResourceHandle] = None
    statement: Optional[str] = None


# ---------------- resolved requests (what execution requires) ----------------

@dataclass(frozen=True)
class QueryRequest:
    database: ResourceHandle
    query: str
    column_separator: str
    null_value: str
    quote_strings: bool

    @property
    def format_options(self) -> FormatOptions:
        return FormatOptions(self.column_separator, self.null_value, self.quote_strings)


@dataclass(frozen=True)
class UpdateRequest:
    database: ResourceHandle
    directory: ResourceHandle
    statement: str


Request = Union[QueryRequest, UpdateRequest]


@dataclass(frozen=True)
class NeedsValue:
    field: str


@dataclass(frozen=True)
class Resolved:
    request: Request


Resolution = Union[NeedsValue, Resolved]


# ---------------- execution outcome ----------------

@dataclass(frozen=True)
class Success:
    rows: Optional[tuple[Row, ...]] = None


@dataclass(frozen=True)
class Failure:
    message: str


ExecutionOutcome = Union[Success, Failure]


# ---------------- responses ----------------

ResponseCode = Literal["success", "failure", "needs_value"]


class QueryResponse(BaseModel):
    code: ResponseCode
    rows: list[str] = []
    error_text: Optional[str] = None
    needs_value: Optional[str] = None


class UpdateResponse(BaseModel):
    code: ResponseCode
    error_text: Optional[str] = None
    needs_value: Optional[str] = None
