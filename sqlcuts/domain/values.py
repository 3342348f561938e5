from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Integer:
    value: int


@dataclass(frozen=True)
class Real:
    value: float


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Blob:
    value: bytes


Value = Union[Null, Integer, Real, Text, Blob]
Row = Tuple[Value, ...]  # one entry per projected column

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class FormatOptions:
    column_separator: str
    null_value: str
    quote_strings: bool


def to_value(raw: object) -> Value:
    """Wrap a native sqlite3 column value in its storage-class case."""
    if raw is None:
        return Null()
    # bool is an int subclass but the engine never produces one
    if isinstance(raw, int) and not isinstance(raw, bool):
        if not INT64_MIN <= raw <= INT64_MAX:
            raise OverflowError(f"integer out of 64-bit range: {raw}")
        return Integer(raw)
    if isinstance(raw, float):
        return Real(raw)
    if isinstance(raw, str):
        return Text(raw)
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return Blob(bytes(raw))
    raise TypeError(f"unsupported column value type: {type(raw).__name__}")


def to_row(raw_row: Sequence[object]) -> Row:
    return tuple(to_value(v) for v in raw_row)


_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def quote_text(s: str) -> str:
    """
    Debug-style string literal: wrapped in double quotes, with backslash,
    quote and control characters escaped so the result reads back unambiguously.
    """
    out = ['"']
    for ch in s:
        esc = _ESCAPES.get(ch)
        if esc is not None:
            out.append(esc)
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def format_value(value: Value, options: FormatOptions) -> str:
    if isinstance(value, Null):
        return options.null_value
    if isinstance(value, Integer):
        return str(value.value)
    if isinstance(value, Real):
        return repr(value.value)
    if isinstance(value, Text):
        return quote_text(value.value) if options.quote_strings else value.value
    if isinstance(value, Blob):
        return f"Blob({len(value.value)} bytes)"
    raise TypeError(f"not a column value: {value!r}")


def format_row(row: Row, options: FormatOptions) -> str:
    return options.column_separator.join(format_value(v, options) for v in row)
