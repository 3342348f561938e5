"""Domain layer: request/response shapes and column value formatting.

Pure data and functions only; no I/O happens here.
"""
from __future__ import annotations
