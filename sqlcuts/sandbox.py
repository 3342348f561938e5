"""
Security-scoped access to sandboxed files.

The core never builds a ResourceHandle: it receives handles from the host and
brackets every use with ``resource_scope``. ``LocalSandbox`` is the host
implementation used by the HTTP and command-line shells.
"""
from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

from .utils.exceptions import ScopeError

logger = logging.getLogger(__name__)


class ResourceHandle:
    """Opaque reference to a file or directory granted by the host."""

    __slots__ = ("path", "acquired")

    def __init__(self, path: str) -> None:
        self.path = path
        self.acquired = False

    @property
    def url(self) -> str:
        return "file://" + self.path

    def __repr__(self) -> str:
        return f"ResourceHandle({self.path!r}, acquired={self.acquired})"


class ScopedAccess(Protocol):
    def start_accessing(self, handle: ResourceHandle) -> bool: ...

    def stop_accessing(self, handle: ResourceHandle) -> None: ...

    def is_parent_directory(self, directory: ResourceHandle, database: ResourceHandle) -> bool: ...


def acquire(handle: ResourceHandle, access: ScopedAccess) -> bool:
    """Start scoped access; returns whether a matching release must stop it."""
    was_acquired = bool(access.start_accessing(handle))
    handle.acquired = was_acquired
    logger.debug("acquire %s -> %s", handle.path, was_acquired)
    return was_acquired


def release(handle: ResourceHandle, was_acquired: bool, access: ScopedAccess) -> None:
    if was_acquired:
        access.stop_accessing(handle)
        handle.acquired = False
    logger.debug("release %s (was_acquired=%s)", handle.path, was_acquired)


@contextmanager
def resource_scope(handle: ResourceHandle, access: ScopedAccess) -> Iterator[ResourceHandle]:
    """Acquire on enter, release exactly once on every exit path."""
    was_acquired = acquire(handle, access)
    try:
        yield handle
    finally:
        release(handle, was_acquired, access)


def _normalize(path: str) -> str:
    return os.path.normcase(os.path.normpath(os.path.abspath(path)))


def parent_matches(directory: str, database: str) -> bool:
    return _normalize(directory) == os.path.dirname(_normalize(database))


class LocalSandbox:
    """
    Grants scoped access to paths under ``scoped_roots``; everything else is
    treated as implicitly accessible (start_accessing returns False).
    """

    def __init__(self, scoped_roots: list[str] | None = None) -> None:
        self.scoped_roots = [_normalize(r) for r in scoped_roots or []]
        self._lock = threading.Lock()
        self._grants: set[int] = set()

    def handle_for(self, path: str) -> ResourceHandle:
        return ResourceHandle(os.path.abspath(os.path.expanduser(path)))

    def _is_scoped(self, path: str) -> bool:
        p = _normalize(path)
        return any(p == root or p.startswith(root + os.sep) for root in self.scoped_roots)

    def start_accessing(self, handle: ResourceHandle) -> bool:
        if not self._is_scoped(handle.path):
            return False
        with self._lock:
            if id(handle) in self._grants:
                raise ScopeError(handle.path, "handle already has an active grant")
            self._grants.add(id(handle))
        return True

    def stop_accessing(self, handle: ResourceHandle) -> None:
        with self._lock:
            if id(handle) not in self._grants:
                raise ScopeError(handle.path, "no active grant to release")
            self._grants.discard(id(handle))

    def is_parent_directory(self, directory: ResourceHandle, database: ResourceHandle) -> bool:
        return parent_matches(directory.path, database.path)

    @property
    def active_grants(self) -> int:
        with self._lock:
            return len(self._grants)
