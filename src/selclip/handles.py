#!/usr/bin/env python3
"""Process-wide table of readiness handles.

A binding never receives a reference to a write call's readiness queue.
It receives an integer token instead, and reports acquisition through
sync_status(). The token is valid only while the owning worker holds it
registered.
"""

from __future__ import annotations

import itertools
import logging
import queue
import threading
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_counter = itertools.count(1)
_handles: dict[int, "queue.Queue[int]"] = {}
_delivered: set[int] = set()


def new_handle(ready: "queue.Queue[int]") -> int:
    """Register a readiness queue and return its token."""
    with _lock:
        handle = next(_counter)
        _handles[handle] = ready
    return handle


def delete_handle(handle: int) -> None:
    """Release a token. Releasing an unknown token is a no-op."""
    with _lock:
        _handles.pop(handle, None)
        _delivered.discard(handle)


@contextmanager
def registered(ready: "queue.Queue[int]") -> Iterator[int]:
    """Hold a token for ready for the duration of the block."""
    handle = new_handle(ready)
    try:
        yield handle
    finally:
        delete_handle(handle)


def sync_status(handle: int, status: int) -> bool:
    """Relay an acquisition status from a binding to the waiting caller.

    Called by bindings, possibly from any thread. Only the first status for
    a handle is delivered; later ones are dropped, even when the caller
    has already taken the first one off the queue.

    Args:
        handle: Token passed to the binding's write().
        status: Negative if ownership was rejected, otherwise non-negative.

    Returns:
        True if status was delivered.
    """
    with _lock:
        ready = _handles.get(handle)
        if ready is None:
            logger.debug("Status %s for released handle %s", status, handle)
            return False
        if handle in _delivered:
            logger.debug("Dropping repeated status %s for handle %s", status, handle)
            return False
        _delivered.add(handle)
    ready.put_nowait(status)
    return True
