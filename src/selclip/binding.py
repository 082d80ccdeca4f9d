#!/usr/bin/env python3
"""Interface to the selection protocol implementation.

The orchestration in reader, ownership and watcher talks to the display
server only through an object implementing SelectionBinding. The default
is the python-xlib binding; tests and embedders can install their own.
"""

from __future__ import annotations

import threading
from typing import Protocol

# Read sentinels.
READ_UNAVAILABLE: int = -1
READ_UNSUPPORTED: int = -2

# Write statuses reported through handles.sync_status() and returned.
WRITE_UNAVAILABLE: int = -1
WRITE_UNSUPPORTED: int = -2
WRITE_NOT_OWNER: int = -3
WRITE_READY: int = 1


class SelectionBinding(Protocol):
    """Selection ownership and request/reply primitives."""

    def test(self) -> int:
        """Return 0 if the display is usable, non-zero otherwise."""
        ...

    def read(self, target: str) -> tuple[int, bytes | bytearray | None]:
        """Convert the clipboard selection to target.

        Returns a signed length and the buffer holding the data. A negative
        length is one of the READ_* sentinels.
        """
        ...

    def write(self, target: str, data: bytes | None, handle: int) -> int:
        """Own the clipboard with data until ownership is lost.

        Must call handles.sync_status(handle, status) exactly once, as soon
        as ownership is confirmed or rejected, then block serving requests.
        Returns 0 when ownership is lost normally.
        """
        ...


_lock = threading.Lock()
_default: SelectionBinding | None = None


def get_binding() -> SelectionBinding:
    """Return the process default binding, creating the X11 one on first use."""
    global _default
    with _lock:
        if _default is None:
            from selclip.x11_binding import XlibSelectionBinding
            _default = XlibSelectionBinding()
        return _default


def set_binding(binding: SelectionBinding | None) -> None:
    """Replace the process default binding. None restores the X11 binding."""
    global _default
    with _lock:
        _default = binding
