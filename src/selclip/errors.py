#!/usr/bin/env python3
"""Clipboard error taxonomy.

The binding layer reports failures as negative integer sentinels. This
module defines the exceptions raised to callers and the translation from
sentinels to exceptions.
"""

from __future__ import annotations


class ClipboardError(Exception):
    """Base class for all clipboard failures."""


class UnavailableError(ClipboardError):
    """The clipboard or display is unreachable, or ownership was rejected."""


class UnsupportedError(ClipboardError):
    """The requested content format has no handler."""


class WriteTimeoutError(ClipboardError, TimeoutError):
    """Ownership was not confirmed within the write timeout."""


# Read sentinels returned by a binding, keyed by backend name.
_READ_SENTINELS: dict[str, dict[int, type[ClipboardError]]] = {
    "x11": {
        -1: UnavailableError,
        -2: UnsupportedError,
    },
}


def error_for_status(status: int, backend: str = "x11") -> type[ClipboardError] | None:
    """Translate a binding read status into an exception class.

    Args:
        status: Signed length returned by the binding's read primitive.
        backend: Name of the binding backend.

    Returns:
        The exception class for a sentinel, or None if status is a length.
    """
    if status >= 0:
        return None
    return _READ_SENTINELS.get(backend, {}).get(status, UnavailableError)
