#!/usr/bin/env python3
"""Tests for the error taxonomy and status translation."""
from selclip.errors import (
    ClipboardError,
    UnavailableError,
    UnsupportedError,
    WriteTimeoutError,
    error_for_status,
)


def test_lengths_are_not_errors() -> None:
    """Zero and positive read results are lengths, not sentinels."""
    assert error_for_status(0) is None
    assert error_for_status(42) is None


def test_x11_sentinels() -> None:
    """-1 and -2 map to unavailable and unsupported."""
    assert error_for_status(-1) is UnavailableError
    assert error_for_status(-2) is UnsupportedError


def test_unknown_negative_status_is_unavailable() -> None:
    """Sentinels the backend does not define still fail the read."""
    assert error_for_status(-7) is UnavailableError
    assert error_for_status(-2, backend="other") is UnavailableError


def test_hierarchy() -> None:
    """All errors share a base, and the write timeout is a TimeoutError."""
    assert issubclass(UnavailableError, ClipboardError)
    assert issubclass(UnsupportedError, ClipboardError)
    assert issubclass(WriteTimeoutError, ClipboardError)
    assert issubclass(WriteTimeoutError, TimeoutError)
