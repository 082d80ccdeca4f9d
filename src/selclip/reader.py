#!/usr/bin/env python3
"""Synchronous clipboard reads."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from selclip.binding import get_binding
from selclip.errors import UnavailableError, UnsupportedError, error_for_status
from selclip.formats import resolve_format

if TYPE_CHECKING:
    from selclip.binding import SelectionBinding
    from selclip.formats import Format

logger = logging.getLogger(__name__)


def read(fmt: Format, *, binding: SelectionBinding | None = None) -> bytes:
    """Read the clipboard contents in the given format.

    Runs on the caller's thread and blocks until the selection owner has
    answered (or the binding gives up).

    Args:
        fmt: The content format to request.
        binding: Binding to use instead of the process default.

    Returns:
        The clipboard contents. b"" means the clipboard is empty.

    Raises:
        UnsupportedError: fmt is unknown, or no owner offers it.
        UnavailableError: The display or clipboard owner is unreachable.
    """
    target = resolve_format(fmt)
    if target is None:
        raise UnsupportedError(f"unsupported clipboard format: {fmt!r}")

    if binding is None:
        binding = get_binding()
    length, buf = binding.read(target)
    logger.debug("Read %s returned length=%s", target, length)

    error = error_for_status(length)
    if error is not None:
        raise error(f"clipboard read of {target} failed with status {length}")
    if buf is None:
        raise UnavailableError(f"clipboard read of {target} returned no data")
    with memoryview(buf) as view:
        if len(view) < length:
            raise UnavailableError(
                f"clipboard read of {target} returned {len(view)} of {length} bytes"
            )
        return bytes(view[:length])
