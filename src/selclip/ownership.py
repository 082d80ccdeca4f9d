#!/usr/bin/env python3
"""Clipboard writes and ownership sessions.

Owning an X11 selection means answering SelectionRequest events for as
long as the selection is ours. Each write therefore runs the binding's
blocking ownership call on its own dedicated thread. The caller is blocked
only until the binding reports whether ownership was acquired; afterwards
the session's completion event tells it when ownership was lost.

Concurrent writes are independent: each gets its own thread, readiness
queue and completion event. Which writer ends up owning the clipboard is
decided by the display server (the last successful claim wins, and the
previous owner's thread sees SelectionClear and exits).
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from typing import TYPE_CHECKING

from selclip import handles
from selclip.binding import WRITE_UNAVAILABLE, get_binding
from selclip.constants import WRITE_TIMEOUT
from selclip.errors import UnavailableError, UnsupportedError, WriteTimeoutError
from selclip.formats import resolve_format

if TYPE_CHECKING:
    from selclip.binding import SelectionBinding
    from selclip.formats import Format

logger = logging.getLogger(__name__)


class OwnershipSession:
    """One write call's hold on the clipboard.

    Attributes:
        format: The format that was written.
        target: The selection target served by this session.
        status: The binding's final return status, or None while the
            session is still running.
    """

    def __init__(self, fmt: Format, target: str) -> None:
        self.format = fmt
        self.target = target
        self.status: int | None = None
        self._ready: queue.Queue[int] = queue.Queue(maxsize=1)
        self._done = threading.Event()
        self._thread: threading.Thread | None = None

    def __repr__(self) -> str:
        state = "done" if self.done else "owning"
        return f"<OwnershipSession {self.target} {state}>"

    @property
    def done(self) -> bool:
        """True once ownership has been lost and the worker has exited."""
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until ownership is lost. Returns False on timeout."""
        return self._done.wait(timeout)

    async def wait_async(self) -> None:
        """Wait for ownership loss without blocking the event loop."""
        await asyncio.to_thread(self._done.wait)

    def _serve(self, binding: SelectionBinding, data: bytes) -> None:
        """Worker thread body: hold the selection until it is lost."""
        status = WRITE_UNAVAILABLE
        try:
            with handles.registered(self._ready) as handle:
                try:
                    status = binding.write(self.target, data or None, handle)
                except Exception:
                    logger.exception("Clipboard write of %s failed", self.target)
                finally:
                    # No-op unless the binding exited without reporting
                    handles.sync_status(handle, WRITE_UNAVAILABLE)
        finally:
            if status != 0:
                logger.debug("Clipboard write of %s ended with status %s",
                    self.target, status)
            self.status = status
            self._done.set()


def write(
    fmt: Format,
    data: bytes,
    *,
    binding: SelectionBinding | None = None,
    timeout: float = WRITE_TIMEOUT,
) -> OwnershipSession:
    """Put data on the clipboard.

    Starts a worker thread that claims the clipboard and serves data to
    other clients until another client takes ownership. Returns as soon as
    ownership is confirmed. Writing b"" clears the clipboard.

    Args:
        fmt: The format of data.
        data: The content to serve.
        binding: Binding to use instead of the process default.
        timeout: Seconds to wait for ownership to be confirmed.

    Returns:
        The running OwnershipSession.

    Raises:
        UnsupportedError: fmt is unknown. No thread is started.
        UnavailableError: The binding rejected the ownership claim.
        WriteTimeoutError: No confirmation within timeout. The worker keeps
            running on its own.
    """
    target = resolve_format(fmt)
    if target is None:
        raise UnsupportedError(f"unsupported clipboard format: {fmt!r}")

    if binding is None:
        binding = get_binding()
    session = OwnershipSession(fmt, target)
    session._thread = threading.Thread(
        target=session._serve,
        args=(binding, bytes(data)),
        name=f"selclip-owner-{target}",
        daemon=True,
    )
    session._thread.start()

    try:
        status = session._ready.get(timeout=timeout)
    except queue.Empty:
        raise WriteTimeoutError(
            f"clipboard write of {target} not confirmed within {timeout}s"
        ) from None
    if status < 0:
        raise UnavailableError(
            f"clipboard write of {target} rejected with status {status}"
        )
    logger.debug("Acquired clipboard ownership for %s", target)
    return session
