#!/usr/bin/env python3
"""Clipboard change watching.

A watch session polls the clipboard on a fixed interval and yields every
content that differs from the last one seen. It is an async iterator:

    stop = asyncio.Event()
    async for data in await watch(Format.TEXT, stop):
        ...

Setting stop (or calling aclose()) ends the iteration. Reads run in the
default executor so that a slow selection owner never blocks the loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING

from selclip.constants import WATCH_INTERVAL
from selclip.errors import ClipboardError, UnsupportedError
from selclip.formats import resolve_format
from selclip.reader import read

if TYPE_CHECKING:
    from selclip.binding import SelectionBinding
    from selclip.formats import Format

logger = logging.getLogger(__name__)

_CLOSED = object()


def _read_or_none(fmt: Format, binding: SelectionBinding | None) -> bytes | None:
    """Read the clipboard, mapping any failure to None."""
    try:
        return read(fmt, binding=binding)
    except ClipboardError as e:
        logger.debug("Watch read failed: %s", e)
        return None
    except Exception:
        logger.exception("Watch read of %s failed", fmt)
        return None


async def _until_stopped(aw: Awaitable[object], stop: asyncio.Event) -> bool:
    """Await aw unless stop is set first.

    Returns:
        True if aw completed and stop is still clear.
    """
    work = asyncio.ensure_future(aw)
    stopped = asyncio.ensure_future(stop.wait())
    try:
        await asyncio.wait({work, stopped}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for fut in (work, stopped):
            if not fut.done():
                fut.cancel()
    return work.done() and not work.cancelled() and not stop.is_set()


class WatchSession:
    """A running clipboard watch.

    At most one changed content is buffered: the poller waits for the
    consumer to take it before emitting the next one.
    """

    def __init__(
        self,
        fmt: Format,
        stop: asyncio.Event,
        last: bytes | None,
        interval: float,
        binding: SelectionBinding | None,
    ) -> None:
        self.format = fmt
        self._stop = stop
        self._last = last
        self._interval = interval
        self._binding = binding
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False
        self._task: asyncio.Task[None] | None = None

    def _start(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def stopped(self) -> bool:
        """True once the poller has exited."""
        return self._task is not None and self._task.done()

    def cancel(self) -> None:
        """Ask the poller to stop at its next suspension point."""
        self._stop.set()

    async def aclose(self) -> None:
        """Stop the poller and wait for it to exit."""
        self._stop.set()
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    def __aiter__(self) -> WatchSession:
        return self

    async def __anext__(self) -> bytes:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        self._queue.task_done()
        if item is _CLOSED:
            self._closed = True
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    async def _run(self) -> None:
        try:
            while await self._tick():
                data = await asyncio.to_thread(_read_or_none, self.format, self._binding)
                if data is None:
                    continue
                if data == (self._last or b""):
                    continue
                if not await self._emit(data):
                    return
                self._last = data
        finally:
            self._queue.put_nowait(_CLOSED)
            logger.debug("Watch of %s closed", self.format)

    async def _tick(self) -> bool:
        """Sleep one interval. Returns False if stop was set meanwhile."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
        except asyncio.TimeoutError:
            return True
        return False

    async def _emit(self, data: bytes) -> bool:
        """Hand data to the consumer once the previous item was taken."""
        if not await _until_stopped(self._queue.join(), self._stop):
            return False
        self._queue.put_nowait(data)
        logger.debug("Clipboard %s changed (%s bytes)", self.format, len(data))
        return True


async def watch(
    fmt: Format,
    stop: asyncio.Event | None = None,
    *,
    interval: float = WATCH_INTERVAL,
    binding: SelectionBinding | None = None,
) -> WatchSession:
    """Start watching the clipboard for changes.

    Reads the current contents as the baseline, then polls every interval
    seconds. Failed reads are ignored. A byte-identical re-read is never
    reported.

    Args:
        fmt: The format to watch.
        stop: Cancellation scope. Setting it ends the session. A new event is
            created if omitted; use WatchSession.cancel() to set it.
        interval: Seconds between reads.
        binding: Binding to use instead of the process default.

    Returns:
        The running WatchSession.

    Raises:
        UnsupportedError: fmt is unknown.
    """
    if resolve_format(fmt) is None:
        raise UnsupportedError(f"unsupported clipboard format: {fmt!r}")
    if stop is None:
        stop = asyncio.Event()

    last = await asyncio.to_thread(_read_or_none, fmt, binding)
    session = WatchSession(fmt, stop, last, interval, binding)
    session._start()
    return session
