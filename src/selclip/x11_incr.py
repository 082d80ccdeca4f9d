#!/usr/bin/env python3
"""INCR transfers for content larger than one X11 request.

Sending: the owner answers the request with a property of type INCR holding
the total size, then writes one chunk each time the requestor deletes the
property, ending with a zero-length chunk.

Receiving: the requestor deletes the INCR property, then reads and deletes
each new value of the property until it is empty.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from Xlib import X

from selclip.x11_display import wait_for_event

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionRequest
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)

# Fraction of the server's maximum request size usable for one property.
INCR_SAFETY_MARGIN: float = 0.9

# Bytes written per INCR chunk.
INCR_CHUNK_SIZE: int = 65536

# Seconds after which an unfinished INCR send is abandoned.
INCR_SEND_TIMEOUT: float = 30.0


@dataclass
class IncrSendState:
    """An INCR send in progress.

    Attributes:
        requestor: The window receiving the content.
        property_atom: The requestor's property chunks are written to.
        target_atom: The type of the content.
        content: The full content.
        offset: Position of the next chunk in content.
        start_time: time.time() when the transfer started.
        completion_sent: True once the zero-length chunk was written.
    """

    requestor: Window
    property_atom: int
    target_atom: int
    content: bytes
    start_time: float
    offset: int = 0
    completion_sent: bool = False


PendingSends = dict[tuple[int, int], IncrSendState]


def needs_incr_transfer(content: bytes, display: Display) -> bool:
    """Return True if content does not fit into one change_property."""
    # max_request_length is in 4-byte units
    max_bytes = display.info.max_request_length * 4  # type: ignore[attr-defined]
    return len(content) > int(max_bytes * INCR_SAFETY_MARGIN)


def start_incr_send(
    display: Display,
    event: SelectionRequest,
    property_atom: int,
    content: bytes,
    pending: PendingSends,
    incr_atom: int,
) -> None:
    """Announce an INCR transfer to the requestor and record its state.

    The caller still sends the SelectionNotify for the request.
    """
    event.requestor.change_attributes(
        event_mask=X.PropertyChangeMask | X.StructureNotifyMask
    )
    event.requestor.change_property(property_atom, incr_atom, 32, [len(content)])
    key = (event.requestor.id, property_atom)
    pending[key] = IncrSendState(
        requestor=event.requestor,
        property_atom=property_atom,
        target_atom=event.target,
        content=content,
        start_time=time.time(),
    )
    logger.debug("Started INCR send to %s, %s bytes", key, len(content))


def send_incr_chunk(display: Display, state: IncrSendState) -> None:
    """Write the next chunk, or the zero-length end marker."""
    if state.offset >= len(state.content):
        state.requestor.change_property(state.property_atom, state.target_atom, 8, b"")
        state.completion_sent = True
    else:
        end = min(state.offset + INCR_CHUNK_SIZE, len(state.content))
        state.requestor.change_property(
            state.property_atom, state.target_atom, 8, state.content[state.offset:end]
        )
        state.offset = end
    display.flush()


def _forget(display: Display, key: tuple[int, int], pending: PendingSends) -> None:
    """Drop a transfer, unsubscribing from its requestor if it was the last."""
    state = pending.pop(key, None)
    if state is None:
        return
    if not any(other[0] == key[0] for other in pending):
        state.requestor.change_attributes(event_mask=0)
        display.flush()


def handle_property_delete(display: Display, event: Event, pending: PendingSends) -> None:
    """Advance the transfer whose property the requestor just deleted."""
    key = (event.window.id, event.atom)
    state = pending.get(key)
    if state is None:
        return
    if state.completion_sent:
        logger.debug("INCR send to %s complete", key)
        _forget(display, key, pending)
    else:
        send_incr_chunk(display, state)


def drop_requestor(display: Display, requestor_id: int, pending: PendingSends) -> None:
    """Abandon all transfers to a destroyed window."""
    for key in [key for key in pending if key[0] == requestor_id]:
        logger.debug("INCR requestor %s destroyed", requestor_id)
        pending.pop(key, None)


def cleanup_stale_incr_sends(display: Display, pending: PendingSends) -> None:
    """Abandon transfers older than INCR_SEND_TIMEOUT."""
    now = time.time()
    for key, state in list(pending.items()):
        if now - state.start_time > INCR_SEND_TIMEOUT:
            logger.warning("INCR send to %s timed out", key)
            _forget(display, key, pending)


def cancel_all(display: Display, pending: PendingSends) -> None:
    """Abandon every transfer, e.g. when ownership is lost."""
    for key in list(pending):
        _forget(display, key, pending)


def receive_incr(
    display: Display, window: Window, property_atom: int, timeout: float,
) -> bytes | None:
    """Collect an INCR transfer addressed to window.

    The INCR property itself must already have been deleted.

    Args:
        display: The X11 display connection.
        window: Our window, selecting PropertyChangeMask.
        property_atom: The property the owner writes chunks to.
        timeout: Seconds to wait for each chunk.

    Returns:
        The complete content, or None if the owner stopped sending.
    """
    def is_new_chunk(event: Event) -> bool:
        return (
            event.type == X.PropertyNotify
            and event.window.id == window.id
            and event.atom == property_atom
            and event.state == X.PropertyNewValue
        )

    chunks: list[bytes] = []
    while True:
        event = wait_for_event(display, time.monotonic() + timeout, is_new_chunk)
        if event is None:
            logger.debug("INCR receive timed out after %s chunks", len(chunks))
            return None
        prop = window.get_full_property(property_atom, X.AnyPropertyType)
        window.delete_property(property_atom)
        display.flush()
        chunk = as_bytes(prop.value) if prop is not None else b""
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def as_bytes(value: bytes | str | list[int]) -> bytes:
    """Normalize a format-8 property value to bytes."""
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)
