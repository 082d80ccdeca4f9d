#!/usr/bin/env python3
"""Owning the CLIPBOARD selection over X11.

serve_selection() claims CLIPBOARD for a hidden window and answers
SelectionRequest events until another client takes the selection. It
reports the outcome of the claim through handles.sync_status() before
entering its event loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from Xlib import X, Xatom
from Xlib.error import DisplayError

from selclip.binding import WRITE_NOT_OWNER, WRITE_READY, WRITE_UNAVAILABLE, WRITE_UNSUPPORTED
from selclip.formats import Format, resolve_format
from selclip.handles import sync_status
from selclip.x11_display import create_hidden_window, open_display
from selclip.x11_incr import (
    cancel_all,
    cleanup_stale_incr_sends,
    drop_requestor,
    handle_property_delete,
    needs_incr_transfer,
    start_incr_send,
)

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.event import SelectionRequest
    from selclip.x11_incr import PendingSends

logger = logging.getLogger(__name__)


def serve_selection(target_name: str, data: bytes | None, handle: int) -> int:
    """Own CLIPBOARD with data as target_name until ownership is lost.

    Args:
        target_name: The selection target, e.g. "UTF8_STRING".
        data: The content to serve. None serves empty content.
        handle: Token for reporting the claim via sync_status().

    Returns:
        0 after losing ownership, or the negative status of a failed claim.
    """
    try:
        display = open_display()
    except DisplayError as e:
        logger.debug("Cannot open display for write: %s", e)
        sync_status(handle, WRITE_UNAVAILABLE)
        return WRITE_UNAVAILABLE
    try:
        return _own_and_serve(display, target_name, data or b"", handle)
    finally:
        display.close()


def _own_and_serve(display: Display, target_name: str, content: bytes, handle: int) -> int:
    window = create_hidden_window(display)
    selection = display.intern_atom("CLIPBOARD")
    # Creating the known targets first lets the lookup below succeed on a
    # fresh server
    for fmt in Format:
        display.intern_atom(resolve_format(fmt))
    targets_atom = display.intern_atom("TARGETS")
    incr_atom = display.intern_atom("INCR")
    target = display.intern_atom(target_name, only_if_exists=True)
    if target == X.NONE:
        sync_status(handle, WRITE_UNSUPPORTED)
        return WRITE_UNSUPPORTED

    window.set_selection_owner(selection, X.CurrentTime)
    display.flush()
    if display.get_selection_owner(selection) != window:
        logger.debug("Failed to acquire selection ownership for %s", target_name)
        sync_status(handle, WRITE_NOT_OWNER)
        return WRITE_NOT_OWNER
    sync_status(handle, WRITE_READY)

    pending: PendingSends = {}
    while True:
        event = display.next_event()
        if event.type == X.SelectionClear and event.atom == selection:
            logger.debug("Lost ownership of %s", target_name)
            cancel_all(display, pending)
            return 0
        if event.type == X.SelectionRequest and event.selection == selection:
            handle_selection_request(
                display, event, content, target, targets_atom, pending, incr_atom
            )
        elif event.type == X.PropertyNotify and event.state == X.PropertyDelete:
            handle_property_delete(display, event, pending)
        elif event.type == X.DestroyNotify:
            drop_requestor(display, event.window.id, pending)
        cleanup_stale_incr_sends(display, pending)


def handle_selection_request(
    display: Display,
    event: SelectionRequest,
    content: bytes,
    target: int,
    targets_atom: int,
    pending: PendingSends,
    incr_atom: int,
) -> None:
    """Answer one SelectionRequest.

    Supports TARGETS and the one target being served. Other targets are
    refused with property=None. Content too large for one request is sent
    via INCR.
    """
    # Obsolete clients pass no property and expect the target name
    prop = event.property if event.property != X.NONE else event.target
    logger.debug("SelectionRequest target=%s property=%s requestor=%s",
        event.target, prop, event.requestor.id)

    if event.target == targets_atom:
        event.requestor.change_property(prop, Xatom.ATOM, 32, [targets_atom, target])
    elif event.target == target:
        if needs_incr_transfer(content, display):
            start_incr_send(display, event, prop, content, pending, incr_atom)
        else:
            event.requestor.change_property(prop, target, 8, content)
    else:
        prop = X.NONE

    send_selection_notify(display, event, prop)


def send_selection_notify(display: Display, event: SelectionRequest, prop: int) -> None:
    """Tell the requestor that its request was answered in prop."""
    from Xlib.protocol.event import SelectionNotify as SelectionNotifyEvent
    event.requestor.send_event(
        SelectionNotifyEvent(
            time=event.time,
            requestor=event.requestor.id,
            selection=event.selection,
            target=event.target,
            property=prop,
        ),
        event_mask=0,
    )
    display.flush()
