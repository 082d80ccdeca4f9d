#!/usr/bin/env python3
"""Reading the CLIPBOARD selection over X11.

A read asks the selection owner to convert CLIPBOARD to the requested
target and store the result in a property on our own hidden window, then
waits for the SelectionNotify that says the property is ready.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from Xlib import X
from Xlib.error import ConnectionClosedError, DisplayError, XError

from selclip.binding import READ_UNAVAILABLE, READ_UNSUPPORTED
from selclip.constants import DATA_PROPERTY, READ_TIMEOUT
from selclip.x11_display import create_hidden_window, open_display, wait_for_event
from selclip.x11_incr import as_bytes, receive_incr

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window

logger = logging.getLogger(__name__)


def read_selection(target_name: str, timeout: float = READ_TIMEOUT) -> tuple[int, bytes | None]:
    """Read CLIPBOARD converted to target_name.

    Args:
        target_name: The selection target, e.g. "UTF8_STRING".
        timeout: Seconds to wait for the owner's answer.

    Returns:
        (length, data). Length is READ_UNAVAILABLE if the display cannot be
        opened and READ_UNSUPPORTED if the target atom does not exist. Data
        is None if the owner refused or did not answer.
    """
    try:
        display = open_display()
    except DisplayError as e:
        logger.debug("Cannot open display for read: %s", e)
        return READ_UNAVAILABLE, None
    try:
        return _convert_selection(display, target_name, timeout)
    except (ConnectionClosedError, XError) as e:
        logger.debug("Display failed during read of %s: %s", target_name, e)
        return READ_UNAVAILABLE, None
    finally:
        try:
            display.close()
        except ConnectionClosedError as e:
            logger.debug("Display already closed: %s", e)


def _convert_selection(
    display: Display, target_name: str, timeout: float,
) -> tuple[int, bytes | None]:
    window = create_hidden_window(display)
    selection = display.intern_atom("CLIPBOARD")
    prop = display.intern_atom(DATA_PROPERTY)
    # Only an existing atom can have been offered by an owner
    target = display.intern_atom(target_name, only_if_exists=True)
    if target == X.NONE:
        return READ_UNSUPPORTED, None

    window.convert_selection(selection, target, prop, X.CurrentTime)
    display.flush()

    def is_reply(event: Event) -> bool:
        return event.type == X.SelectionNotify and event.requestor.id == window.id

    event = wait_for_event(display, time.monotonic() + timeout, is_reply)
    if event is None:
        logger.debug("Timeout waiting for SelectionNotify for %s", target_name)
        return 0, None
    if event.property == X.NONE or event.selection != selection or event.property != prop:
        logger.debug("Selection owner refused %s", target_name)
        return 0, None

    data = read_selection_property(display, window, prop, target, timeout)
    if data is None:
        return 0, None
    return len(data), data


def read_selection_property(
    display: Display, window: Window, prop: int, target: int, timeout: float,
) -> bytes | None:
    """Read and delete the converted selection from window.

    Follows an INCR transfer if the owner started one.

    Returns:
        The content, or None if the property is missing or of another type.
    """
    value = window.get_full_property(prop, X.AnyPropertyType)
    window.delete_property(prop)
    display.flush()
    if value is None:
        logger.debug("Selection property was missing")
        return None

    if value.property_type == display.intern_atom("INCR"):
        return receive_incr(display, window, prop, timeout)
    if value.property_type != target:
        logger.debug("Selection property has type %s, wanted %s",
            value.property_type, target)
        return None
    return as_bytes(value.value)
