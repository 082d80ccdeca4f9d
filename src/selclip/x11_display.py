#!/usr/bin/env python3
"""X11 display and window helpers for the selection binding.

Each binding call opens its own display connection: the read path closes
it after one conversion, the ownership path keeps it for as long as it owns
the clipboard. python-xlib connections are not shared between threads.
"""

from __future__ import annotations

import os
import select
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from tenacity import retry, retry_if_exception_type, stop_after_attempt
from Xlib import X
from Xlib.error import DisplayError

from selclip.constants import DISPLAY_OPEN_ATTEMPTS

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event
    from Xlib.xobject.drawable import Window


@retry(
    stop=stop_after_attempt(DISPLAY_OPEN_ATTEMPTS),
    retry=retry_if_exception_type(DisplayError),
    reraise=True,
)
def open_display() -> Display:
    """Open a connection to the display named by $DISPLAY.

    Raises:
        DisplayError: If no connection could be made.
    """
    from Xlib.display import Display as XDisplay
    return XDisplay(os.environ.get("DISPLAY"))


def create_hidden_window(display: Display) -> Window:
    """Create a 1x1 unmapped window to own or receive selections.

    The window listens for PropertyNotify so that INCR transfers addressed
    to it can be followed.
    """
    screen = display.screen()
    return screen.root.create_window(
        0, 0, 1, 1, 0, screen.root_depth, event_mask=X.PropertyChangeMask,
    )


def next_event_before(display: Display, deadline: float) -> Event | None:
    """Return the next event, or None if none arrives before deadline.

    Args:
        display: The X11 display connection.
        deadline: time.monotonic() value after which to give up.
    """
    while display.pending_events() == 0:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        select.select([display], [], [], remaining)
    return display.next_event()


def wait_for_event(
    display: Display, deadline: float, matches: Callable[[Event], bool],
) -> Event | None:
    """Wait for the first event accepted by matches.

    Other events are discarded. Returns None on timeout.
    """
    while True:
        event = next_event_before(display, deadline)
        if event is None or matches(event):
            return event
