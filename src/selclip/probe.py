#!/usr/bin/env python3
"""One-time clipboard availability check."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from selclip.binding import get_binding
from selclip.errors import UnavailableError

if TYPE_CHECKING:
    from selclip.binding import SelectionBinding

logger = logging.getLogger(__name__)

HELP_MESSAGE = """\
Failed to initialize the X11 display, and the clipboard will not work
properly. Installing the following dependency may help:

    apt install -y libx11-dev

If selclip runs without a frame buffer, such as on a cloud server, it may
also be necessary to install xvfb:

    apt install -y xvfb

and start a virtual frame buffer:

    Xvfb :99 -screen 0 1024x768x24 > /dev/null 2>&1 &
    export DISPLAY=:99.0
"""


def init(*, binding: SelectionBinding | None = None) -> None:
    """Check that the clipboard can be used.

    Call once at startup, before read(), write() or watch().

    Raises:
        UnavailableError: The display cannot be reached. The message explains
            how to provide one.
    """
    if binding is None:
        binding = get_binding()
    status = binding.test()
    if status != 0:
        logger.debug("Clipboard self-test failed with status %s", status)
        raise UnavailableError(HELP_MESSAGE)
