#!/usr/bin/env python3
"""SelectionBinding implemented with python-xlib."""

from __future__ import annotations

from Xlib.error import DisplayError

from selclip.constants import READ_TIMEOUT
from selclip.x11_display import open_display
from selclip.x11_read import read_selection
from selclip.x11_serve import serve_selection


class XlibSelectionBinding:
    """Talks to the X server named by $DISPLAY.

    Attributes:
        read_timeout: Seconds a read waits for the selection owner.
    """

    def __init__(self, read_timeout: float = READ_TIMEOUT) -> None:
        self.read_timeout = read_timeout

    def test(self) -> int:
        try:
            display = open_display()
        except DisplayError:
            return -1
        display.close()
        return 0

    def read(self, target: str) -> tuple[int, bytes | None]:
        return read_selection(target, self.read_timeout)

    def write(self, target: str, data: bytes | None, handle: int) -> int:
        return serve_selection(target, data, handle)
