"""Cross-process clipboard access for X11.

    import selclip

    selclip.init()
    session = selclip.write(selclip.Format.TEXT, b"hello")
    assert selclip.read(selclip.Format.TEXT) == b"hello"
    session.wait()  # returns once another client owns the clipboard
"""

from selclip.errors import ClipboardError, UnavailableError, UnsupportedError, WriteTimeoutError
from selclip.formats import Format
from selclip.ownership import OwnershipSession, write
from selclip.probe import init
from selclip.reader import read
from selclip.watcher import WatchSession, watch

__all__ = [
    "ClipboardError",
    "Format",
    "OwnershipSession",
    "UnavailableError",
    "UnsupportedError",
    "WatchSession",
    "WriteTimeoutError",
    "init",
    "read",
    "watch",
    "write",
]
