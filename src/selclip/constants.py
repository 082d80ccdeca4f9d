#!/usr/bin/env python3
"""Timing and protocol constants for selclip.

Every timeout below can be overridden per call by the keyword argument of
the same purpose; these are the defaults used by the public API and CLI.
"""

# Seconds a write call waits for the binding to confirm ownership.
WRITE_TIMEOUT: float = 5.0

# Seconds between two clipboard reads of a watch session.
WATCH_INTERVAL: float = 1.0

# Seconds the X11 binding waits for the selection owner to answer a read.
READ_TIMEOUT: float = 2.0

# Number of attempts at opening the X11 display before giving up.
DISPLAY_OPEN_ATTEMPTS: int = 42

# Property on our hidden window that receives converted selection data.
DATA_PROPERTY: str = "SELCLIP_DATA"
