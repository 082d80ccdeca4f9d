#!/usr/bin/env python3
"""Clipboard content formats and their X11 target names."""

from __future__ import annotations

import enum


class Format(enum.Enum):
    """Kind of content held by the clipboard."""

    TEXT = "text"
    IMAGE = "image"


_TARGETS: dict[Format, str] = {
    Format.TEXT: "UTF8_STRING",
    Format.IMAGE: "image/png",
}


def resolve_format(fmt: object) -> str | None:
    """Return the X11 target name for fmt, or None if it is unsupported.

    Args:
        fmt: A Format member. Anything else is treated as unsupported.

    Returns:
        The selection target name, e.g. "UTF8_STRING".
    """
    if not isinstance(fmt, Format):
        return None
    return _TARGETS.get(fmt)
