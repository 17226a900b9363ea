"""Fixed-width text layout helpers for 40-column receipts."""

from __future__ import annotations

from kiosk_print.config import LINE_WIDTH


def pad_end(text: object, width: int) -> str:
    """Left-align text in a fixed-width cell, truncating when too long."""
    s = str(text)
    if len(s) >= width:
        return s[:width]
    return s + " " * (width - len(s))


def pad_start(text: object, width: int) -> str:
    """Right-align text in a fixed-width cell, truncating when too long."""
    s = str(text)
    if len(s) >= width:
        return s[:width]
    return " " * (width - len(s)) + s


def two_column(left: object, right: object, total_width: int = LINE_WIDTH) -> str:
    """
    Format a row with text flush left and flush right.

    Overlong rows keep both sides intact and are separated by a single space,
    so the row may run past ``total_width``.
    """
    left_text = str(left)
    right_text = str(right)
    padding = total_width - len(left_text) - len(right_text)
    return left_text + (" " * padding if padding > 0 else " ") + right_text + "\n"


def center(text: object, width: int = LINE_WIDTH) -> str:
    """Center text with leading spaces; text at least ``width`` long is kept as is."""
    s = str(text)
    if len(s) >= width:
        return s + "\n"
    return " " * ((width - len(s)) // 2) + s + "\n"


def rule(width: int = LINE_WIDTH) -> str:
    return "-" * width + "\n"
