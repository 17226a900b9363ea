"""ESC/POS control codes used by the document builders.

The bridge forwards these bytes verbatim to the printer, so the values must
not change.
"""

from __future__ import annotations

from types import MappingProxyType

ESC = "\x1b"
GS = "\x1d"

INIT = ESC + "@"
ALIGN_LEFT = ESC + "a\x00"
ALIGN_CENTER = ESC + "a\x01"
ALIGN_RIGHT = ESC + "a\x02"
BOLD_ON = ESC + "E\x01"
BOLD_OFF = ESC + "E\x00"
DOUBLE_HEIGHT = ESC + "!\x10"
# Bold + double width + double height.
DOUBLE_BOTH = ESC + "!\x38"
NORMAL_TEXT = ESC + "!\x00"
# Full cut.
CUT = GS + "V\x41\x00"
FEED3 = "\n\n\n"

COMMANDS = MappingProxyType(
    {
        "INIT": INIT,
        "ALIGN_LEFT": ALIGN_LEFT,
        "ALIGN_CENTER": ALIGN_CENTER,
        "ALIGN_RIGHT": ALIGN_RIGHT,
        "BOLD_ON": BOLD_ON,
        "BOLD_OFF": BOLD_OFF,
        "DOUBLE_HEIGHT": DOUBLE_HEIGHT,
        "DOUBLE_BOTH": DOUBLE_BOTH,
        "NORMAL_TEXT": NORMAL_TEXT,
        "CUT": CUT,
        "FEED3": FEED3,
    }
)
