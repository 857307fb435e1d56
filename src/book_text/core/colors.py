"""Color constants and parsing for book text.

Legacy single-character color codes map onto the classic 16-color palette.
Everything is expressed as rich Color values so spans can be handed to any
rich renderer unchanged.
"""

import string

from rich.color import Color

# Legacy code -> #RRGGBB
LEGACY_CODES: dict[str, str] = {
    "0": "#000000",  # black
    "1": "#0000AA",  # dark blue
    "2": "#00AA00",  # dark green
    "3": "#00AAAA",  # dark aqua
    "4": "#AA0000",  # dark red
    "5": "#AA00AA",  # dark purple
    "6": "#FFAA00",  # gold
    "7": "#AAAAAA",  # gray
    "8": "#555555",  # dark gray
    "9": "#5555FF",  # blue
    "a": "#55FF55",  # green
    "b": "#55FFFF",  # aqua
    "c": "#FF5555",  # red
    "d": "#FF55FF",  # light purple
    "e": "#FFFF55",  # yellow
    "f": "#FFFFFF",  # white
}

# List bullets render in black so only the glyph shape shows on the page.
BULLET_COLOR = Color.parse(LEGACY_CODES["0"])
GRAY = Color.parse(LEGACY_CODES["7"])
# Arrow appended when an external link closes.
MARKER_COLOR = GRAY
ERROR_COLOR = Color.parse(LEGACY_CODES["c"])


def legacy_color(code: str) -> Color | None:
    """Return the color for a single legacy code character, or None."""
    hex_value = LEGACY_CODES.get(code)
    if hex_value is None:
        return None
    return Color.parse(hex_value)


def parse_hex(value: str) -> Color:
    """Parse `RGB` or `RRGGBB` (no leading #) into a Color.

    Raises ValueError for anything that is not 3 or 6 hex digits.
    """
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6 or not all(ch in string.hexdigits for ch in value):
        raise ValueError(f"expected 3 or 6 hex digits, got {value!r}")
    rgb = int(value, 16)
    return Color.from_rgb((rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF)
