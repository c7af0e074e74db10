"""ANSI escape sequences used by the spinner renderers.

Cursor movement is produced by Rich's ``Control`` so the byte sequences
match what Rich itself emits. Columns are 1-based here, as in the
terminal's own CHA sequence.
"""

from rich.control import Control
from rich.segment import ControlType

ESC = "\x1b"

# Select Graphic Rendition reset
RESET = f"{ESC}[0m"

# OSC 8 hyperlink framing; ST is ESC backslash
HYPERLINK_OPEN = f"{ESC}]8;;"
STRING_TERMINATOR = f"{ESC}\\"
HYPERLINK_CLOSE = f"{HYPERLINK_OPEN}{STRING_TERMINATOR}"


def cursor_up(n: int = 1) -> str:
    """Move the cursor up ``n`` lines (empty string for ``n <= 0``)."""
    if n <= 0:
        return ""
    return str(Control.move(0, -n))


def cursor_down(n: int = 1) -> str:
    """Move the cursor down ``n`` lines (empty string for ``n <= 0``)."""
    if n <= 0:
        return ""
    return str(Control.move(0, n))


def cursor_horizontal_absolute(column: int = 1) -> str:
    """Move the cursor to a 1-based column of the current line."""
    return str(Control.move_to_column(max(column, 1) - 1))


def next_line() -> str:
    """Move the cursor to column 1 of the following line without scrolling."""
    return str(Control.move_to_column(0, 1))


def erase_line_end() -> str:
    """Erase from the cursor to the end of the line."""
    return str(Control((ControlType.ERASE_IN_LINE, 0)))


def hyperlink(url: str, label: str) -> str:
    """Wrap ``label`` in an OSC 8 terminal hyperlink pointing at ``url``."""
    return f"{HYPERLINK_OPEN}{url}{STRING_TERMINATOR}{label}{HYPERLINK_CLOSE}"


__all__ = [
    "ESC",
    "RESET",
    "HYPERLINK_OPEN",
    "HYPERLINK_CLOSE",
    "STRING_TERMINATOR",
    "cursor_up",
    "cursor_down",
    "cursor_horizontal_absolute",
    "next_line",
    "erase_line_end",
    "hyperlink",
]
