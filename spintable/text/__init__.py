"""Text primitives for SPINTABLE.

This package contains:
- ansi: Cursor-control and hyperlink escape sequences
- markup: Rich markup resolution to ANSI strings
- width: Display-width measurement and truncation
"""

from spintable.text.ansi import (
    RESET,
    cursor_down,
    cursor_horizontal_absolute,
    cursor_up,
    erase_line_end,
    hyperlink,
    next_line,
)
from spintable.text.markup import resolve_text, to_rich_text
from spintable.text.width import (
    TRUNCATION_GLYPH,
    display_width,
    hyperlink_label_width,
    truncate,
)

__all__ = [
    # ANSI
    "RESET",
    "cursor_up",
    "cursor_down",
    "cursor_horizontal_absolute",
    "next_line",
    "erase_line_end",
    "hyperlink",
    # Markup
    "resolve_text",
    "to_rich_text",
    # Width
    "TRUNCATION_GLYPH",
    "display_width",
    "truncate",
    "hyperlink_label_width",
]
