"""Display-width measurement and truncation for ANSI-laden text.

Widths are counted in terminal columns rather than characters:

- escape sequences (SGR colors, cursor movement, OSC payloads) are 0 wide
- East Asian wide characters and emoji are 2 wide
- a zero-width joiner glues the following code point into the same
  cluster, so ``MAN + ZWJ + COOKING`` prints as a single 2-column glyph
- in an OSC 8 hyperlink only the visible label is counted

Malformed or unterminated sequences are treated as opaque zero-width
passthrough; nothing in this module raises on odd input.

Example:
    >>> truncate("foobar", 3)
    'fo\\x1b[0m…'
    >>> display_width("\\x1b[31mred\\x1b[0m")
    3
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from wcwidth import wcwidth

from spintable.text.ansi import HYPERLINK_CLOSE, RESET

TRUNCATION_GLYPH = "…"
TRUNCATION_GLYPH_WIDTH = 1

ZWJ = "\u200d"
_REGIONAL_INDICATORS = range(0x1F1E6, 0x1F200)

# Order matters: OSC and CSI must be tried before the generic two-byte form.
_ESCAPE_RE = re.compile(
    r"""
    \x1b\](?P<osc>[^\x07\x1b]*)(?:\x07|\x1b\\|(?=\x1b)|\Z)   # OSC ... BEL|ST
    | \x1b\[[0-?]*[ -/]*(?:[@-~]|\Z)                       # CSI
    | \x1b[@-Z\\-_]?                                       # two-byte or lone ESC
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class _Unit:
    """One display unit: a glyph cluster or a zero-width escape sequence."""

    start: int
    end: int
    width: int
    escape: bool = False
    # For OSC 8 sequences: True opens a link, False closes one
    link: bool | None = None


def _codepoint_width(char: str) -> int:
    width = wcwidth(char)
    return width if width > 0 else 0


def _osc_link_state(body: str) -> bool | None:
    """Return True/False for an OSC 8 opener/closer, None for other OSC."""
    if not body.startswith("8;"):
        return None
    parts = body.split(";", 2)
    uri = parts[2] if len(parts) > 2 else ""
    return bool(uri)


def _clusters(text: str, start: int, end: int) -> Iterator[_Unit]:
    """Split ``text[start:end]`` (no escapes) into glyph clusters."""
    cluster_start: int | None = None
    cluster_width = 0
    joined = False
    regional = False

    for index in range(start, end):
        char = text[index]
        width = _codepoint_width(char)
        is_regional = ord(char) in _REGIONAL_INDICATORS

        if cluster_start is not None and (width == 0 or joined or (regional and is_regional)):
            cluster_width = max(cluster_width, width)
            joined = char == ZWJ
            # A flag is exactly two regional indicators
            regional = False
            continue

        if cluster_start is not None:
            yield _Unit(cluster_start, index, cluster_width)
        cluster_start = index
        cluster_width = width
        joined = char == ZWJ
        regional = is_regional

    if cluster_start is not None:
        yield _Unit(cluster_start, end, cluster_width)


def _units(text: str) -> Iterator[_Unit]:
    """Iterate the display units of ``text`` in order."""
    position = 0
    for match in _ESCAPE_RE.finditer(text):
        if match.start() > position:
            yield from _clusters(text, position, match.start())
        osc = match.group("osc")
        yield _Unit(
            match.start(),
            match.end(),
            0,
            escape=True,
            link=_osc_link_state(osc) if osc is not None else None,
        )
        position = match.end()
    if position < len(text):
        yield from _clusters(text, position, len(text))


def display_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies when printed."""
    return sum(unit.width for unit in _units(text))


def hyperlink_label_width(text: str) -> int:
    """Total display width of the labels of all OSC 8 hyperlinks in ``text``.

    The URI payload of a link never counts; this lets callers size a
    prefix that contains links without truncating it.
    """
    in_link = False
    width = 0
    for unit in _units(text):
        if unit.escape:
            if unit.link is not None:
                in_link = unit.link
        elif in_link:
            width += unit.width
    return width


def truncate(text: str, max_width: int) -> str:
    """Truncate ``text`` so that it prints in at most ``max_width`` columns.

    Text that already fits is returned unchanged, trailing escape
    sequences included. Otherwise the longest prefix of whole clusters
    that leaves room for the truncation glyph is kept, every escape
    sequence inside that prefix is kept verbatim, and a style reset plus
    the truncation glyph are appended. A wide cluster that does not fit
    is dropped entirely.

    Args:
        text: Text possibly containing ANSI escapes and hyperlinks.
        max_width: Column budget for the result.

    Returns:
        ``text`` itself, or a truncated copy ending in ``RESET + "…"``.
    """
    width = display_width(text)
    if width == 0 or width <= max_width:
        return text

    budget = max_width - TRUNCATION_GLYPH_WIDTH
    if budget < 0:
        return ""

    used = 0
    in_link = False
    cut = len(text)
    for unit in _units(text):
        if unit.escape:
            if unit.link is not None:
                in_link = unit.link
            continue
        if used + unit.width > budget:
            cut = unit.start
            break
        used += unit.width

    closing = HYPERLINK_CLOSE if in_link else ""
    return text[:cut] + closing + RESET + TRUNCATION_GLYPH


__all__ = [
    "TRUNCATION_GLYPH",
    "TRUNCATION_GLYPH_WIDTH",
    "ZWJ",
    "display_width",
    "hyperlink_label_width",
    "truncate",
]
