"""Resolution of task titles to printable ANSI strings.

Titles are Rich markup (``"[bold]Build[/bold] api"``) or text that
already carries ANSI escapes. Both are turned into a Rich ``Text`` and
rendered through a private capture console, so the spinner renderer can
measure and truncate the exact bytes that will reach the terminal.
"""

from __future__ import annotations

from rich.console import Console
from rich.errors import MarkupError
from rich.text import Text

from spintable.text.width import truncate
from spintable.utils.logging import log_message

# Wide enough that Rich never wraps or crops a title
_RENDER_WIDTH = 10_000

_renderer = Console(
    force_terminal=True,
    color_system="truecolor",
    width=_RENDER_WIDTH,
    highlight=False,
    legacy_windows=False,
    soft_wrap=True,
)


def to_rich_text(text: str) -> Text:
    """Parse a title into Rich ``Text``.

    Strings containing escape characters are decoded as ANSI, anything
    else as Rich markup. Broken markup falls back to the literal string
    instead of raising, so one bad title cannot stop a render loop.
    """
    if "\x1b" in text:
        return Text.from_ansi(text, end="")
    try:
        return Text.from_markup(text, end="")
    except MarkupError as e:
        log_message(f"Invalid markup in title {text!r}: {e}")
        return Text(text, end="")


def resolve_text(text: str, truncate_to: int | None = None) -> str:
    """Render markup to an ANSI string, optionally truncated.

    Args:
        text: Rich markup or ANSI text.
        truncate_to: Display-column budget; ``None`` leaves the text whole.

    Returns:
        The printable string.
    """
    with _renderer.capture() as capture:
        _renderer.print(to_rich_text(text), end="")
    rendered = capture.get()
    if truncate_to is None:
        return rendered
    return truncate(rendered, truncate_to)


__all__ = [
    "resolve_text",
    "to_rich_text",
]
