"""Default failure report printed when a task fails and no callback is set.

Display format::

    ╭─ Task Failed: Deploy api ───────────────────────────╮
    │ ValueError: connection refused                       │
    │ <traceback>                                          │
    │ ────────────────────── STDOUT ────────────────────── │
    │ (empty)                                              │
    │ ────────────────────── STDERR ────────────────────── │
    │ retrying...                                          │
    ╰──────────────────────────────────────────── 2.31s ──╯
"""

from __future__ import annotations

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text
from rich.traceback import Traceback

from spintable.text.markup import to_rich_text


def stream_or_placeholder(captured: str | None, placeholder: str) -> str:
    """Captured stream text, or ``placeholder`` when it is blank."""
    if captured is None or not captured.strip():
        return placeholder
    return captured.rstrip("\n")


def build_failure_report(
    title: str,
    exception: BaseException | None,
    out: str,
    err: str,
    *,
    elapsed: float | None = None,
    placeholder: str = "(empty)",
) -> Panel:
    """Build the framed report for one failed task.

    Args:
        title: Task title (Rich markup or ANSI).
        exception: Error raised by the work, None if it returned False.
        out: Captured stdout.
        err: Captured stderr.
        elapsed: Seconds since the group started, shown in the frame.
        placeholder: Text substituted for blank streams.

    Returns:
        A red Rich Panel.
    """
    parts: list[RenderableType] = []

    if exception is not None:
        parts.append(Text(f"{type(exception).__name__}: {exception}", style="bold"))
        if exception.__traceback__ is not None:
            parts.append(
                Traceback.from_exception(
                    type(exception),
                    exception,
                    exception.__traceback__,
                    show_locals=False,
                )
            )

    parts.append(Rule("STDOUT", style="red"))
    parts.append(Text(stream_or_placeholder(out, placeholder)))
    parts.append(Rule("STDERR", style="red"))
    parts.append(Text(stream_or_placeholder(err, placeholder)))

    header = Text("Task Failed: ")
    header.append_text(to_rich_text(title))
    return Panel(
        Group(*parts),
        title=header,
        title_align="left",
        subtitle=f"{elapsed:.2f}s" if elapsed is not None else None,
        subtitle_align="right",
        border_style="red",
    )


def print_failure_report(
    console: Console,
    title: str,
    exception: BaseException | None,
    out: str,
    err: str,
    *,
    elapsed: float | None = None,
    placeholder: str = "(empty)",
) -> None:
    """Print the framed report for one failed task to ``console``."""
    console.print(
        build_failure_report(
            title,
            exception,
            out,
            err,
            elapsed=elapsed,
            placeholder=placeholder,
        )
    )


__all__ = [
    "build_failure_report",
    "print_failure_report",
    "stream_or_placeholder",
]
