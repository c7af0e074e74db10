"""A unit of work running on its own thread with a spinner status line.

A SpinTask starts executing as soon as it is constructed. The owning
group's render loop polls it with ``check()`` and asks it for the string
to print with ``render()``; the task itself never writes to the terminal.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any, TextIO

from rich.style import Style

from spintable.config.settings import Settings, get_settings
from spintable.spinner.output import TaskOutput, capturing
from spintable.text.ansi import RESET, cursor_horizontal_absolute, erase_line_end
from spintable.text.markup import resolve_text, to_rich_text
from spintable.text.width import display_width
from spintable.utils.errors import TaskInterruptedError
from spintable.utils.logging import log_message

# Title may be a plain string or a callable evaluated at every render
TitleSource = str | Callable[[], str]
FinalGlyph = Callable[[bool], str]
Work = Callable[["SpinTask"], Any]

CHECK = Style(color="green").render("✓")
CROSS = Style(color="red").render("✗")


def default_final_glyph(success: bool) -> str:
    """Green check mark for success, red cross for failure."""
    return CHECK if success else CROSS


def spinner_glyphs(settings: Settings | None = None) -> tuple[str, ...]:
    """Animation frames for the configured rune set, colored cyan."""
    cyan = Style(color="cyan")
    settings = settings if settings is not None else get_settings()
    return tuple(cyan.render(rune) for rune in settings.runes())


class SpinTask:
    """Runs ``work(task)`` on a dedicated thread and tracks its outcome.

    ``work`` returning ``False`` marks the task failed; any other return
    value marks it successful. An exception raised by ``work`` marks the
    task failed and is kept in ``exception`` for the debrief; it never
    leaves the worker thread.

    Attributes:
        final_glyph: Maps the outcome to the glyph shown once done.
        output: Captured stdout/stderr of the work.
        success: Outcome, meaningful once ``check()`` is True.
        exception: Error raised by the work, if any.
    """

    def __init__(
        self,
        title: TitleSource,
        work: Work,
        *,
        final_glyph: FinalGlyph = default_final_glyph,
        merged_output: bool = False,
        duplicate_output_to: TextIO | None = None,
        always_full_render: bool = False,
        glyphs: tuple[str, ...] | None = None,
    ) -> None:
        self._title = title
        self._work = work
        self.final_glyph = final_glyph
        self.glyphs = glyphs if glyphs is not None else spinner_glyphs()
        self.output = TaskOutput(merged=merged_output, duplicate_to=duplicate_output_to)

        self.success = False
        self.exception: BaseException | None = None
        self.started_at = time.monotonic()
        self.finished_at: float | None = None

        self._lock = threading.Lock()
        self._done = threading.Event()
        self._interrupted = threading.Event()
        self._force_full_render = False
        # Callable titles can change between frames without update_title()
        self._always_full_render = always_full_render or callable(title)

        self._thread = threading.Thread(
            target=self._run,
            name=f"spintask-{self.plain_title[:24]}",
            daemon=True,
        )
        self._thread.start()

    # =========================================================================
    # Worker side
    # =========================================================================

    def _run(self) -> None:
        log_message(f"Task started: {self.plain_title}")
        try:
            with capturing(self.output):
                result = self._work(self)
        except BaseException as exc:
            self.exception = exc
            self.success = False
            log_message(f"Task failed: {self.plain_title}: {type(exc).__name__}: {exc}")
        else:
            self.success = result is not False
            log_message(f"Task finished: {self.plain_title} (success={self.success})")
        finally:
            self.finished_at = time.monotonic()
            self._done.set()

    def update_title(self, title: TitleSource) -> None:
        """Replace the title; the next render repaints the whole line."""
        with self._lock:
            self._title = title
            self._force_full_render = True
            if callable(title):
                self._always_full_render = True

    @property
    def interrupted(self) -> bool:
        """Whether ``interrupt()`` has been called."""
        return self._interrupted.is_set()

    def raise_if_interrupted(self) -> None:
        """Checkpoint for work functions.

        Raises:
            TaskInterruptedError: If the task was interrupted.
        """
        if self._interrupted.is_set():
            raise TaskInterruptedError(f"Task interrupted: {self.plain_title}")

    # =========================================================================
    # Owner side
    # =========================================================================

    def interrupt(self) -> None:
        """Ask the work to stop at its next checkpoint."""
        if not self._interrupted.is_set():
            log_message(f"Task interrupted: {self.plain_title}")
        self._interrupted.set()

    def check(self) -> bool:
        """Whether the work has finished. Has no side effects."""
        return self._done.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def join(self, timeout: float | None = None) -> bool:
        """Block until the work finishes; returns ``check()``."""
        return self._done.wait(timeout)

    @property
    def title(self) -> str:
        """The current title, with callable titles evaluated."""
        with self._lock:
            source = self._title
        return source() if callable(source) else source

    @property
    def plain_title(self) -> str:
        """The title with markup and escapes stripped, for logs and debriefs."""
        source = self._title
        text = source() if callable(source) else source
        return to_rich_text(text).plain

    @property
    def debrief_title(self) -> str:
        """Title handed to debrief callbacks."""
        return self.title

    @property
    def stdout(self) -> str:
        return self.output.stdout

    @property
    def stderr(self) -> str:
        return self.output.stderr

    @property
    def duration(self) -> float:
        """Seconds the work has been (or was) running."""
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    # =========================================================================
    # Rendering
    # =========================================================================

    def glyph(self, index: int) -> str:
        """Spinner frame ``index`` while running, the final glyph once done."""
        if self._done.is_set():
            return self.final_glyph(self.success)
        return self.glyphs[index % len(self.glyphs)]

    def render(self, index: int, force: bool = True, width: int | None = None) -> str:
        """Build the string that repaints this task for frame ``index``.

        The full render rewrites glyph and title; the partial render only
        the glyph, which is all that changes between most frames.

        Args:
            index: Animation frame index.
            force: Repaint the title even if nothing changed.
            width: Columns available to the whole line (full render only).

        Returns:
            A string ready to write at the task's line.
        """
        with self._lock:
            try:
                if force or self._always_full_render or self._force_full_render:
                    return self._full_render(index, width)
                return self._partial_render(index)
            finally:
                self._force_full_render = False

    def _line_start(self) -> str:
        return cursor_horizontal_absolute(1)

    def _full_render(self, index: int, width: int | None) -> str:
        prefix = self._line_start() + self.glyph(index) + RESET + " "
        source = self._title
        title = source() if callable(source) else source
        if width is None:
            return prefix + resolve_text(title) + erase_line_end()
        truncation_width = width - display_width(prefix)
        return prefix + resolve_text(title, truncate_to=truncation_width) + erase_line_end()

    def _partial_render(self, index: int) -> str:
        return self._line_start() + self.glyph(index) + RESET

    def __repr__(self) -> str:
        state = "running" if not self.done else ("succeeded" if self.success else "failed")
        return f"<{type(self).__name__} {self.plain_title!r} {state}>"


__all__ = [
    "SpinTask",
    "CHECK",
    "CROSS",
    "default_final_glyph",
    "spinner_glyphs",
]
