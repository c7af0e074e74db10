"""Spin group: concurrent tasks rendered as a live vertical list.

Display format (one line per task, repainted in place)::

    ⠹ Installing dependencies
    ✓ Fetching sources
    ⠹ Compiling assets

Every task runs on its own worker thread. The thread that calls
``wait()`` is the only one that writes to the terminal: each tick it
takes the process pause lock, then the group lock, renders every task
into one string and writes it in a single call.

Example:
    >>> group = SpinGroup()
    >>> fetching = group.add("Fetching sources", lambda task: fetch())
    >>> compiling = group.add("Compiling assets", lambda task: compile_assets())
    >>> group.wait()
    True
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from types import TracebackType
from typing import TextIO

from rich.console import Console

from spintable.config.settings import Settings, get_settings
from spintable.spinner.debrief import print_failure_report
from spintable.spinner.pause import PauseCoordinator, get_pause_coordinator
from spintable.spinner.task import (
    FinalGlyph,
    SpinTask,
    TitleSource,
    Work,
    default_final_glyph,
    spinner_glyphs,
)
from spintable.text.ansi import cursor_down, cursor_up
from spintable.utils.console import console as default_console
from spintable.utils.logging import log_message

SuccessDebrief = Callable[[str, str, str], object]
FailureDebrief = Callable[[str, BaseException | None, str, str], object]


class SpinGroup:
    """A set of concurrently running tasks sharing one render loop.

    Attributes:
        auto_debrief: Whether ``wait()`` runs ``debrief()`` itself.
        console: Console whose file receives frames and debrief reports.
        settings: Tick period, glyph style and debrief placeholder.
    """

    def __init__(
        self,
        *,
        auto_debrief: bool | None = None,
        console: Console | None = None,
        settings: Settings | None = None,
        pause_coordinator: PauseCoordinator | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.auto_debrief = self.settings.auto_debrief if auto_debrief is None else auto_debrief
        self.console = console if console is not None else default_console
        self._pause = pause_coordinator if pause_coordinator is not None else get_pause_coordinator()

        self._tasks: list[SpinTask] = []
        # Reentrant: row builders and debrief callbacks may call back in
        self._lock = threading.RLock()
        self._glyphs = spinner_glyphs(self.settings)
        self._consumed_lines = 0
        self._full_render_requested = False
        self._success_debrief: SuccessDebrief | None = None
        self._failure_debrief: FailureDebrief | None = None
        self._start = time.monotonic()
        self.result: bool | None = None

    # =========================================================================
    # Setup
    # =========================================================================

    @property
    def tasks(self) -> list[SpinTask]:
        """Snapshot of the tasks in render order."""
        with self._lock:
            return list(self._tasks)

    def add(
        self,
        title: TitleSource,
        work: Work,
        *,
        final_glyph: FinalGlyph = default_final_glyph,
        merged_output: bool = False,
        duplicate_output_to: TextIO | None = None,
        always_full_render: bool = False,
    ) -> SpinTask:
        """Start ``work`` on a new thread and add it to the group.

        Args:
            title: Rich markup title, or a callable returning one.
            work: Called with the task; return False to report failure.
            final_glyph: Glyph to show once done, given the outcome.
            merged_output: Capture stderr into the stdout buffer.
            duplicate_output_to: Sink that also receives captured output.
            always_full_render: Repaint the title on every tick.

        Returns:
            The running task.
        """
        with self._lock:
            task = SpinTask(
                title,
                work,
                final_glyph=final_glyph,
                merged_output=merged_output,
                duplicate_output_to=duplicate_output_to,
                always_full_render=always_full_render,
                glyphs=self._glyphs,
            )
            self._tasks.append(task)
        return task

    def success_debrief(self, callback: SuccessDebrief) -> SuccessDebrief:
        """Set the callback run for each successful task by ``debrief()``.

        Called as ``callback(title, stdout, stderr)``. Returns the callback
        so this can be used as a decorator.
        """
        self._success_debrief = callback
        return callback

    def failure_debrief(self, callback: FailureDebrief) -> FailureDebrief:
        """Replace the default failure report.

        Called as ``callback(title, exception, stdout, stderr)``; exception
        is None when the work returned False. Returns the callback so this
        can be used as a decorator.
        """
        self._failure_debrief = callback
        return callback

    def request_full_render(self) -> None:
        """Repaint every title, not only glyphs, on the next tick."""
        with self._lock:
            self._full_render_requested = True

    # =========================================================================
    # Render loop
    # =========================================================================

    def wait(self) -> bool:
        """Animate until every task is done, then report.

        Returns:
            ``debrief()`` when auto_debrief is set, else ``all_succeeded()``.

        Raises:
            KeyboardInterrupt: Re-raised after every task was interrupted.
        """
        self._before_wait()
        index = 0
        force = True
        try:
            while True:
                all_done = self._tick(index, force)
                if all_done is None:
                    # Paused: no frame drawn and the animation does not advance
                    self.request_full_render()
                    time.sleep(self.settings.period)
                    continue
                force = False
                if all_done:
                    break
                index = (index + 1) % len(self._glyphs)
                time.sleep(self.settings.period)
        except KeyboardInterrupt:
            log_message("Wait interrupted, interrupting all tasks")
            for task in self.tasks:
                task.interrupt()
            raise

        if self.auto_debrief:
            return self.debrief()
        return self.all_succeeded()

    def _before_wait(self) -> None:
        """Hook run once before the first tick."""

    def _tick(self, index: int, force: bool) -> bool | None:
        """Draw one frame.

        Returns:
            None if rendering is paused, otherwise whether every task was
            done when it was drawn.
        """
        with self._pause.lock:
            if self._pause.paused:
                return None
            with self._lock:
                frame, all_done = self._render_frame(index, force or self._full_render_requested)
                self._full_render_requested = False
                self._write(frame)
        return all_done

    def _render_frame(self, index: int, force: bool) -> tuple[str, bool]:
        """Render all tasks as a vertical list. Caller holds the group lock."""
        width = self.console.width
        parts: list[str] = []
        all_done = True

        for position, task in enumerate(self._tasks):
            if not task.check():
                all_done = False

            if position >= self._consumed_lines:
                # First appearance: print the whole line and claim it
                parts.append(task.render(index, True, width=width) + "\n")
                self._consumed_lines += 1
            else:
                offset = self._consumed_lines - position
                parts.append(
                    cursor_up(offset)
                    + task.render(index, force, width=width)
                    + "\r"
                    + cursor_down(offset)
                )

        return "".join(parts), all_done

    def _write(self, frame: str) -> None:
        if not frame:
            return
        out = self.console.file
        out.write(frame)
        out.flush()

    # =========================================================================
    # Results
    # =========================================================================

    def all_succeeded(self) -> bool:
        """Whether every task succeeded. Only meaningful after ``wait()``."""
        with self._lock:
            return all(task.success for task in self._tasks)

    def debrief(self) -> bool:
        """Report every task's outcome in insertion order.

        Successful tasks go to the success callback if one is set. Failed
        tasks go to the failure callback, or get the default framed report
        with the exception, traceback and captured output.

        Returns:
            ``all_succeeded()``.
        """
        with self._lock:
            for task in self._tasks:
                title = task.debrief_title
                out = task.stdout
                err = task.stderr

                if task.success:
                    if self._success_debrief is not None:
                        self._success_debrief(title, out, err)
                    continue

                log_message(f"Debriefing failed task: {task.plain_title}")
                if self._failure_debrief is not None:
                    self._failure_debrief(title, task.exception, out, err)
                    continue

                print_failure_report(
                    self.console,
                    title,
                    task.exception,
                    out,
                    err,
                    elapsed=time.monotonic() - self._start,
                    placeholder=self.settings.empty_output_placeholder,
                )

            return self.all_succeeded()

    # =========================================================================
    # Context manager
    # =========================================================================

    def __enter__(self) -> SpinGroup:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Wait for the tasks on a clean exit; interrupt them otherwise."""
        if exc_type is None:
            self.result = self.wait()
            return
        for task in self.tasks:
            task.interrupt()


__all__ = [
    "SpinGroup",
    "SuccessDebrief",
    "FailureDebrief",
]
