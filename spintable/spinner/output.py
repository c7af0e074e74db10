"""Per-task output capture.

Each task owns a ``TaskOutput`` writer. While the task's work runs, the
writer is installed in the worker's execution context; ``print()`` and
friends reach it through an ``OutputRouter`` placed on ``sys.stdout`` and
``sys.stderr``. The router forwards writes from any context without a
writer (the render loop, the main program) to the real stream, so tasks
running side by side never see each other's output.
"""

from __future__ import annotations

import contextvars
import io
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Literal, TextIO

StreamName = Literal["stdout", "stderr"]

_current_writer: contextvars.ContextVar[TaskOutput | None] = contextvars.ContextVar(
    "spintable_task_output", default=None
)
_install_lock = threading.Lock()


class TaskOutput:
    """Buffers for the stdout/stderr a task produced.

    Attributes:
        merged: Whether stderr writes land in the stdout buffer.
        duplicate_to: Optional sink that receives every write verbatim.
    """

    def __init__(self, merged: bool = False, duplicate_to: TextIO | None = None) -> None:
        self.merged = merged
        self.duplicate_to = duplicate_to
        self._stdout = io.StringIO()
        self._stderr = io.StringIO()
        self._lock = threading.Lock()

    def write(self, data: str, stream: StreamName = "stdout") -> int:
        """Append ``data`` to the buffer for ``stream`` and duplicate it."""
        with self._lock:
            if stream == "stderr" and not self.merged:
                self._stderr.write(data)
            else:
                self._stdout.write(data)
        if self.duplicate_to is not None:
            self.duplicate_to.write(data)
        return len(data)

    @property
    def stdout(self) -> str:
        """Everything captured on stdout so far."""
        with self._lock:
            return self._stdout.getvalue()

    @property
    def stderr(self) -> str:
        """Everything captured on stderr so far (empty when merged)."""
        with self._lock:
            return self._stderr.getvalue()


class OutputRouter(io.TextIOBase):
    """Stand-in for ``sys.stdout``/``sys.stderr`` that routes by context.

    Byte writes through ``buffer`` are decoded with the stream encoding and
    routed the same way.
    """

    def __init__(self, stream: StreamName, passthrough: TextIO) -> None:
        super().__init__()
        self.stream = stream
        self.passthrough = passthrough
        self.buffer = RouterBuffer(self)

    def write(self, data: str) -> int:  # type: ignore[override]
        writer = _current_writer.get()
        if writer is None:
            return self.passthrough.write(data)
        return writer.write(data, self.stream)

    def flush(self) -> None:
        writer = _current_writer.get()
        if writer is None:
            self.passthrough.flush()
        elif writer.duplicate_to is not None:
            writer.duplicate_to.flush()

    def close(self) -> None:
        # The wrapped stream belongs to whoever installed it
        pass

    def isatty(self) -> bool:
        return self.passthrough.isatty()

    def fileno(self) -> int:
        return self.passthrough.fileno()

    @property
    def encoding(self) -> str:  # type: ignore[override]
        return getattr(self.passthrough, "encoding", "utf-8")

    def writable(self) -> bool:
        return True


class RouterBuffer(io.RawIOBase):
    """Binary side of an ``OutputRouter``, for ``sys.stdout.buffer.write``."""

    def __init__(self, router: OutputRouter) -> None:
        super().__init__()
        self.router = router

    def write(self, data: bytes) -> int:  # type: ignore[override]
        writer = _current_writer.get()
        raw = getattr(self.router.passthrough, "buffer", None)
        if writer is None and raw is not None:
            self.router.passthrough.flush()
            return raw.write(data)
        self.router.write(bytes(data).decode(self.router.encoding or "utf-8", "replace"))
        return len(data)

    def flush(self) -> None:
        self.router.flush()

    def close(self) -> None:
        pass

    def writable(self) -> bool:
        return True


def install_router() -> None:
    """Place routers on ``sys.stdout`` and ``sys.stderr`` if not already there.

    Idempotent. Whatever stream is current becomes the passthrough, so a
    stream swapped in later (by pytest, for example) is wrapped again the
    next time a task starts.
    """
    with _install_lock:
        if not isinstance(sys.stdout, OutputRouter):
            sys.stdout = OutputRouter("stdout", sys.stdout)
        if not isinstance(sys.stderr, OutputRouter):
            sys.stderr = OutputRouter("stderr", sys.stderr)


def uninstall_router() -> None:
    """Restore the streams that the routers wrapped."""
    with _install_lock:
        if isinstance(sys.stdout, OutputRouter):
            sys.stdout = sys.stdout.passthrough
        if isinstance(sys.stderr, OutputRouter):
            sys.stderr = sys.stderr.passthrough


@contextmanager
def capturing(writer: TaskOutput) -> Iterator[TaskOutput]:
    """Send this context's stdout/stderr writes to ``writer``.

    Example:
        >>> out = TaskOutput()
        >>> with capturing(out):
        ...     print("hello")
        >>> out.stdout
        'hello\\n'
    """
    install_router()
    token = _current_writer.set(writer)
    try:
        yield writer
    finally:
        _current_writer.reset(token)


__all__ = [
    "TaskOutput",
    "OutputRouter",
    "RouterBuffer",
    "capturing",
    "install_router",
    "uninstall_router",
]
