"""Process-wide pause switch shared by every spin group and table.

Pausing has to silence every render loop in the process, not only one
group's, so the flag lives in a single coordinator created at import
time. Render loops take the coordinator's lock before their own group
lock; ``pausing()`` takes the same lock to flip the flag, so once it
returns no loop anywhere is mid-frame and none will draw until resumed.

Example:
    >>> with pausing():
    ...     print("safe to print while spinners are running")
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import TypeVar

from spintable.utils.logging import log_message

T = TypeVar("T")


class PauseCoordinator:
    """A paused flag guarded by its own lock.

    Nested pauses restore the value that was in effect when they began,
    so an inner ``pausing()`` never resumes rendering that an outer one
    still expects to be paused.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._paused = False

    @property
    def lock(self) -> threading.Lock:
        """Lock render loops hold while they check the flag and draw."""
        return self._lock

    @property
    def paused(self) -> bool:
        """Current flag value. Render loops read it while holding ``lock``."""
        return self._paused

    @contextmanager
    def pausing(self) -> Iterator[None]:
        """Pause all render loops for the duration of the block."""
        with self._lock:
            previous = self._paused
            self._paused = True
        log_message("Spinners paused")
        try:
            yield
        finally:
            with self._lock:
                self._paused = previous
            if not previous:
                log_message("Spinners resumed")

    def pause(self, func: Callable[..., T], *args: object, **kwargs: object) -> T:
        """Call ``func`` with rendering paused and return its result."""
        with self.pausing():
            return func(*args, **kwargs)


_coordinator = PauseCoordinator()


def get_pause_coordinator() -> PauseCoordinator:
    """The coordinator shared by every group that was not given its own."""
    return _coordinator


def pausing() -> AbstractContextManager[None]:
    """Pause every render loop in the process while the block runs."""
    return _coordinator.pausing()


def pause_all(func: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Run ``func`` with every render loop paused and return its result."""
    return _coordinator.pause(func, *args, **kwargs)


__all__ = [
    "PauseCoordinator",
    "get_pause_coordinator",
    "pausing",
    "pause_all",
]
