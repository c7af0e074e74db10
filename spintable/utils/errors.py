"""Custom exceptions and exit codes for SPINTABLE.

This module defines the exit codes and exception hierarchy used by the
spinner components and the demo CLI.
"""

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes reported by the command-line interface."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    TASK_FAILED = 2  # At least one task in a group or table failed
    CONFIGURATION_ERROR = 3
    USER_CANCELLED = 130


class SpintableError(Exception):
    """Base exception for SPINTABLE errors.

    All custom exceptions in this package inherit from this class.
    Each exception type has an associated exit code for proper error reporting.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class ConfigurationError(SpintableError, ValueError):
    """A group, table or setting was configured with invalid values.

    Raised when:
    - A table column has a non-positive width or a malformed spec
    - An environment setting cannot be parsed
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.CONFIGURATION_ERROR


class TooManyCellsError(ConfigurationError):
    """A table row received more cells than the table has columns for.

    Column 0 holds the row title, so a row accepts at most
    ``len(columns) - 1`` cells.
    """

    def __init__(self, row_index: int, max_cells: int) -> None:
        super().__init__(f"Too many columns for row {row_index} (max {max_cells} cells)")
        self.row_index = row_index
        self.max_cells = max_cells


class TaskInterruptedError(SpintableError):
    """Raised inside a task's work when the task was interrupted.

    Work functions call ``task.raise_if_interrupted()`` at their own
    checkpoints; the group interrupts every task when ``wait()`` is
    cancelled with Ctrl+C.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.USER_CANCELLED


__all__ = [
    "ExitCode",
    "SpintableError",
    "ConfigurationError",
    "TooManyCellsError",
    "TaskInterruptedError",
]
