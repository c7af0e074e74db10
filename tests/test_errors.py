"""Tests for spintable.utils.errors module."""

import pytest

from spintable.utils.errors import (
    ConfigurationError,
    ExitCode,
    SpintableError,
    TaskInterruptedError,
    TooManyCellsError,
)


class TestExitCode:
    """Tests for ExitCode enum."""

    def test_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.TASK_FAILED == 2
        assert ExitCode.CONFIGURATION_ERROR == 3
        assert ExitCode.USER_CANCELLED == 130

    def test_is_int(self):
        assert isinstance(ExitCode.TASK_FAILED, int)


class TestSpintableError:
    """Tests for the base exception."""

    def test_default_exit_code(self):
        assert SpintableError("boom").exit_code == ExitCode.GENERAL_ERROR

    def test_custom_exit_code(self):
        error = SpintableError("boom", exit_code=ExitCode.TASK_FAILED)
        assert error.exit_code == ExitCode.TASK_FAILED

    def test_message(self):
        assert str(SpintableError("boom")) == "boom"


class TestSubclasses:
    """Tests for the specific error types."""

    def test_configuration_error(self):
        error = ConfigurationError("bad width")
        assert error.exit_code == ExitCode.CONFIGURATION_ERROR
        assert isinstance(error, ValueError)
        assert isinstance(error, SpintableError)

    def test_too_many_cells(self):
        error = TooManyCellsError(2, 3)
        assert error.row_index == 2
        assert error.max_cells == 3
        assert str(error) == "Too many columns for row 2 (max 3 cells)"
        assert error.exit_code == ExitCode.CONFIGURATION_ERROR

    def test_task_interrupted(self):
        error = TaskInterruptedError("stop")
        assert error.exit_code == ExitCode.USER_CANCELLED

    def test_catchable_as_base(self):
        with pytest.raises(SpintableError):
            raise TooManyCellsError(0, 1)
