"""Utility modules for SPINTABLE.

This package contains:
- console: Rich-based terminal output utilities
- errors: Custom exceptions and exit codes
- logging: Logging configuration
"""

from spintable.utils.console import (
    console,
    console_err,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from spintable.utils.errors import (
    ConfigurationError,
    ExitCode,
    SpintableError,
    TaskInterruptedError,
    TooManyCellsError,
)
from spintable.utils.logging import get_logger, log_message, setup_logging

__all__ = [
    # Console
    "console",
    "console_err",
    "print_error",
    "print_success",
    "print_warning",
    "print_info",
    # Errors
    "ExitCode",
    "SpintableError",
    "ConfigurationError",
    "TooManyCellsError",
    "TaskInterruptedError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_message",
]
