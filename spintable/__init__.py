"""SPINTABLE - Concurrent spinner groups and tables for the terminal.

This package runs units of work on worker threads while repainting their
status in place, either as a vertical list (SpinGroup) or as a grid of
rows and columns (SpinTable). It also exposes the ANSI/Unicode aware width
and truncation primitives the renderer is built on.
"""

__version__ = "0.1.0"
SCRIPT_NAME = "SPINTABLE"

from spintable.config.settings import Settings, get_settings  # noqa: E402
from spintable.spinner.group import SpinGroup  # noqa: E402
from spintable.spinner.pause import PauseCoordinator, pause_all, pausing  # noqa: E402
from spintable.spinner.table import Column, Row, SpinTable, TableCell  # noqa: E402
from spintable.spinner.task import SpinTask  # noqa: E402
from spintable.text.ansi import hyperlink  # noqa: E402
from spintable.text.markup import resolve_text  # noqa: E402
from spintable.text.width import display_width, hyperlink_label_width, truncate  # noqa: E402
from spintable.utils.errors import (  # noqa: E402
    ConfigurationError,
    SpintableError,
    TaskInterruptedError,
    TooManyCellsError,
)

__all__ = [
    "__version__",
    "SCRIPT_NAME",
    # Text
    "display_width",
    "truncate",
    "hyperlink_label_width",
    "hyperlink",
    "resolve_text",
    # Spinners
    "SpinTask",
    "SpinGroup",
    "SpinTable",
    "Row",
    "Column",
    "TableCell",
    "PauseCoordinator",
    "pause_all",
    "pausing",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "SpintableError",
    "ConfigurationError",
    "TooManyCellsError",
    "TaskInterruptedError",
]
