"""Concurrent spinner components for SPINTABLE.

This package provides:
- SpinTask: one unit of work on its own thread, with captured output
- SpinGroup: tasks rendered as a live vertical list
- SpinTable: tasks rendered as a grid of rows and columns
- Pause coordination shared by every render loop in the process
"""

from spintable.spinner.debrief import build_failure_report, print_failure_report
from spintable.spinner.group import FailureDebrief, SpinGroup, SuccessDebrief
from spintable.spinner.output import TaskOutput, capturing
from spintable.spinner.pause import (
    PauseCoordinator,
    get_pause_coordinator,
    pause_all,
    pausing,
)
from spintable.spinner.table import Column, Row, SpinTable, TableCell
from spintable.spinner.task import CHECK, CROSS, SpinTask, default_final_glyph

__all__ = [
    # Tasks
    "SpinTask",
    "TaskOutput",
    "capturing",
    "CHECK",
    "CROSS",
    "default_final_glyph",
    # Groups
    "SpinGroup",
    "SuccessDebrief",
    "FailureDebrief",
    "build_failure_report",
    "print_failure_report",
    # Tables
    "SpinTable",
    "Row",
    "Column",
    "TableCell",
    # Pause
    "PauseCoordinator",
    "get_pause_coordinator",
    "pause_all",
    "pausing",
]
