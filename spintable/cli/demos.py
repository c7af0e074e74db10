"""Demo workloads driven by the ``group`` and ``table`` commands.

The work functions only sleep and print, so the demos exercise the render
loops, output capture and debriefs without touching anything real.
"""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable

from rich.console import Console

from spintable.config.settings import Settings
from spintable.spinner.group import SpinGroup
from spintable.spinner.table import Row, SpinTable
from spintable.spinner.task import SpinTask

# Seconds a simulated step may take
STEP_RANGE = (0.2, 1.2)


def _pause_for(step_range: tuple[float, float] = STEP_RANGE) -> None:
    time.sleep(random.uniform(*step_range))


def simulated_work(
    name: str,
    *,
    steps: int = 3,
    fail: bool = False,
    step_range: tuple[float, float] = STEP_RANGE,
) -> Callable[[SpinTask], bool]:
    """Work that prints a line per step, optionally failing on the last one."""

    def work(task: SpinTask) -> bool:
        for step in range(1, steps + 1):
            task.raise_if_interrupted()
            print(f"{name}: step {step}/{steps}")
            _pause_for(step_range)
        if fail:
            raise RuntimeError(f"{name} failed on step {steps}")
        return True

    return work


def run_group_demo(
    task_count: int,
    *,
    fail: bool = False,
    console: Console | None = None,
    settings: Settings | None = None,
    step_range: tuple[float, float] = STEP_RANGE,
) -> bool:
    """Run ``task_count`` simulated tasks in a spin group.

    With ``fail`` set, the last task raises, which exercises the default
    failure report.
    """
    group = SpinGroup(console=console, settings=settings)
    for number in range(1, task_count + 1):
        is_last = number == task_count
        group.add(
            f"Task [bold]{number}[/bold] of {task_count}",
            simulated_work(f"task-{number}", fail=fail and is_last, step_range=step_range),
        )
    return group.wait()


class _Totals:
    """Finished-cell counters per column, shared by the worker threads."""

    def __init__(self, keys: list[str], row_count: int) -> None:
        self.row_count = row_count
        self.counts = dict.fromkeys(keys, 0)
        self.cells: list[SpinTask] = []
        self.lock = threading.Lock()

    def label(self, count: int) -> str:
        return f"{count}/{self.row_count} done"

    def increment(self, key: str) -> None:
        with self.lock:
            self.counts[key] += 1
            for cell, count in zip(self.cells, self.counts.values()):
                cell.update_title(self.label(count))


def _counting_work(
    totals: _Totals,
    key: str,
    step_range: tuple[float, float],
) -> Callable[[SpinTask], bool]:
    def work(task: SpinTask) -> bool:
        _pause_for(step_range)
        task.raise_if_interrupted()
        task.update_title("[green]Done[/green]")
        totals.increment(key)
        return True

    return work


def run_table_demo(
    row_count: int,
    column_count: int,
    *,
    console: Console | None = None,
    settings: Settings | None = None,
    step_range: tuple[float, float] = STEP_RANGE,
) -> bool:
    """Run a ``row_count`` x ``column_count`` grid of simulated services.

    A final "Totals" row counts finished cells per column by updating its
    own titles as the other cells complete.
    """
    columns = [("Service", 15)] + [(f"Stage {n}", 14) for n in range(1, column_count + 1)]
    table = SpinTable(columns, console=console, settings=settings)
    totals = _Totals([title for title, _ in columns[1:]], row_count)

    def build_totals(row: Row) -> None:
        for key in totals.counts:
            totals.cells.append(row.add(totals.label(0), _wait_for_column(table, totals, key)))

    def build_service(row: Row) -> None:
        for key in totals.counts:
            row.add("Starting...", _counting_work(totals, key, step_range))

    services = [f"Service {chr(ord('A') + n)}" for n in range(row_count)]
    # Held until the totals row exists, so no increment can miss its cells
    with totals.lock:
        for name in services:
            table.add(name, build_service)
        table.add("Totals", build_totals)
    return table.wait()


def _wait_for_column(table: SpinTable, totals: _Totals, key: str) -> Callable[[SpinTask], bool]:
    """Work for a totals cell: finish once its column is done in every service row."""
    column = list(totals.counts).index(key)

    def work(task: SpinTask) -> bool:
        cells = [row.cells[column] for row in table.rows[: totals.row_count]]
        while not all(cell.check() for cell in cells):
            task.raise_if_interrupted()
            time.sleep(0.05)
        return all(cell.success for cell in cells)

    return work


__all__ = [
    "simulated_work",
    "run_group_demo",
    "run_table_demo",
]
