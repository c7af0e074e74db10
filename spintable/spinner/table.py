"""Spin table: concurrent tasks rendered as a grid of rows and columns.

Display format::

    Service         Progress             Health
    --------------- -------------------- ----------
    Service A       ✓ Started            ⠹ Probing…
    Service B       ⠼ Starting...        ⠼ Waiting

The header and row titles are drawn once. Each tick moves the cursor up
to the first row, jumps to every cell's start column and reprints it
padded to the column width, then leaves the cursor below the table so
later output (such as a failure report) never lands inside it.

Example:
    >>> columns = [("Service", 15), ("Progress", 20)]
    >>> with SpinTable(columns) as table:
    ...     row = table.add("Service A")
    ...     row.add("Starting...", lambda task: start_service("a"))
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TextIO

from spintable.spinner.group import SpinGroup
from spintable.spinner.task import (
    FinalGlyph,
    SpinTask,
    TitleSource,
    Work,
    default_final_glyph,
)
from spintable.text.ansi import (
    RESET,
    cursor_down,
    cursor_horizontal_absolute,
    cursor_up,
    next_line,
)
from spintable.text.markup import resolve_text
from spintable.text.width import display_width
from spintable.utils.errors import ConfigurationError, TooManyCellsError
from spintable.utils.logging import log_message

# Columns are separated by a single space
CELL_GAP = 1
RULE_CHAR = "-"


@dataclass(frozen=True)
class Column:
    """A table column: its header title and its width in display columns."""

    title: str
    width: int

    def __post_init__(self) -> None:
        if not isinstance(self.width, int) or self.width <= 0:
            raise ConfigurationError(
                f"Column '{self.title}' width must be a positive integer, got {self.width!r}"
            )

    @classmethod
    def coerce(cls, spec: Column | Mapping[str, Any] | tuple[str, int]) -> Column:
        """Build a Column from a Column, a ``{"title", "width"}`` mapping or a tuple."""
        if isinstance(spec, Column):
            return spec
        if isinstance(spec, Mapping):
            try:
                return cls(str(spec["title"]), spec["width"])
            except KeyError as e:
                raise ConfigurationError(f"Column spec {spec!r} is missing {e}") from e
        try:
            title, width = spec
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid column spec: {spec!r}") from e
        return cls(str(title), width)


class TableCell(SpinTask):
    """A task that renders into one cell of a SpinTable.

    Attributes:
        row: Index of the row the cell belongs to.
        column: 1-based column index (column 0 holds row titles).
        width: Configured width of the column.
        table: The owning table.
    """

    def __init__(
        self,
        title: TitleSource,
        work: Work,
        *,
        row: int,
        column: int,
        width: int,
        table: SpinTable,
        **options: Any,
    ) -> None:
        # Set before the worker thread starts
        self.row = row
        self.column = column
        self.width = width
        self.table = table
        super().__init__(title, work, **options)

    @property
    def debrief_title(self) -> str:
        """``"<row title> - <column title>"``, which names the cell uniquely."""
        row_title = self.table.rows[self.row].title
        return f"{row_title} - {self.table.columns[self.column].title}"

    def render(self, index: int, force: bool = True, width: int | None = None) -> str:
        """Render the cell; the available width is always the column's."""
        return super().render(index, force, width=self.width)

    def _line_start(self) -> str:
        return cursor_horizontal_absolute(self.start_column)

    @property
    def start_column(self) -> int:
        """1-based terminal column where this cell begins."""
        preceding = self.table.columns[: self.column]
        return 1 + sum(column.width + CELL_GAP for column in preceding)

    def _full_render(self, index: int, width: int | None) -> str:
        prefix = self._line_start() + self.glyph(index) + RESET + " "
        source = self._title
        title = source() if callable(source) else source
        truncation_width = self.width - display_width(prefix)
        rendered = prefix + resolve_text(title, truncate_to=truncation_width)
        # Pad so a shorter title overwrites a longer previous one
        padding = self.width - display_width(rendered)
        return rendered + " " * max(padding, 0)


class Row:
    """One table row: a title in column 0 and up to ``len(columns) - 1`` cells.

    Cells added before the row is attached to its table (from a row
    builder) are held back and registered with the table on attach.
    """

    def __init__(self, index: int, title: str, table: SpinTable) -> None:
        self.index = index
        self.title = title
        self.table = table
        self.cells: list[TableCell] = []
        self._attached = False
        self._lock = threading.Lock()

    def _attach(self) -> None:
        with self._lock:
            self._attached = True
            pending = list(self.cells)
        for cell in pending:
            self.table._register(cell)

    def _discard(self) -> None:
        """Interrupt cells started by a builder that failed."""
        with self._lock:
            pending = list(self.cells)
            self.cells.clear()
        for cell in pending:
            cell.interrupt()

    @property
    def max_cells(self) -> int:
        return len(self.table.columns) - 1

    def add(
        self,
        title: TitleSource,
        work: Work,
        *,
        final_glyph: FinalGlyph = default_final_glyph,
        merged_output: bool = False,
        duplicate_output_to: TextIO | None = None,
        always_full_render: bool = False,
    ) -> TableCell:
        """Start ``work`` in the next free column of this row.

        Raises:
            TooManyCellsError: If every column already has a cell; nothing
                is started and the row is left unchanged.
        """
        with self._lock:
            column = len(self.cells) + 1
            if column > self.max_cells:
                raise TooManyCellsError(self.index, self.max_cells)

            cell = TableCell(
                title,
                work,
                row=self.index,
                column=column,
                width=self.table.columns[column].width,
                table=self.table,
                final_glyph=final_glyph,
                merged_output=merged_output,
                duplicate_output_to=duplicate_output_to,
                always_full_render=always_full_render,
                glyphs=self.table._glyphs,
            )
            self.cells.append(cell)
            attached = self._attached
        if attached:
            self.table._register(cell)
        return cell

    def __repr__(self) -> str:
        return f"<Row {self.index} {self.title!r} cells={len(self.cells)}>"


class SpinTable(SpinGroup):
    """A SpinGroup laid out as rows of cells under named columns.

    Column 0 is the row-title column; cells fill columns 1 and up.
    Rows must be added before ``wait()`` since the header and row titles
    are drawn once when it starts.
    """

    def __init__(
        self,
        columns: Sequence[Column | Mapping[str, Any] | tuple[str, int]],
        **options: Any,
    ) -> None:
        if not columns:
            raise ConfigurationError("A spin table needs at least one column")
        self.columns: list[Column] = [Column.coerce(spec) for spec in columns]
        self.rows: list[Row] = []
        self._header_drawn = False
        super().__init__(**options)

    def add(  # type: ignore[override]
        self,
        title: str,
        build: Callable[[Row], object] | None = None,
    ) -> Row:
        """Add a row; ``build(row)`` may add its cells right away.

        If ``build`` raises, the row is not added, cells it already started
        are interrupted, and the error propagates.
        """
        with self._lock:
            row = Row(len(self.rows), title, self)
            if build is not None:
                try:
                    build(row)
                except BaseException:
                    row._discard()
                    log_message(f"Row builder failed, row {title!r} discarded")
                    raise
            self.rows.append(row)
            row._attach()
        return row

    def _register(self, cell: TableCell) -> None:
        with self._lock:
            self._tasks.append(cell)

    def header(self) -> str:
        """Column titles, dash rule and row titles, one per line."""
        titles = " " * CELL_GAP
        lines = [
            titles.join(_ljust(column.title, column.width) for column in self.columns),
            titles.join(RULE_CHAR * column.width for column in self.columns),
        ]
        lines.extend(row.title for row in self.rows)
        return "\n".join(lines) + "\n"

    def _before_wait(self) -> None:
        with self._lock:
            if self._header_drawn:
                return
            self._write(self.header())
            self._header_drawn = True
            log_message(f"Spin table started: {len(self.rows)} rows x {len(self.columns)} columns")

    def _render_frame(self, index: int, force: bool) -> tuple[str, bool]:
        """Render every cell at its grid position. Caller holds the group lock."""
        all_done = True
        parts = [cursor_up(len(self.rows))]
        rows_up = len(self.rows)
        try:
            for row in self.rows:
                for cell in row.cells:
                    if not cell.check():
                        all_done = False
                    parts.append(cell.render(index, force))
                parts.append(next_line())
                rows_up -= 1
        finally:
            # Back to the bottom left, below the table
            parts.append(cursor_down(rows_up))
            parts.append(cursor_horizontal_absolute(1))
        return "".join(parts), all_done


def _ljust(text: str, width: int) -> str:
    """Left-justify by display width rather than by character count."""
    return text + " " * max(width - display_width(text), 0)


__all__ = [
    "CELL_GAP",
    "Column",
    "Row",
    "SpinTable",
    "TableCell",
]
