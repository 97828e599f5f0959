"""In-memory tables, CSV loading and saving, and sub-table views."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .utils import is_greater, quicksort_table

_TOTAL_WIDTH = 120


class TableLoadError(Exception):
    """Raised when a CSV file cannot be loaded.

    ``partial`` holds whatever was read before the failure, or None when
    nothing could be read at all.
    """

    def __init__(self, message: str, partial: Table | None = None) -> None:
        super().__init__(message)
        self.partial = partial


@dataclass
class SortRule:
    """Column and direction used when sorting or inserting sorted."""

    ascending: bool = True
    column_index: int = 0


def _cell(value: str, width: int) -> str:
    if len(value) <= width:
        return value + " " * (width - len(value))
    head = value[: width - 3] if width >= 3 else value
    return head + "..."


def _render(column_count: int, labelled: Sequence[tuple[int, Sequence[str]]]) -> str:
    width = _TOTAL_WIDTH // (column_count + 1)
    bar = "─" * width
    separator = "├─" + (bar + "─┼─") * column_count + bar + "─┤"
    parts = ["┌─" + (bar + "─┬─") * column_count + bar + "─┐\n"]
    for position, (label, row) in enumerate(labelled):
        cells = [row[j] if j < len(row) else "" for j in range(column_count)]
        line = "│ " + _cell(str(label), width) + " │ "
        line += "".join(_cell(value, width) + " │ " for value in cells)
        if position < len(labelled) - 1:
            line += "\n" + separator
        parts.append(line + "\n")
    parts.append("└─" + (bar + "─┴─") * column_count + bar + "─┘\n")
    return "".join(parts)


def _write_rows(path: str | os.PathLike[str], rows: Iterable[Sequence[str]], width: int) -> None:
    with open(path, "w", encoding="utf-8", newline="") as handle:
        for row in rows:
            handle.write(",".join(row[:width]) + "\n")


class Table:
    """A table whose first row holds the column names."""

    def __init__(self, columns: Iterable[str]) -> None:
        self.rows: list[list[str]] = [list(columns)]
        self.sort_rule = SortRule()

    @classmethod
    def _from_rows(cls, rows: list[list[str]]) -> Table:
        table = cls(())
        table.rows = rows
        return table

    @property
    def columns(self) -> list[str]:
        """The header row."""
        return self.rows[0] if self.rows else []

    def get_col_index(self, name: str) -> int:
        """Return the position of column ``name``; raise KeyError if absent."""
        try:
            return self.columns.index(name)
        except ValueError:
            raise KeyError(name) from None

    def render(self) -> str:
        """Return the table drawn as a box, each row labelled by its index."""
        return _render(len(self.columns), list(enumerate(self.rows)))

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the table, header included, as comma-separated lines."""
        _write_rows(path, self.rows, len(self.columns))

    def set(self, column: str, value: str) -> None:
        """Set ``column`` to ``value`` in every data row (first column if unknown)."""
        index = self.columns.index(column) if column in self.columns else 0
        for row in self.rows[1:]:
            row[index] = value

    def sort(self) -> None:
        """Sort the data rows by the current sort rule."""
        if not self.rows:
            return
        header, body = self.rows[0], self.rows[1:]
        rule = self.sort_rule
        self.rows = [header, *quicksort_table(body, rule.column_index, rule.ascending)]

    def insert(self, row: Sequence[str], sort: bool) -> None:
        """Add a row, at its sorted place if ``sort`` is set, else at the end."""
        new_row = list(row)
        rows = self.rows
        if len(rows) <= 1 or not sort:
            rows.append(new_row)
            return
        column = self.sort_rule.column_index
        ascending = self.sort_rule.ascending
        key = new_row[column]
        if ascending and is_greater(key, rows[-1][column]):
            rows.append(new_row)
            return
        low, high = 1, len(rows) - 1
        while low < high:
            mid = (high - low) // 2 + low
            if ascending:
                goes_before = is_greater(rows[mid][column], key)
            else:
                goes_before = is_greater(key, rows[mid][column])
            if goes_before:
                high = mid - 1
            else:
                low = mid + 1
        rows.insert(low, new_row)
        if low < len(rows) - 1:
            here, after = rows[low][column], rows[low + 1][column]
            if (ascending and is_greater(here, after)) or (
                not ascending and is_greater(after, here)
            ):
                rows[low], rows[low + 1] = rows[low + 1], rows[low]

    def colinsert(self, column: str) -> None:
        """Append an empty column named ``column``."""
        if not self.rows:
            self.rows.append([])
        self.rows[0].append(column)
        for row in self.rows[1:]:
            row.append("")

    def colerase(self, column: str) -> None:
        """Remove ``column`` from every row; raise KeyError if absent."""
        index = self.get_col_index(column)
        for row in self.rows:
            del row[index]


@dataclass
class SubTable:
    """A selection of data rows of a table, referenced by row index."""

    target: Table
    rows: list[int] = field(default_factory=list)

    def __init__(self, target: Table, rows: Iterable[int] = ()) -> None:
        self.target = target
        self.rows = list(rows)

    def render(self) -> str:
        """Return the selected rows drawn as a box, labelled by their index."""
        target_rows = self.target.rows
        return _render(
            len(self.target.columns), [(index, target_rows[index]) for index in self.rows]
        )

    def save(self, path: str | os.PathLike[str]) -> None:
        """Write the target's header and the selected rows as a CSV file."""
        target_rows = self.target.rows
        width = len(self.target.columns)
        _write_rows(path, [self.target.columns, *(target_rows[i] for i in self.rows)], width)

    def sort(self) -> None:
        """Order the selection by the target's sort rule."""
        rule = self.target.sort_rule
        keyed = [
            [self.target.rows[index][rule.column_index], str(index)] for index in self.rows
        ]
        self.rows = [int(index) for _, index in quicksort_table(keyed, 0, rule.ascending)]


def load_csv(path: str | os.PathLike[str]) -> Table:
    """Load a table from a ``.csv`` file.

    Cells are separated by commas; ``\\,`` and ``\\\\`` escape a comma and a
    backslash. A trailing empty cell is dropped. Raises TableLoadError.
    """
    name = os.fspath(path)
    if not name.endswith(".csv"):
        raise TableLoadError(f"(While trying to open {name}) File extension not supported")
    try:
        with open(name, encoding="utf-8", newline="") as handle:
            content = handle.read()
    except OSError as exc:
        raise TableLoadError(f"(While trying to open {name}) Cannot open file") from exc

    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()

    rows: list[list[str]] = []
    for number, line in enumerate(lines, start=1):
        row = [""]
        rows.append(row)
        position = 0
        while position < len(line):
            ch = line[position]
            if ch == "\\":
                if position == len(line) - 1:
                    raise TableLoadError(
                        f"(While trying to open {name}) Expected escape sequence "
                        f"character after \\ at line {number}",
                        Table._from_rows(rows),
                    )
                following = line[position + 1]
                if following in ("\\", ","):
                    row[-1] += following
                    position += 2
                    continue
            if ch == ",":
                row.append("")
            else:
                row[-1] += ch
            position += 1
        if row[-1] == "":
            row.pop()
        if len(rows) > 1 and len(row) != len(rows[0]):
            rows.pop()
            raise TableLoadError(
                f"(While trying to open {name}) Could not parse line {number} because "
                f"the number of columns ({len(row)}) does not equal the number of "
                f"columns in the header ({len(rows[0])})",
                Table._from_rows(rows),
            )
    return Table._from_rows(rows)