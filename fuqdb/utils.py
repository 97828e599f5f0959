"""Value classification, comparison and table sorting helpers."""

from __future__ import annotations

from collections.abc import Sequence

_DIGITS = frozenset("0123456789")


def is_int(text: str) -> bool:
    """Return True if every character is a decimal digit (an empty string counts)."""
    return all(ch in _DIGITS for ch in text)


def is_float(text: str) -> bool:
    """Return True for digits with exactly one decimal point."""
    return text.count(".") == 1 and all(ch in _DIGITS or ch == "." for ch in text)


def is_number(text: str) -> bool:
    """Return True if the text is an integer or a float."""
    return is_int(text) or is_float(text)


def _lower(ch: str) -> str:
    return chr(ord(ch) + 32) if "A" <= ch <= "Z" else ch


def _char_at(text: str, index: int) -> str:
    return _lower(text[index]) if index < len(text) else "\0"


def is_greater(a: str, b: str) -> bool:
    """Compare two cell values: numerically if both are numbers, else case-insensitively.

    Raises ValueError when a number-like value cannot be converted.
    """
    if is_number(a) and is_number(b):
        if is_float(a) or is_float(b):
            return float(a) > float(b)
        return int(a) > int(b)
    i = 0
    while i < len(a) - 1 and i < len(b) - 1 and _lower(a[i]) == _lower(b[i]):
        i += 1
    return _char_at(a, i) > _char_at(b, i)


def quicksort_table(
    rows: Sequence[Sequence[str]], column: int, ascending: bool
) -> list[list[str]]:
    """Return the rows ordered by the value in ``column`` using a three-way quicksort."""
    result: list[list[str]] = []
    # Work items: (True, rows) to sort, (False, rows) to emit as they are.
    stack: list[tuple[bool, list[list[str]]]] = [(True, [list(row) for row in rows])]
    while stack:
        to_sort, chunk = stack.pop()
        if not to_sort or len(chunk) <= 1:
            result.extend(chunk)
            continue
        pivot = chunk[0][column]
        less: list[list[str]] = []
        equal: list[list[str]] = []
        greater: list[list[str]] = []
        for row in chunk:
            value = row[column]
            if is_greater(value, pivot):
                (greater if ascending else less).append(row)
            elif value == pivot:
                equal.append(row)
            else:
                (less if ascending else greater).append(row)
        stack.append((True, greater))
        stack.append((False, equal))
        stack.append((True, less))
    return result