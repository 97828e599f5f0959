"""Line preprocessing and tokenizing for the query language."""

from __future__ import annotations

from collections.abc import Sequence

from .script import OPERATORS

_QUOTES = "\"'"


def get(tokens: Sequence[str], index: int) -> str:
    """Return the token at ``index``, or an empty string when out of range."""
    if 0 <= index < len(tokens):
        return tokens[index]
    return ""


def remove_comments(text: str) -> str:
    """Cut the line at the first ``#`` that is not inside a double-quoted string."""
    in_string = False
    previous = ""
    for position, ch in enumerate(text):
        if ch == '"' and previous != "\\":
            in_string = not in_string
        if not in_string and ch == "#":
            return text[:position]
        previous = ch
    return text


def filter_char(text: str, char: str) -> str:
    """Return the text with every occurrence of ``char`` removed."""
    return text.replace(char, "")


def normalize(text: str, char: str, ignore_strings: bool = False) -> str:
    """Collapse runs of ``char`` into a single one.

    With ``ignore_strings`` set, quoted parts are left untouched.
    Example: normalize("aaaaaa bbbb ccc", "a") -> "a bbbb ccc".
    """
    result: list[str] = []
    in_string = False
    in_run = False
    for ch in text:
        if ignore_strings and ch in _QUOTES:
            in_string = not in_string
        if in_string:
            result.append(ch)
            in_run = False
            continue
        if ch == char:
            if in_run:
                continue
            in_run = True
        else:
            in_run = False
        result.append(ch)
    return "".join(result)


def count_chars(text: str, char: str, ignore_strings: bool = False) -> int:
    """Count occurrences of ``char`` outside double-quoted strings."""
    count = 0
    in_string = False
    previous = ""
    for ch in text:
        if ch == '"' and previous != "\\":
            in_string = not in_string
        if not in_string and ch == char:
            count += 1
        previous = ch
    return count


def get_operator(text: str, index: int) -> str:
    """Return the longest operator starting at ``index``, or an empty string."""
    best = ""
    for operator in OPERATORS:
        if len(operator) > len(best) and text.startswith(operator, index):
            best = operator
    return best


def tokenize(text: str) -> list[str]:
    """Split a line into names, values, quoted strings and operators.

    Quoted strings come out wrapped in double quotes; a space directly after an
    operator is dropped.
    """
    text = remove_comments(text)
    tokens = [""]
    position = 0
    length = len(text)
    while position < length:
        ch = text[position]
        if ch in _QUOTES:
            closing = next(
                (j for j in range(position + 1, length) if text[j] in _QUOTES), None
            )
            end = length if closing is None else closing
            tokens[-1] = '"' + text[position + 1 : end] + '"'
            tokens.append("")
            if closing is not None:
                position = closing
            position += 1
            continue
        operator = get_operator(text, position)
        if operator:
            if tokens[-1]:
                tokens.append(operator)
            else:
                tokens[-1] = operator
            tokens.append("")
            position += len(operator)
            if position < length and text[position] == " ":
                position += 1
            continue
        tokens[-1] += ch
        position += 1
    if not tokens[-1]:
        tokens.pop()
    return tokens