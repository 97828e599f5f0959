"""Evaluation of expression trees (lambdas) against a row of named values."""

from __future__ import annotations

import math
import re
import sys
from collections.abc import Callable, Mapping
from typing import TextIO

from .script import TokenType
from .syntax import Node
from .utils import is_float, is_number

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _clean(value: str) -> str:
    """Drop trailing spaces (unless only spaces) and one pair of matching quotes."""
    stripped = value.rstrip(" ")
    if stripped:
        value = stripped
    if value and value[0] in "\"'" and value[0] == value[-1]:
        value = value[1:-1]
    return value


def _stoll(text: str) -> int:
    if not text:
        raise ValueError("stoll")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError("stoll")
    return value


def _stod(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise ValueError("stod") from None
    if math.isinf(value):
        raise ValueError("stod")
    return value


def _stoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError("stoi")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError("stoi")
    return value


def _wrap(value: int) -> int:
    """Reduce an integer to the signed 64-bit range."""
    return (value - _INT64_MIN) % 2**64 + _INT64_MIN


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:.6f}"


def _float_div(a: float, b: float) -> float:
    if b == 0.0:
        return math.copysign(math.inf, a) if a else math.nan
    return a / b


def _int_div(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError("integer division by zero")
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _int_mod(a: int, b: int) -> int:
    if b == 0:
        raise ZeroDivisionError("integer modulo by zero")
    return a - _int_div(a, b) * b


def _float_pow(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.inf


def _int_pow(a: int, b: int) -> int:
    result = _float_pow(float(a), float(b))
    if not math.isfinite(result) or not _INT64_MIN <= result <= _INT64_MAX:
        raise OverflowError("pow")
    return int(result)


_ARITHMETIC: dict[str, tuple[Callable[[float, float], float], Callable[[int, int], int], str]] = {
    "-": (lambda a, b: a - b, lambda a, b: a - b, "substract"),
    "*": (lambda a, b: a * b, lambda a, b: a * b, "multiply"),
    "/": (_float_div, _int_div, "divide"),
    "^": (_float_pow, _int_pow, "pow"),
}

_COMPARISONS: dict[str, Callable[[float, float], bool]] = {
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
}


class Evaluator:
    """Evaluates expression nodes; values in ``[name]`` are looked up in the params.

    Diagnostics go to ``out``; ``err`` is set when an error should stop execution.
    """

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out
        self.err = False

    def _write(self, text: str) -> None:
        (self.out if self.out is not None else sys.stdout).write(text)

    def _fail(self, text: str) -> str:
        self._write(text)
        self.err = True
        return "NULL"

    def _operand(self, node: Node, params: Mapping[str, str]) -> str:
        if node.kind is TokenType.EXPRESSION:
            return self.evaluate(node, params)
        value = _clean(node.value)
        if len(value) >= 2 and value[0] == "[" and value[-1] == "]":
            return params.get(value[1:-1], value)
        return value

    def evaluate(self, code: Node, params: Mapping[str, str]) -> str:
        """Evaluate an expression node and return the result as a string.

        Raises ValueError if the node is not a complete expression.
        """
        if len(code.children) < 3:
            raise ValueError("expression node needs an operator and two operands")
        operation = _clean(code.children[0].value)
        left = self._operand(code.children[1], params)
        right = self._operand(code.children[2], params)
        try:
            return self._apply(operation, left, right)
        except (ValueError, ArithmeticError) as exc:
            self._write(
                f'Encountered unexpected error while evaluating "{left}" '
                f'{operation} "{right}"\n{exc}\n'
            )
        return "0"

    def _apply(self, operation: str, left: str, right: str) -> str:
        numeric = is_number(left) and is_number(right)
        floating = is_float(left) or is_float(right)

        if operation == "!":
            return "0" if right != "0" else "1"
        if operation == "&&":
            return "1" if left != "0" and right != "0" else "0"
        if operation == "||":
            return "1" if left != "0" or right != "0" else "0"
        if operation == "+":
            if not numeric:
                return left + right
            if floating:
                return _format_float(_stod(left) + _stod(right))
            return str(_wrap(_stoll(left) + _stoll(right)))
        if operation in _ARITHMETIC:
            float_op, int_op, verb = _ARITHMETIC[operation]
            if not numeric:
                return self._fail(
                    f"ERROR: (While trying to evaluate {left} {operation} {right}) "
                    f"Cannot {verb} two strings\n"
                )
            if floating:
                return _format_float(float_op(_stod(left), _stod(right)))
            return str(_wrap(int_op(_stoll(left), _stoll(right))))
        if operation == "%":
            if not numeric:
                return self._fail(
                    f"ERROR: (While trying to evaluate {left} % {right}) Cannot mod strings\n"
                )
            if floating:
                self._fail(
                    f"ERROR: (While trying to evaluate {left} % {right}) "
                    "Cannot mod floating point numbers\n"
                )
                return "0"
            return str(_wrap(_int_mod(_stoll(left), _stoll(right))))
        if operation in ("==", "!="):
            # Both compare for equality, as the language has always done.
            return "1" if left == right else "0"
        if operation in _COMPARISONS:
            if not numeric:
                return "1"
            compare = _COMPARISONS[operation]
            if floating:
                return _format_float(float(compare(_stod(left), _stod(right))))
            return "1" if compare(_stoll(left), _stoll(right)) else "0"
        if operation in (".", "$"):
            index = _stoi(right)
            if not 0 <= index < len(left):
                shown = "." if operation == "." else "->"
                self._write(
                    f"ERROR: (While trying to evaluate {left} {shown} {right}) "
                    "Index out of range\n"
                )
                return ""
            return left[index] if operation == "." else left[index:]
        if operation == ":":
            count = _stoi(right)
            return left if count < 0 else left[:count]
        return "0"