"""Token kinds, operators and built-in functions of the query language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Kind of a syntax-tree node."""

    VALUE = auto()
    FUNCTION_CALL = auto()
    EXPRESSION = auto()


class OperationType(Enum):
    """Operators known to the tokenizer and evaluator."""

    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    POW = auto()
    MOD = auto()
    EQUALS = auto()
    NEQUALS = auto()
    GREATER = auto()
    LESS = auto()
    GREATEREQUALS = auto()
    LESSEQUALS = auto()
    OR = auto()
    AND = auto()
    NOT = auto()
    INDEX = auto()
    LTRUNC = auto()
    SUBSTR = auto()
    FUNC_PARAM_START = auto()
    FUNC_PARAM_END = auto()
    FUNC_PARAM_DELIMITER = auto()


@dataclass(frozen=True)
class OperatorInfo:
    """Binding strength of an operator; higher binds more loosely."""

    precedence: int
    double_operand: bool


class FunctionID(Enum):
    """Built-in functions."""

    PRINTT = auto()
    PRINTS = auto()
    LOAD = auto()
    CREATE = auto()
    UNLOAD = auto()
    SAVE = auto()
    SET = auto()
    FILTER = auto()
    INSERT = auto()
    COLINSERT = auto()
    COLERASE = auto()
    ERASE = auto()
    SORT = auto()
    SORTRULE = auto()
    JOIN = auto()
    HELP = auto()


@dataclass(frozen=True)
class FunctionSpec:
    """A built-in function and the number of parameters it takes (-1: any)."""

    id: FunctionID
    expect_parameters: int


OPERATORS: dict[str, OperationType] = {
    "+": OperationType.ADD,
    "-": OperationType.SUB,
    "*": OperationType.MUL,
    "/": OperationType.DIV,
    "^": OperationType.POW,
    "%": OperationType.MOD,
    "==": OperationType.EQUALS,
    "!=": OperationType.NEQUALS,
    ">": OperationType.GREATER,
    "<": OperationType.LESS,
    ">=": OperationType.GREATEREQUALS,
    "<=": OperationType.LESSEQUALS,
    "||": OperationType.OR,
    "&&": OperationType.AND,
    "!": OperationType.NOT,
    ".": OperationType.INDEX,
    "$": OperationType.LTRUNC,
    ":": OperationType.SUBSTR,
    "(": OperationType.FUNC_PARAM_START,
    ")": OperationType.FUNC_PARAM_END,
    ",": OperationType.FUNC_PARAM_DELIMITER,
}

OPERATOR_INFO: dict[OperationType, OperatorInfo] = {
    OperationType.ADD: OperatorInfo(4, True),
    OperationType.SUB: OperatorInfo(4, True),
    OperationType.MUL: OperatorInfo(3, True),
    OperationType.DIV: OperatorInfo(3, True),
    OperationType.MOD: OperatorInfo(3, True),
    OperationType.POW: OperatorInfo(2, True),
    OperationType.EQUALS: OperatorInfo(7, True),
    OperationType.NEQUALS: OperatorInfo(7, True),
    OperationType.GREATER: OperatorInfo(6, True),
    OperationType.LESS: OperatorInfo(6, True),
    OperationType.GREATEREQUALS: OperatorInfo(6, True),
    OperationType.LESSEQUALS: OperatorInfo(6, True),
    OperationType.OR: OperatorInfo(12, True),
    OperationType.AND: OperatorInfo(11, True),
    OperationType.NOT: OperatorInfo(2, False),
    OperationType.INDEX: OperatorInfo(1, True),
    OperationType.LTRUNC: OperatorInfo(1, True),
    OperationType.SUBSTR: OperatorInfo(1, True),
    OperationType.FUNC_PARAM_START: OperatorInfo(0xFF, True),
    OperationType.FUNC_PARAM_END: OperatorInfo(0xFF, True),
    OperationType.FUNC_PARAM_DELIMITER: OperatorInfo(0xFF, True),
}

FUNCTIONS: dict[str, FunctionSpec] = {
    "printt": FunctionSpec(FunctionID.PRINTT, 1),
    "prints": FunctionSpec(FunctionID.PRINTS, 1),
    "load": FunctionSpec(FunctionID.LOAD, 2),
    "create": FunctionSpec(FunctionID.CREATE, -1),
    "unload": FunctionSpec(FunctionID.UNLOAD, 1),
    "save": FunctionSpec(FunctionID.SAVE, 2),
    "set": FunctionSpec(FunctionID.SET, 3),
    "filter": FunctionSpec(FunctionID.FILTER, 2),
    "insert": FunctionSpec(FunctionID.INSERT, -1),
    "colinsert": FunctionSpec(FunctionID.COLINSERT, 2),
    "colerase": FunctionSpec(FunctionID.COLERASE, 2),
    "erase": FunctionSpec(FunctionID.ERASE, 1),
    "sort": FunctionSpec(FunctionID.SORT, 1),
    "sortrule": FunctionSpec(FunctionID.SORTRULE, 3),
    "join": FunctionSpec(FunctionID.JOIN, 3),
    "help": FunctionSpec(FunctionID.HELP, 1),
}


def is_operator(token: str) -> bool:
    """Return True if ``token`` is exactly an operator."""
    return token in OPERATORS


def precedence(token: str) -> int:
    """Return the precedence of the operator ``token``.

    Raises KeyError if the token is not an operator.
    """
    try:
        operation = OPERATORS[token]
    except KeyError:
        raise KeyError(f"not an operator: {token!r}") from None
    return OPERATOR_INFO[operation].precedence