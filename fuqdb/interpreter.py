"""Execution context: loaded tables, built-in function calls and line execution."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TextIO

from .evaluator import Evaluator
from .help import describe, list_all_functions
from .parser import normalize, tokenize
from .script import FUNCTIONS, FunctionID, TokenType
from .syntax import Node
from .table import SubTable, Table, TableLoadError, load_csv
from .utils import is_number

LAMBDA_MARKER = "__fuq_lambda"
RESULT_PREFIX = "__fuq_fnret"


def _unquote(value: str) -> str:
    """Strip one pair of matching quotation marks."""
    if value and value[0] in "\"'" and value[0] == value[-1]:
        return value[1:-1]
    return value


def _row_params(header: Sequence[str], row: Sequence[str], index: int) -> dict[str, str]:
    params = dict(zip(header, row))
    params["INDEX"] = str(index)
    return params


def _negative_number(node: Node) -> str | None:
    """Return ``-N`` if the expression is just a negated number literal."""
    if len(node.children) != 3:
        return None
    operator, left, right = node.children
    if operator.value == "-" and not left.value and is_number(right.value):
        return "-" + right.value
    return None


@dataclass
class _Call:
    name: str
    params: list[str]
    stack_index: int
    lambdas: list[Node] = field(default_factory=list)


class Context:
    """Holds loaded tables and runs lines of the query language.

    Messages go to ``out`` (standard output by default). ``err`` is set once an
    error occurs that should stop a script.
    """

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out
        self.tables: dict[str, Table] = {}
        self.subtables: dict[str, SubTable] = {}
        self.err = False
        self._evaluator = Evaluator(out)
        self._depth = 0
        self._handlers: dict[FunctionID, Callable[[_Call], str]] = {
            FunctionID.PRINTT: self._printt,
            FunctionID.PRINTS: self._prints,
            FunctionID.LOAD: self._load,
            FunctionID.CREATE: self._create,
            FunctionID.UNLOAD: self._unload,
            FunctionID.SAVE: self._save,
            FunctionID.SET: self._set,
            FunctionID.FILTER: self._filter,
            FunctionID.INSERT: self._insert,
            FunctionID.COLINSERT: self._colinsert,
            FunctionID.COLERASE: self._colerase,
            FunctionID.ERASE: self._erase,
            FunctionID.SORT: self._sort,
            FunctionID.SORTRULE: self._sortrule,
            FunctionID.JOIN: self._join,
            FunctionID.HELP: self._help,
        }

    # -- output -----------------------------------------------------------

    def _write(self, text: str) -> None:
        (self.out if self.out is not None else sys.stdout).write(text)

    def _error(self, text: str, fatal: bool = True) -> None:
        self._write(f"ERROR: {text}\n")
        if fatal:
            self.err = True

    def _evaluate(self, code: Node, params: dict[str, str]) -> str:
        result = self._evaluator.evaluate(code, params)
        if self._evaluator.err:
            self.err = True
        return result

    # -- table management -------------------------------------------------

    def load_table(self, path: str, name: str) -> None:
        """Load a CSV file as table ``name``, replacing any table of that name."""
        self.tables.pop(name, None)
        try:
            table: Table | None = load_csv(path)
        except TableLoadError as exc:
            self._write(f"ERROR: {exc}\n")
            table = exc.partial
        if table is not None and table.rows:
            self.tables[name] = table

    def unload_table(self, name: str) -> None:
        """Remove table ``name`` from the context."""
        if name in self.tables:
            del self.tables[name]
        else:
            self._error(f"(While trying to delete {name}) No table or sub-table loaded")

    def _lookup(self, name: str) -> Table | SubTable | None:
        if name in self.tables:
            return self.tables[name]
        return self.subtables.get(name)

    # -- calls ------------------------------------------------------------

    def call_function(self, node: Node) -> str:
        """Run a function-call node and return its result (a sub-table name or "")."""
        spec = FUNCTIONS.get(node.value)
        if spec is None:
            self._error(
                f"Function '{node.value}' does not exist. "
                "Type 'flist' for a list of functions."
            )
            return ""
        if spec.expect_parameters >= 0 and len(node.children) != spec.expect_parameters:
            self._error(
                f"In function '{node.value}': expected {spec.expect_parameters} "
                f"parameters but got {len(node.children)}."
            )
            return ""

        stack_index = self._depth
        self._depth += 1
        try:
            call = _Call(node.value, [], stack_index)
            for child in node.children:
                if child.kind is TokenType.VALUE:
                    call.params.append(child.value)
                elif child.kind is TokenType.FUNCTION_CALL:
                    call.params.append(self.call_function(child))
                else:
                    negative = _negative_number(child)
                    if negative is not None:
                        call.params.append(negative)
                    else:
                        call.params.append(LAMBDA_MARKER)
                        call.lambdas.append(child)
            call.params = [_unquote(param) for param in call.params]
            try:
                return self._handlers[spec.id](call)
            except (IndexError, ValueError) as exc:
                self._error(f"In function '{node.value}': {exc}")
                return ""
        finally:
            self._depth = stack_index

    def _printt(self, call: _Call) -> str:
        target = self._lookup(call.params[0])
        if target is None:
            self._error(
                f"(While trying to print {call.params[0]}) Table or sub-table is not loaded"
            )
        else:
            self._write(target.render())
        return ""

    def _prints(self, call: _Call) -> str:
        self._write(call.params[0] + "\n")
        return ""

    def _load(self, call: _Call) -> str:
        self.load_table(call.params[0], call.params[1])
        return ""

    def _create(self, call: _Call) -> str:
        params = call.params
        if len(params) < 2:
            self._error(
                f"create expects at least 2 parameters but got {len(params)}", fatal=False
            )
        elif params[0] in self.tables:
            self._error(
                f"(While trying to create {params[0]}) Table already exists", fatal=False
            )
        else:
            self.tables[params[0]] = Table(params[1:])
        return ""

    def _unload(self, call: _Call) -> str:
        self.unload_table(call.params[0])
        return ""

    def _save(self, call: _Call) -> str:
        path, name = call.params[0], call.params[1]
        target = self._lookup(name)
        if target is None:
            self._error(f"(While trying to save {name}) Table or sub-table is not loaded")
            return ""
        try:
            target.save(path)
        except OSError:
            self._error(f"(While trying to save {name}) Cannot write {path}")
        return ""

    def _filter(self, call: _Call) -> str:
        name = call.params[0]
        table = self.tables.get(name)
        sub = self.subtables.get(name)
        if table is None and sub is None:
            self._error(f"(While trying to filter {name}) Table or sub-table is not loaded")
            return ""
        if not call.lambdas:
            self._error(f"(While trying to filter {name}) Condition is not an expression")
            return ""
        code = call.lambdas[-1]
        if table is not None:
            target = table
            candidates: list[int] = list(range(1, len(table.rows)))
        else:
            target = sub.target
            candidates = list(sub.rows)
        result = SubTable(target)
        header = target.columns
        for index in candidates:
            params = _row_params(header, target.rows[index], index)
            if self._evaluate(code, params) == "1":
                result.rows.append(index)
        result_name = f"{RESULT_PREFIX}{call.stack_index}"
        self.subtables[result_name] = result
        return result_name

    def _set(self, call: _Call) -> str:
        name, column, value = call.params[0], call.params[1], call.params[2]
        table = self.tables.get(name)
        sub = self.subtables.get(name)
        if table is None and sub is None:
            self._error(f"(While trying to set {name}) Table or sub-table is not loaded")
            return ""
        if table is not None:
            target = table
            positions = [(index, index) for index in range(1, len(table.rows))]
        else:
            target = sub.target
            positions = list(enumerate(sub.rows))
        try:
            col = target.get_col_index(column)
        except KeyError:
            self._error(f"(While trying to set {name}) No column {column}")
            return ""
        header = target.columns
        if value == LAMBDA_MARKER and call.lambdas:
            code = call.lambdas[-1]
            for label, row_index in positions:
                row = target.rows[row_index]
                row[col] = self._evaluate(code, _row_params(header, row, label))
        else:
            for label, row_index in positions:
                target.rows[row_index][col] = str(label) if value == "[INDEX]" else value
        return ""

    def _erase(self, call: _Call) -> str:
        name = call.params[0]
        if name in self.tables:
            self.tables[name].rows.clear()
        elif name in self.subtables:
            sub = self.subtables[name]
            selected = set(sub.rows)
            sub.target.rows = [
                row for index, row in enumerate(sub.target.rows) if index not in selected
            ]
        else:
            self._error(f"(While trying to erase {name}) Could not retrieve sub-table")
        return ""

    def _insert(self, call: _Call) -> str:
        params = call.params
        if len(params) < 2:
            self._error(
                f"insert expects at least 2 parameters but got {len(params)}", fatal=False
            )
            return ""
        table = self.tables.get(params[0])
        if table is None:
            self._error(
                f"(While trying to insert new row into {params[0]}) No table loaded",
                fatal=False,
            )
            return ""
        table.insert(params[2:], params[1] != "0")
        return ""

    def _colinsert(self, call: _Call) -> str:
        name, column = call.params[0], call.params[1]
        table = self.tables.get(name)
        if table is None:
            self._error(
                f"(While trying to insert new column into {name}) No table loaded",
                fatal=False,
            )
        else:
            table.colinsert(column)
        return ""

    def _colerase(self, call: _Call) -> str:
        name, column = call.params[0], call.params[1]
        table = self.tables.get(name)
        if table is None:
            self._error(
                f"(While trying to erase column from {name}) No table loaded", fatal=False
            )
        elif column not in table.columns:
            self._error(
                f"(While trying to erase column from {name}) Column {column} does not exist",
                fatal=False,
            )
        else:
            table.colerase(column)
        return ""

    def _sortrule(self, call: _Call) -> str:
        name, column, ascending = call.params[0], call.params[1], call.params[2]
        table = self.tables.get(name)
        if table is None:
            self._error(f"(While trying to set sortrule for {name}) Table is not loaded")
            return ""
        try:
            index = table.get_col_index(column)
        except KeyError:
            self._error(f"(While trying to set sortrule for {name}) No column {column}")
            return ""
        table.sort_rule.column_index = index
        table.sort_rule.ascending = ascending != "0"
        return ""

    def _sort(self, call: _Call) -> str:
        target = self._lookup(call.params[0])
        if target is None:
            self._error(
                f"(While trying to sort {call.params[0]}) Table or sub-table is not loaded"
            )
        else:
            target.sort()
        return ""

    def _join(self, call: _Call) -> str:
        first, second, sort = call.params[0], call.params[1], call.params[2]
        destination = self.tables.get(first)
        if destination is None:
            self._error(
                f"(While trying to join {first} and {second}) Table ({first}) not loaded"
            )
            return ""
        if second in self.tables:
            incoming = list(self.tables[second].rows[1:])
        elif second in self.subtables:
            sub = self.subtables[second]
            incoming = [sub.target.rows[index] for index in sub.rows]
        else:
            self._error(
                f"(While trying to join {first} and {second}) "
                "Table or sub-table is not loaded"
            )
            return ""
        for row in incoming:
            if sort != "0":
                destination.insert(row, True)
            else:
                destination.rows.append(list(row))
        return ""

    def _help(self, call: _Call) -> str:
        try:
            self._write(describe(call.params[0]))
        except LookupError as exc:
            self._write(f"ERROR: {exc}\n")
        return ""

    # -- lines ------------------------------------------------------------

    def run(self, line: str) -> None:
        """Tokenize, parse and execute one line."""
        tokens = tokenize(normalize(line, " ", True))
        if tokens == ["flist"]:
            self._write(list_all_functions())
        node = Node.from_tokens(tokens)
        try:
            if node.kind is TokenType.FUNCTION_CALL:
                self.call_function(node)
        finally:
            self.subtables.clear()