"""Built-in documentation of the query language functions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FunctionHelp:
    """Usage line and description of a function."""

    usage: str
    description: str


FUNCTION_HELP: dict[str, FunctionHelp] = {
    "printt": FunctionHelp("printt(table)", "Prints the contents of [table] to stdout."),
    "prints": FunctionHelp("printt(message)", "Prints [message] to stdout."),
    "create": FunctionHelp(
        "create(table, columns...)", "Creates an empty table with a column row."
    ),
    "load": FunctionHelp(
        "load(path, table)",
        "Loads a new table from [path] and saves it as [table] in the current context.",
    ),
    "unload": FunctionHelp("unload(table)", "Unloads a table from the current context."),
    "save": FunctionHelp(
        "save(path, table)", "Saves the table [table] as a file specified in [path]."
    ),
    "set": FunctionHelp(
        "set(table, column, value)",
        "Iterates over every row in [table] and sets the value at [column] to [value]. "
        "[value] can be either a constant or a lambda.",
    ),
    "filter": FunctionHelp(
        "filter(table, condition)",
        "Iterates over every row in [table] and applies [condition] as a lambda. "
        "Rows that return 1 (true) will be added to a sub-table and returned.",
    ),
    "erase": FunctionHelp(
        "erase(table)",
        "Erases every element in [table]. When a sub-table is passed as a parameter, "
        "every row present in the sub-table will be erased from the original table.\n"
        "Example:\n\terase(filter(table, [INDEX] % 2 == 0)) "
        "# This will erase every second row in the table",
    ),
    "sortrule": FunctionHelp(
        "sortrule(table, column, ascending)",
        "Sets rules for sorting [table]. The table will be sorted by values in [column] "
        "in ascending order if [ascending] == 1, otherwise descending.",
    ),
    "insert": FunctionHelp(
        "insert(table, sort, values...)",
        "Inserts a new row into [table]. The row will be inserted according to rules "
        "defined via the last sortrule call if [sort] is set to 1, otherwise it will "
        "be appended at the end.",
    ),
    "colinsert": FunctionHelp(
        "colinsert(table, column)", "Inserts a new empty column [column] into [table]"
    ),
    "colerase": FunctionHelp(
        "colerase(table, column)", "Removes a column [column] from [table]"
    ),
    "join": FunctionHelp(
        "join(table1, table2, sort)",
        "Appends [table2] into [table1]. [table2] will be inserted sorted if [sort] "
        "is set to 1",
    ),
    "sort": FunctionHelp(
        "sort(table)", "Sorts [table] according to rules defined via the last sortrule call."
    ),
    "help": FunctionHelp("help(function)", "I think you know what this does."),
}


def function_names() -> tuple[str, ...]:
    """Return the names of all documented functions in listing order."""
    return tuple(FUNCTION_HELP)


def list_all_functions() -> str:
    """Return the function listing, one name per line."""
    return "".join(f"{name}\n" for name in FUNCTION_HELP)


def describe(name: str) -> str:
    """Return the help text of a function.

    Raises LookupError if no function of that name exists.
    """
    try:
        info = FUNCTION_HELP[name]
    except KeyError:
        raise LookupError(f'Function "{name}" does not exist.') from None
    return (
        f"Function:\n\t{name}\nUsage:\n\t{info.usage}\n"
        f"Description:\n\t{info.description}\n"
    )