import pytest

from fuqdb.help import FUNCTION_HELP, describe, function_names, list_all_functions
from fuqdb.script import FUNCTIONS


def test_function_names_match_table():
    assert function_names() == tuple(FUNCTION_HELP)
    assert function_names()[0] == "printt"
    assert function_names()[-1] == "help"


def test_every_builtin_is_documented():
    assert set(function_names()) == set(FUNCTIONS)


def test_list_all_functions_one_per_line():
    listing = list_all_functions()
    assert listing.endswith("\n")
    assert listing.splitlines() == list(function_names())


def test_describe_help():
    text = describe("help")
    assert text == (
        "Function:\n\thelp\nUsage:\n\thelp(function)\n"
        "Description:\n\tI think you know what this does.\n"
    )


def test_describe_contains_usage_and_description():
    for name in function_names():
        text = describe(name)
        assert FUNCTION_HELP[name].usage in text
        assert FUNCTION_HELP[name].description in text
        assert text.startswith(f"Function:\n\t{name}\n")


def test_describe_unknown_function():
    with pytest.raises(LookupError) as excinfo:
        describe("nope")
    assert str(excinfo.value) == 'Function "nope" does not exist.'