import io

import pytest

from fuqdb.evaluator import Evaluator
from fuqdb.parser import tokenize
from fuqdb.syntax import Node


def make():
    out = io.StringIO()
    return Evaluator(out), out


def ev(line, params=None, evaluator=None):
    evaluator = evaluator or Evaluator(io.StringIO())
    return evaluator.evaluate(Node.from_tokens(tokenize(line)), params or {})


def test_integer_addition():
    assert ev("1 + 2") == "3"


def test_float_addition_uses_six_decimals():
    assert ev("[a] + 1", {"a": "1.5"}) == "2.500000"


def test_string_concatenation_with_params():
    assert ev("[a] + [b]", {"a": "foo", "b": "bar"}) == "foobar"


def test_quoted_operand_is_unquoted():
    assert ev("[s] + 'x'", {"s": "hi"}) == "hix"


def test_unknown_param_stays_literal():
    assert ev("[zz] + 1") == "[zz]" + "1"


def test_nested_expression_matches_stepwise_evaluation():
    product = ev("2 * 3")
    assert ev("1 + 2 * 3") == ev("1 + [p]", {"p": product})
    assert ev("1 + 2 * 3") == ev("2 * 3 + 1")


def test_power_of_integers():
    assert ev("2 ^ 10") == "1024"


def test_subtracting_strings_is_an_error():
    evaluator, out = make()
    assert ev("[a] - [b]", {"a": "x", "b": "y"}, evaluator) == "NULL"
    assert evaluator.err is True
    assert "Cannot substract two strings" in out.getvalue()


def test_multiplying_strings_is_an_error():
    evaluator, out = make()
    assert ev("[a] * 2", {"a": "x"}, evaluator) == "NULL"
    assert "Cannot multiply" in out.getvalue()


def test_mod_of_strings_returns_null():
    evaluator, out = make()
    assert ev("[a] % 2", {"a": "x"}, evaluator) == "NULL"
    assert "Cannot mod strings" in out.getvalue()


def test_mod_of_floats_sets_error_and_returns_zero():
    evaluator, out = make()
    assert ev("[a] % 2", {"a": "1.5"}, evaluator) == "0"
    assert evaluator.err is True
    assert "Cannot mod floating point numbers" in out.getvalue()


def test_integer_division_by_zero_reports_unexpected_error():
    evaluator, out = make()
    assert ev("4 / 0", evaluator=evaluator) == "0"
    assert "Encountered unexpected error" in out.getvalue()


@pytest.mark.parametrize("line,expected", [("! 0", "1"), ("! 5", "0")])
def test_not(line, expected):
    assert ev(line) == expected


@pytest.mark.parametrize(
    "a,b,and_result,or_result",
    [("1", "1", "1", "1"), ("1", "0", "0", "1"), ("0", "0", "0", "0")],
)
def test_and_or(a, b, and_result, or_result):
    params = {"a": a, "b": b}
    assert ev("[a] && [b]", params) == and_result
    assert ev("[a] || [b]", params) == or_result


def test_equality_and_inequality_both_test_equality():
    assert ev("[x] == 3", {"x": "3"}) == "1"
    assert ev("[x] == 3", {"x": "4"}) == "0"
    assert ev("[x] != 3", {"x": "3"}) == "1"


def test_integer_comparisons():
    assert ev("5 > 3") == "1"
    assert ev("5 < 3") == "0"
    assert ev("3 >= 3") == "1"
    assert ev("4 <= 3") == "0"


def test_float_comparison_is_formatted_as_float():
    assert ev("[a] > 1", {"a": "2.5"}) == "1.000000"
    assert ev("[a] < 1", {"a": "2.5"}) == "0.000000"


def test_string_comparison_is_always_true():
    assert ev("abc < def") == "1"
    assert ev("def < abc") == "1"


def test_row_index_condition():
    assert ev("[INDEX] % 2 == 0", {"INDEX": "4"}) == "1"
    assert ev("[INDEX] % 2 == 0", {"INDEX": "5"}) == "0"


def test_char_index():
    word = "hello"
    result = ev("[s] . 1", {"s": word})
    assert len(result) == 1 and result in word


def test_left_truncation_returns_suffix():
    result = ev("[s] $ 2", {"s": "hello"})
    assert "hello".endswith(result) and len(result) == 3


def test_index_out_of_range_returns_empty_without_error():
    evaluator, out = make()
    assert ev("[s] . 9", {"s": "hi"}, evaluator) == ""
    assert evaluator.err is False
    assert "Index out of range" in out.getvalue()


def test_substring_prefix():
    result = ev("[s] : 2", {"s": "hello"})
    assert "hello".startswith(result) and len(result) == 2
    assert ev("[s] : 99", {"s": "hello"}) == "hello"


def test_negative_substring_length_keeps_whole_string():
    assert ev("[s] : [n]", {"s": "hello", "n": "-1"}) == "hello"


def test_non_numeric_index_reports_unexpected_error():
    evaluator, out = make()
    assert ev("[s] . x", {"s": "hi"}, evaluator) == "0"
    assert "Encountered unexpected error" in out.getvalue()


def test_params_are_not_modified():
    params = {"a": "1", "b": "2"}
    ev("[a] + [b]", params)
    assert params == {"a": "1", "b": "2"}


def test_incomplete_node_raises():
    with pytest.raises(ValueError):
        Evaluator(io.StringIO()).evaluate(Node.leaf("1"), {})