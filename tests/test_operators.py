from __future__ import annotations

import math

import pytest

from tests.support.harness import evaluate, run_runtime_case, verify_value

VALUE_CASES = [
    pytest.param("1 + 2", ("number", 3), id="add"),
    pytest.param("10 - 4 - 3", ("number", 3), id="sub-left-assoc"),
    pytest.param("2 * 3 + 4", ("number", 10), id="mul-before-add"),
    pytest.param("2 * (3 + 4)", ("number", 14), id="grouping"),
    pytest.param("7 / 2", ("number", 3.5), id="div-fractional"),
    pytest.param("-3 - -3", ("number", 0), id="unary-minus"),
    pytest.param("--4", ("number", 4), id="double-negate"),
    pytest.param("1 < 2", ("bool", True), id="lt"),
    pytest.param("2 <= 2", ("bool", True), id="lte"),
    pytest.param("1 > 2", ("bool", False), id="gt"),
    pytest.param("3 >= 4", ("bool", False), id="gte"),
    pytest.param("1 == 1", ("bool", True), id="eq-number"),
    pytest.param("1 != 2", ("bool", True), id="neq-number"),
    pytest.param('"a" == "a"', ("bool", True), id="eq-string"),
    pytest.param('"a" == "b"', ("bool", False), id="eq-string-different"),
    pytest.param("nil == nil", ("bool", True), id="eq-nil"),
    pytest.param("nil == false", ("bool", False), id="nil-not-false"),
    pytest.param('1 == "1"', ("bool", False), id="eq-mixed-types"),
    pytest.param("0 == false", ("bool", False), id="zero-not-false"),
    pytest.param("true != false", ("bool", True), id="neq-bool"),
    pytest.param("!nil", ("bool", True), id="not-nil"),
    pytest.param("!0", ("bool", False), id="zero-is-truthy"),
    pytest.param('!""', ("bool", False), id="empty-string-is-truthy"),
    pytest.param("!!true", ("bool", True), id="double-not"),
    pytest.param('"foo" + "bar"', ("string", "foobar"), id="concat"),
    pytest.param('"n=" + 7', ("string", "n=7"), id="concat-number-right"),
    pytest.param('"x" + 2.5', ("string", "x2.5"), id="concat-fractional"),
    pytest.param('"is " + true', ("string", "is true"), id="concat-bool"),
    pytest.param('"v: " + nil', ("string", "v: nil"), id="concat-nil"),
    pytest.param('"" + 1 + 2', ("string", "12"), id="concat-left-to-right"),
    pytest.param("nil or 3", ("number", 3), id="or-returns-right"),
    pytest.param("1 or boom", ("number", 1), id="or-short-circuits"),
    pytest.param("false and boom", ("bool", False), id="and-short-circuits"),
    pytest.param('nil and "x"', ("nil", None), id="and-returns-falsey-left"),
    pytest.param('1 and "x"', ("string", "x"), id="and-returns-right"),
    pytest.param("false or nil", ("nil", None), id="or-both-falsey"),
]


@pytest.mark.parametrize("source, expectation", VALUE_CASES)
def test_operator_values(source: str, expectation) -> None:
    verify_value(evaluate(source), expectation[0], expectation[1])


@pytest.mark.parametrize(
    "source, check",
    [
        pytest.param("1 / 0", lambda v: v == math.inf, id="div-zero-positive"),
        pytest.param("-1 / 0", lambda v: v == -math.inf, id="div-zero-negative"),
        pytest.param("0 / 0", math.isnan, id="div-zero-zero"),
    ],
)
def test_division_by_zero_is_ieee(source: str, check) -> None:
    value = evaluate(source)
    assert check(value.value)


def test_nan_is_not_equal_to_itself() -> None:
    verify_value(evaluate("(0/0) == (0/0)"), "bool", False)


ERROR_CASES = [
    pytest.param("print 1 + nil;", "Operands must be numbers for operator (1.0 + nil).", id="add-nil"),
    pytest.param('print 1 + "a";', "Operands must be numbers for operator (1.0 + a).", id="number-plus-string"),
    pytest.param('print "a" - 1;', "Operands must be numbers for operator (a - 1.0).", id="string-minus"),
    pytest.param("print true * 2;", "Operands must be numbers for operator (true * 2.0).", id="bool-times"),
    pytest.param('print 1 < "2";', "Operands must be numbers for operator (1.0 < 2).", id="compare-string"),
    pytest.param("print nil / 2;", "Operands must be numbers for operator (nil / 2.0).", id="nil-div"),
    pytest.param('print -"x";', "Operand must be a number for operator (- x).", id="negate-string"),
    pytest.param("print -nil;", "Operand must be a number for operator (- nil).", id="negate-nil"),
]


@pytest.mark.parametrize("source, expected_error", ERROR_CASES)
def test_operator_type_errors(source: str, expected_error: str) -> None:
    run_runtime_case(source, [], expected_error)


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("print 1 + 2 * 3;", ["7.0"], id="print-integral"),
        pytest.param("print 10;", ["10.0"], id="print-integral-literal"),
        pytest.param('var n = 10; print n; print "n=" + n;', ["10.0", "n=10"], id="print-keeps-fraction-concat-drops-it"),
        pytest.param("print 2.5;", ["2.5"], id="print-fractional"),
        pytest.param("print 10 / 4;", ["2.5"], id="print-division"),
        pytest.param("print -0;", ["-0.0"], id="print-negative-zero"),
        pytest.param("print 1 / 0;", ["inf"], id="print-inf"),
        pytest.param("print nil;", ["nil"], id="print-nil"),
        pytest.param("print true;", ["true"], id="print-true"),
        pytest.param('print "raw";', ["raw"], id="print-string-unquoted"),
        pytest.param("print (1 == 1) == true;", ["true"], id="print-nested-equality"),
    ],
)
def test_print_display(source: str, expected) -> None:
    run_runtime_case(source, expected, None)


def test_operands_evaluate_left_to_right() -> None:
    source = """
    var log = "";
    fun l() { log = log + "L"; return 1; }
    fun r() { log = log + "R"; return 2; }
    print l() + r();
    print log;
    """
    run_runtime_case(source, ["3.0", "LR"], None)
