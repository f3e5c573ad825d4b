from __future__ import annotations

from textwrap import dedent

import pytest

from lox_ref.types import Frame, LoxNumber, UndefinedVariable
from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param(
        "var a = 1; { var a = 2; print a; } print a;",
        ["2.0", "1.0"],
        None,
        id="block-shadows-outer",
    ),
    pytest.param(
        "var a = 1; { a = 2; } print a;",
        ["2.0"],
        None,
        id="assign-reaches-outer",
    ),
    pytest.param(
        "var a; print a;",
        ["nil"],
        None,
        id="uninitialized-is-nil",
    ),
    pytest.param(
        "var a = 1; var a = 2; print a;",
        ["2.0"],
        None,
        id="global-redeclare-overwrites",
    ),
    pytest.param(
        "{ var a = 1; var a = 2; print a; }",
        ["2.0"],
        None,
        id="local-redeclare-overwrites",
    ),
    pytest.param(
        dedent(
            """\
            var a = "global";
            {
              var a = "outer";
              {
                var a = "inner";
                print a;
              }
              print a;
            }
            print a;
        """
        ),
        ["inner", "outer", "global"],
        None,
        id="nested-shadowing",
    ),
    pytest.param(
        "{ var hidden = 1; } print hidden;",
        [],
        "Undefined variable 'hidden'.",
        id="block-local-not-visible-after",
    ),
    pytest.param(
        "print missing;",
        [],
        "Undefined variable 'missing'.",
        id="read-undefined",
    ),
    pytest.param(
        "missing = 1;",
        [],
        "Undefined variable 'missing'.",
        id="assign-undefined",
    ),
    pytest.param(
        "var a = 1; var b = a = 5; print a; print b;",
        ["5.0", "5.0"],
        None,
        id="assignment-is-expression",
    ),
    pytest.param(
        "var a = 1; { var a = a + 1; print a; }",
        ["2.0"],
        None,
        id="initializer-sees-outer",
    ),
    pytest.param(
        "var a = 0; if (true) { var a = 5; } print a;",
        ["0.0"],
        None,
        id="if-block-scope",
    ),
    pytest.param(
        "var i = 10; for (var i = 0; i < 2; i = i + 1) {} print i;",
        ["10.0"],
        None,
        id="for-initializer-scoped",
    ),
]


@pytest.mark.parametrize("source, expected_stdout, expected_error", SCENARIOS)
def test_scoping(source: str, expected_stdout, expected_error) -> None:
    run_runtime_case(source, expected_stdout, expected_error)


def test_frame_define_get_assign() -> None:
    outer = Frame()
    inner = Frame(parent=outer)

    outer.define("x", LoxNumber(1))
    assert inner.get("x") == LoxNumber(1)

    inner.assign("x", LoxNumber(2))
    assert outer.get("x") == LoxNumber(2)
    assert "x" not in inner.vars

    inner.define("x", LoxNumber(3))
    assert inner.get("x") == LoxNumber(3)
    assert outer.get("x") == LoxNumber(2)


def test_frame_unknown_name_raises() -> None:
    frame = Frame(parent=Frame())

    with pytest.raises(UndefinedVariable) as excinfo:
        frame.get("nope")
    assert excinfo.value.message == "Undefined variable 'nope'."

    with pytest.raises(UndefinedVariable):
        frame.assign("nope", LoxNumber(1))


def test_global_frame_starts_with_natives() -> None:
    from lox_ref.runtime import init_stdlib

    init_stdlib()
    assert repr(Frame().get("clock")) == "<native fn>"
    # Only the outermost scope is seeded
    assert "clock" not in Frame(parent=Frame()).vars
