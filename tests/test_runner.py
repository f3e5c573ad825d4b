from __future__ import annotations

import io
from pathlib import Path

import pytest

from lox_ref import runner
from lox_ref.runner import EXIT_DATA, EXIT_OK, EXIT_SOFTWARE, EXIT_USAGE, main, run_file
from tests.support.harness import make_interpreter, repl_eval, run_capture


class _FakeStdin(io.StringIO):
    def isatty(self) -> bool:
        return False


def _script(tmp_path: Path, source: str, name: str = "script.lox") -> str:
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return str(path)


@pytest.mark.parametrize(
    "source, status",
    [
        pytest.param('print "ok";', EXIT_OK, id="success"),
        pytest.param("print 1 +;", EXIT_DATA, id="parse-failure"),
        pytest.param("print #;", EXIT_DATA, id="lex-failure"),
        pytest.param("print nope;", EXIT_SOFTWARE, id="runtime-failure"),
        pytest.param("", EXIT_OK, id="empty-program"),
    ],
)
def test_run_exit_codes(source: str, status: int) -> None:
    assert run_capture(source).status == status


def test_main_interprets_file(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, "var a = 1;\n{ var a = 2; print a; }\nprint a;\n")

    assert main([path]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["2.0", "1.0"]


def test_main_interpret_command(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, "print 1 + 2 * 3;")

    assert main(["interpret", path]) == EXIT_OK
    assert capsys.readouterr().out == "7.0\n"


def test_main_runtime_error_exit_code(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, 'print "a";\nprint -"b";')

    assert main([path]) == EXIT_SOFTWARE
    captured = capsys.readouterr()
    assert captured.out == "a\n"
    assert captured.err == "[line 2] Error: Operand must be a number for operator (- b).\n"


def test_main_parse_error_exit_code(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, "var = 1;\nprint 2")

    assert main([path]) == EXIT_DATA
    assert capsys.readouterr().err.splitlines() == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 2] Error at end: Expect ';' after value.",
    ]


def test_main_unreadable_file(tmp_path: Path, capsys) -> None:
    missing = str(tmp_path / "missing.lox")

    assert main([missing]) == EXIT_USAGE
    assert "Could not read file" in capsys.readouterr().err


def test_main_too_many_arguments(capsys) -> None:
    assert main(["a.lox", "b.lox"]) == EXIT_USAGE
    assert "Usage:" in capsys.readouterr().err


def test_main_tokenize_command(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, 'var x = 10;\nprint "hi";')

    assert main(["tokenize", path]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == [
        "VAR var null",
        "IDENTIFIER x null",
        "EQUAL = null",
        "NUMBER 10 10.0",
        "SEMICOLON ; null",
        "PRINT print null",
        'STRING "hi" hi',
        "SEMICOLON ; null",
        "EOF  null",
    ]


def test_main_tokenize_dumps_despite_lex_errors(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, "( @ )")

    assert main(["tokenize", path]) == EXIT_DATA
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["LEFT_PAREN ( null", "RIGHT_PAREN ) null", "EOF  null"]
    assert captured.err == "[line 1] Error: Unexpected character: @\n"


def test_main_parse_command(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, "print 1 + 2 * 3;\nvar a;")

    assert main(["parse", path]) == EXIT_OK
    assert capsys.readouterr().out.splitlines() == ["(print (+ 1.0 (* 2.0 3.0)))", "(var a)"]


def test_main_parse_command_failure(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, "print (1;")

    assert main(["parse", path]) == EXIT_DATA
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Expect ')' after expression." in captured.err


def test_main_reads_stdin_when_not_a_tty(monkeypatch, capsys) -> None:
    monkeypatch.setattr(runner.sys, "stdin", _FakeStdin("print 40 + 2;"))

    assert main(["-"]) == EXIT_OK
    assert capsys.readouterr().out == "42.0\n"


def test_run_file(tmp_path: Path, capsys) -> None:
    path = _script(tmp_path, 'print "from file";')

    assert run_file(path) == EXIT_OK
    assert capsys.readouterr().out == "from file\n"
    assert run_file(str(tmp_path / "nope.lox")) == EXIT_USAGE


def test_run_shares_interpreter_globals() -> None:
    interp = make_interpreter()

    assert run_capture("var counter = 41;", interpreter=interp).status == EXIT_OK
    assert run_capture("counter = counter + 1; print counter;", interpreter=interp).stdout == ["42.0"]


@pytest.mark.parametrize(
    "entry, echo",
    [
        pytest.param("1 + 2", "3.0", id="bare-expression"),
        pytest.param("1 + 2;", "3.0", id="expression-statement"),
        pytest.param('"a" + "b"', "ab", id="string-expression"),
        pytest.param("nil", "nil", id="nil-expression"),
        pytest.param("var x = 1;", None, id="declaration-no-echo"),
        pytest.param("print 5;", None, id="print-no-echo"),
        pytest.param("1 +", None, id="syntax-error-no-echo"),
        pytest.param("nope", None, id="runtime-error-no-echo"),
    ],
)
def test_repl_eval_echo(entry: str, echo) -> None:
    assert repl_eval(entry, make_interpreter()) == echo


def test_repl_eval_reports_errors_to_interpreter_sink() -> None:
    interp = make_interpreter()

    assert repl_eval("1 +", interp) is None
    assert interp.errors.messages == ["[line 1] Error at end: Expect expression."]

    interp.errors.reset()
    assert repl_eval("nope", interp) is None
    assert interp.errors.messages[-1] == "[line 1] Error: Undefined variable 'nope'."
    assert interp.errors.had_runtime_error


def test_repl_bracket_depth() -> None:
    from lox_ref.repl import bracket_depth

    assert bracket_depth("fun f() {") == 1
    assert bracket_depth("fun f() { print (1;") == 2
    assert bracket_depth("{ }") == 0
    assert bracket_depth('print "open') == 1


def test_repl_highlight_groups() -> None:
    from lox_ref.repl_highlight import GROUP_STYLE, highlight_line

    spans = highlight_line('var x = f(1); // note')
    styled = {text: style for style, text in spans}

    assert styled["var"] == GROUP_STYLE["keyword"]
    assert styled["f"] == GROUP_STYLE["function"]
    assert styled["1"] == GROUP_STYLE["number"]
    assert styled["// note"] == GROUP_STYLE["comment"]
    assert "".join(text for _, text in spans) == 'var x = f(1); // note'
