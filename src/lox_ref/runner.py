from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import List, Optional

from .diagnostics import ErrorSink
from .evaluator import Interpreter, eval_node
from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError, parse_source, parse_tokens
from .printer import dump_tokens, print_program
from .runtime import LoxRuntimeError
from .tree import tree_label
from .utils import stringify

EXIT_OK = 0
EXIT_USAGE = 64
EXIT_DATA = 65
EXIT_SOFTWARE = 70

COMMANDS = ("tokenize", "parse", "interpret")

USAGE = "Usage: lox [tokenize|parse|interpret] [script]"


def run(source: str, errors: Optional[ErrorSink]=None, interpreter: Optional[Interpreter]=None) -> int:
    """Scan, parse and execute `source`. Returns the process exit code for the outcome."""
    if errors is None:
        errors = interpreter.errors if interpreter is not None else ErrorSink()

    try:
        statements = parse_source(source, errors=errors)
    except (LexError, ParseError):
        return EXIT_DATA

    if interpreter is None:
        interpreter = Interpreter(errors=errors)

    if not interpreter.interpret(statements):
        return EXIT_SOFTWARE

    return EXIT_OK


def _parse_entry(source: str, errors: ErrorSink) -> list:
    """Parse a REPL entry; a bare expression may leave off its trailing semicolon."""
    for candidate in (source, source + ";"):
        try:
            return parse_source(candidate, errors=ErrorSink(stream=io.StringIO()))
        except (LexError, ParseError):
            continue

    # Neither form parsed: run again to report against the entry as typed
    return parse_source(source, errors=errors)


def repl_eval(source: str, interpreter: Interpreter) -> Optional[str]:
    """
    Run one REPL entry against the persistent interpreter.

    A lone expression statement is evaluated and its display form returned
    for echoing; anything else runs for its effects and returns None.
    Diagnostics go to the interpreter's sink.
    """
    errors = interpreter.errors

    try:
        statements = _parse_entry(source, errors)
    except (LexError, ParseError):
        return None

    if len(statements) == 1 and tree_label(statements[0]) == 'exprstmt':
        try:
            value = eval_node(statements[0].children[0], interpreter.globals)
        except LoxRuntimeError as exc:
            interpreter.report(exc)
            return None

        return stringify(value)

    interpreter.interpret(statements)
    return None


def tokenize_command(source: str, errors: ErrorSink) -> int:
    try:
        tokens = tokenize(source, errors=errors)
        status = EXIT_OK
    except LexError as exc:
        # The dump still shows everything that did scan
        tokens = exc.tokens
        status = EXIT_DATA

    for line in dump_tokens(tokens):
        print(line)

    return status


def parse_command(source: str, errors: ErrorSink) -> int:
    try:
        tokens = tokenize(source, errors=errors)
        statements = parse_tokens(tokens, errors=errors)
    except (LexError, ParseError):
        return EXIT_DATA

    for line in print_program(statements):
        print(line)

    return EXIT_OK


def _load_source(arg: Optional[str]) -> Optional[str]:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Otherwise a path; unreadable files yield None.
    """
    if arg is None or arg == "-":
        return sys.stdin.read()

    try:
        return Path(arg).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Could not read file '{arg}': {exc}", file=sys.stderr)
        return None


def main(argv: Optional[List[str]]=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    command = "interpret"

    if args and args[0] in COMMANDS:
        command = args.pop(0)

    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        return EXIT_USAGE

    arg = args[0] if args else None

    if command == "interpret" and arg in (None, "-") and sys.stdin.isatty():
        from .repl import repl  # prompt_toolkit only loads for interactive use

        return repl()

    source = _load_source(arg)
    if source is None:
        return EXIT_USAGE

    errors = ErrorSink()

    match command:
        case "tokenize":
            return tokenize_command(source, errors)
        case "parse":
            return parse_command(source, errors)
        case _:
            return run(source, errors=errors)


def run_file(path: str, errors: Optional[ErrorSink]=None) -> int:
    source = _load_source(path)
    if source is None:
        return EXIT_USAGE

    return run(source, errors=errors)


if __name__ == "__main__":
    sys.exit(main())
