"""Error sink shared by the scanner, the parser and the driver."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .token_types import TT, Tok


def location_hint(tok: Tok) -> str:
    if tok.type == TT.EOF:
        return " at end"

    if tok.lexeme is None:
        return f" at '{tok.type.name}'"

    if tok.type == TT.STRING:
        return f" at '{tok.literal}'"

    return f" at '{tok.lexeme}'"


class ErrorSink:
    """
    Receives diagnostics and writes them as `[line N] Error<hint>: message`.

    The stream is resolved on every write so a sink built before the test
    harness swaps `sys.stderr` still lands in the captured stream.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.messages: List[str] = []

    def report(self, line: int, where: str, message: str) -> None:
        rendered = f"[line {line}] Error{where}: {message}"
        self.messages.append(rendered)
        print(rendered, file=self.stream if self.stream is not None else sys.stderr)

    def lex_error(self, line: int, message: str) -> None:
        self.had_error = True
        self.report(line, "", message)

    def token_error(self, tok: Tok, message: str) -> None:
        self.had_error = True
        self.report(tok.line, location_hint(tok), message)

    def runtime_error(self, line: Optional[int], message: str) -> None:
        self.had_runtime_error = True
        self.report(line if line is not None else 0, "", message)

    def reset(self) -> None:
        """Clear the stage flags; the REPL does this between entries."""
        self.had_error = False
        self.had_runtime_error = False
