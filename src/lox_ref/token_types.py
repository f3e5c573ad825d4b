"""
Token Types for the Lox reference interpreter

Shared between lexer, parser and the debug printers to avoid circular
dependencies.
"""

from typing import Any, Optional
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - the closed set of lexeme classes"""

    # Grouping
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()

    # Separators
    COMMA = auto()
    DOT = auto()
    SEMICOLON = auto()

    # Arithmetic
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()

    # Comparison
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    EOF = auto()


# Tokens that open a new statement; the parser resynchronizes on these.
STATEMENT_STARTS = frozenset({
    TT.CLASS,
    TT.FUN,
    TT.VAR,
    TT.FOR,
    TT.IF,
    TT.WHILE,
    TT.PRINT,
    TT.RETURN,
})


def literal_text(value: Any) -> str:
    """Render a literal payload the way the token dump shows it."""
    if value is None:
        return "null"

    if isinstance(value, float):
        return f"{value:.1f}" if value.is_integer() else repr(value)

    return str(value)


@dataclass(frozen=True)
class Tok:
    """Token with line info; immutable once scanned"""

    type: TT
    lexeme: Optional[str]
    literal: Any = None
    line: int = 1

    def dump(self) -> str:
        """`KIND lexeme literal`, one line per token."""
        lexeme = self.lexeme if self.lexeme is not None else ""
        return f"{self.type.name} {lexeme} {literal_text(self.literal)}"

    def __repr__(self):
        return f"Tok({self.type.name}, {self.lexeme!r}, {self.literal!r}, line {self.line})"
