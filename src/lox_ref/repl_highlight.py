"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

import io
from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .diagnostics import ErrorSink
from .lexer_rd import Lexer as LoxScanner, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_KEYWORDS = {
    TT.AND, TT.CLASS, TT.ELSE, TT.FOR, TT.FUN, TT.IF, TT.OR, TT.PRINT,
    TT.RETURN, TT.SUPER, TT.THIS, TT.VAR, TT.WHILE,
}

_OPERATORS = {
    TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR, TT.BANG, TT.BANG_EQUAL, TT.EQUAL,
    TT.EQUAL_EQUAL, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL,
}

_PUNCTUATION = {
    TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
    TT.COMMA, TT.DOT, TT.SEMICOLON,
}


def token_group(tokens: list[Tok], idx: int) -> str:
    """Highlight group for tokens[idx]; an identifier directly before '(' is a call."""
    tok = tokens[idx]

    if tok.type in _KEYWORDS:
        return "keyword"
    if tok.type in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tok.type == TT.NIL:
        return "constant"
    if tok.type == TT.NUMBER:
        return "number"
    if tok.type == TT.STRING:
        return "string"
    if tok.type == TT.IDENTIFIER:
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if nxt is not None and nxt.type == TT.LEFT_PAREN:
            return "function"
        return "identifier"
    if tok.type in _OPERATORS:
        return "operator"
    if tok.type in _PUNCTUATION:
        return "punctuation"

    return ""


def _gap_spans(gap: str) -> StyleAndTextTuples:
    # Comments never reach the token stream; only the gaps between tokens hold them
    cut = gap.find("//")
    if cut < 0:
        return [("", gap)]

    spans: StyleAndTextTuples = []
    if cut > 0:
        spans.append(("", gap[:cut]))
    spans.append((GROUP_STYLE["comment"], gap[cut:]))

    return spans


def highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = LoxScanner(text, errors=ErrorSink(stream=io.StringIO())).tokenize()
    except LexError as exc:
        tokens = exc.tokens

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF or not tok.lexeme:
            continue

        # Find actual position of this token in the line from pos onwards.
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue

        # Unstyled gap before token.
        if idx > pos:
            result.extend(_gap_spans(text[pos:idx]))

        result.append((GROUP_STYLE.get(token_group(tokens, i), ""), tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing text: a comment, or whatever failed to scan.
    if pos < len(text):
        tail = text[pos:]
        if tail.lstrip().startswith("//"):
            result.extend(_gap_spans(tail))
        elif tail.strip():
            result.append((GROUP_STYLE["error"], tail))
        else:
            result.append(("", tail))

    return result if result else [("", text)]


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
