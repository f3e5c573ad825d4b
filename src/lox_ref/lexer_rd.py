"""
Lexer for Lox - Recursive Descent Parser front end

Tokenizes Lox source code into a stream of tokens.

Features:
- Single-pass tokenization with one character of lookahead (two for numbers)
- Line tracking for diagnostics
- Error accumulation: every lexical problem in the input is reported before
  the scan fails
"""

from typing import List, Optional

from .diagnostics import ErrorSink
from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox lexer.

    Scanning never stops at a bad character or an unterminated string: the
    problem goes to the error sink, a failure flag is set and the scan
    carries on. `LexError` is raised only once the whole input is consumed.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Characters that always form a token on their own
    SINGLE = {
        '(': TT.LEFT_PAREN,
        ')': TT.RIGHT_PAREN,
        '{': TT.LEFT_BRACE,
        '}': TT.RIGHT_BRACE,
        ',': TT.COMMA,
        '.': TT.DOT,
        ';': TT.SEMICOLON,
        '-': TT.MINUS,
        '+': TT.PLUS,
        '*': TT.STAR,
    }

    # Characters that may be followed by '=': (lone, with '=')
    WITH_EQUAL = {
        '!': (TT.BANG, TT.BANG_EQUAL),
        '=': (TT.EQUAL, TT.EQUAL_EQUAL),
        '<': (TT.LESS, TT.LESS_EQUAL),
        '>': (TT.GREATER, TT.GREATER_EQUAL),
    }

    def __init__(self, source: str, errors: Optional[ErrorSink] = None):
        self.source = source
        self.errors = errors if errors is not None else ErrorSink()
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens: List[Tok] = []
        self.failed = False
        self.diagnostics: List[tuple[int, str]] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while not self.at_end():
            self.start = self.pos
            self.scan_token()

        self.tokens.append(Tok(TT.EOF, "", None, self.line))

        if self.failed:
            raise LexError(self.diagnostics, self.tokens)

        return self.tokens

    def scan_token(self):
        """Scan next token"""
        ch = self.advance()

        if ch in self.SINGLE:
            self.emit(self.SINGLE[ch])
            return

        if ch in self.WITH_EQUAL:
            lone, paired = self.WITH_EQUAL[ch]
            self.emit(paired if self.match('=') else lone)
            return

        if ch == '/':
            # Comments run to the end of the line
            if self.match('/'):
                self.skip_comment()
            else:
                self.emit(TT.SLASH)
            return

        if ch == '\n':
            self.line += 1
            return

        if ch in (' ', '\r', '\t'):
            return

        if ch == '"':
            self.scan_string()
            return

        if self.is_digit(ch):
            self.scan_number()
            return

        if self.is_alpha(ch):
            self.scan_identifier()
            return

        self.error(f"Unexpected character: {ch}")

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (may span lines, no escapes)"""
        while not self.at_end() and self.peek() != '"':
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.at_end():
            self.error("Unterminated string.")
            return

        self.advance()  # Closing quote
        self.emit(TT.STRING, self.source[self.start + 1:self.pos - 1])

    def scan_number(self):
        """Scan number literal: digit+ ('.' digit+)?"""
        while self.is_digit(self.peek()):
            self.advance()

        # A trailing '.' without a digit after it is left for the DOT token
        if self.peek() == '.' and self.is_digit(self.peek(1)):
            self.advance()
            while self.is_digit(self.peek()):
                self.advance()

        self.emit(TT.NUMBER, float(self.source[self.start:self.pos]))

    def scan_identifier(self):
        """Scan identifier or keyword"""
        while self.is_alnum(self.peek()):
            self.advance()

        value = self.source[self.start:self.pos]
        token_type = self.KEYWORDS.get(value, TT.IDENTIFIER)
        self.emit(token_type)

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def match(self, expected: str) -> bool:
        if self.peek() != expected:
            return False

        self.pos += 1
        return True

    def skip_comment(self):
        while not self.at_end() and self.peek() != '\n':
            self.advance()

    @staticmethod
    def is_digit(ch: str) -> bool:
        return '0' <= ch <= '9'

    @staticmethod
    def is_alpha(ch: str) -> bool:
        return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'

    def is_alnum(self, ch: str) -> bool:
        return self.is_alpha(ch) or self.is_digit(ch)

    def emit(self, token_type: TT, literal=None):
        """Emit a token for the current lexeme"""
        lexeme = self.source[self.start:self.pos]
        self.tokens.append(Tok(token_type, lexeme, literal, self.line))

    def error(self, message: str):
        self.failed = True
        self.diagnostics.append((self.line, message))
        self.errors.lex_error(self.line, message)

class LexError(Exception):
    """Lexical analysis failed; carries every diagnostic and the tokens that were produced"""

    def __init__(self, diagnostics: List[tuple[int, str]], tokens: List[Tok]):
        self.diagnostics = diagnostics
        self.tokens = tokens
        line, message = diagnostics[0]
        super().__init__(f"{message} at line {line}" if len(diagnostics) == 1
                         else f"{len(diagnostics)} lexical errors, first: {message} at line {line}")

    @property
    def line(self) -> int:
        return self.diagnostics[0][0]

def tokenize(source: str, errors: Optional[ErrorSink] = None) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source, errors=errors)
    return lexer.tokenize()
