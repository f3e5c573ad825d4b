"""
Recursive Descent Parser for Lox

Structure:
- Lexer: Token stream from source (lexer_rd)
- Parser: Recursive descent, one method per precedence level
- AST: lark Tree nodes labelled by statement/expression kind (see tree.py)

Grammar:

    program     -> declaration* EOF
    declaration -> funDecl | varDecl | statement
    funDecl     -> "fun" IDENTIFIER "(" parameters? ")" block
    varDecl     -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> exprStmt | forStmt | ifStmt | printStmt
                 | returnStmt | whileStmt | block
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" )*
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"
"""

from typing import Optional, List

from lark import Tree, Token

from .diagnostics import ErrorSink
from .token_types import STATEMENT_STARTS, TT, Tok
from .tree import as_token, tree_label
from .types import FALSE, NIL, TRUE, LoxNumber, LoxString

# Shared cap for call arguments and function parameters
MAX_ARGS = 255

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        # Filled in by parse_tokens once the whole pass is done
        self.statements: List[Tree] = []
        self.all_errors: List[ParseError] = [self]
        super().__init__(
            f"{message} at line {token.line}" if token else message
        )

class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. assignment (=, right-associative)
    2. or
    3. and
    4. equality (==, !=)
    5. comparison (<, <=, >, >=)
    6. term (+, -)
    7. factor (*, /)
    8. unary (!, -)
    9. call (f(...)(...))
    10. primary (literals, identifiers, parens)

    Errors are reported to the sink as they are found. A broken statement
    raises ParseError internally, which `declaration` catches to run
    panic-mode recovery; `failed` stays set for the caller.
    """

    def __init__(self, tokens: List[Tok], errors: Optional[ErrorSink] = None):
        if not tokens or tokens[-1].type != TT.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Tok(TT.EOF, "", None, last_line)]

        self.tokens = tokens
        self.pos = 0
        self.errors = errors if errors is not None else ErrorSink()
        self.failed = False
        self.parse_errors: List[ParseError] = []

    # ========================================================================
    # Token Navigation
    # ========================================================================

    @property
    def current(self) -> Tok:
        return self.tokens[self.pos]

    def previous(self) -> Tok:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.current.type == TT.EOF

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        tok = self.current
        if not self.at_end():
            self.pos += 1
        return tok

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Tok:
        """Consume token of expected type or raise error"""
        if self.check(token_type):
            return self.advance()

        raise self.error(self.current, message)

    def error(self, tok: Tok, message: str) -> ParseError:
        """Report at `tok`, mark the parse failed and hand back the exception for raising."""
        self.failed = True
        self.errors.token_error(tok, message)
        err = ParseError(message, tok)
        self.parse_errors.append(err)
        return err

    def synchronize(self) -> None:
        """Discard tokens until a statement boundary."""
        self.advance()

        while not self.at_end():
            if self.previous().type == TT.SEMICOLON:
                return

            if self.current.type in STATEMENT_STARTS:
                return

            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Tree]:
        """Parse entire program; broken statements are dropped after recovery"""
        statements: List[Tree] = []

        while not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        return statements

    # ========================================================================
    # Statements
    # ========================================================================

    def declaration(self) -> Optional[Tree]:
        try:
            if self.match(TT.FUN):
                return self.parse_function("function")
            if self.match(TT.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None

    def parse_statement(self) -> Tree:
        """
        Parse a single statement.

        Statements include:
        - print, return
        - Control flow (if, while, for)
        - Blocks
        - Expression statements
        """
        if self.match(TT.FOR):
            return self.parse_for_stmt()
        if self.match(TT.IF):
            return self.parse_if_stmt()
        if self.match(TT.PRINT):
            return self.parse_print_stmt()
        if self.match(TT.RETURN):
            return self.parse_return_stmt()
        if self.match(TT.WHILE):
            return self.parse_while_stmt()
        if self.match(TT.LEFT_BRACE):
            return Tree('block', self.parse_block())

        return self.parse_expr_stmt()

    def parse_function(self, kind: str) -> Tree:
        """fun name(params) { body }"""
        name = self.expect(TT.IDENTIFIER, f"Expect {kind} name.")
        self.expect(TT.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params: List[Token] = []
        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    # Reported, not raised: the declaration still parses
                    self.error(self.current, f"Can't have more than {MAX_ARGS} parameters.")

                params.append(as_token(self.expect(TT.IDENTIFIER, "Expect parameter name.")))
                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RIGHT_PAREN, "Expect ')' after parameters.")
        self.expect(TT.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.parse_block()

        return Tree('fundecl', [as_token(name), Tree('params', params), Tree('body', body)])

    def parse_var_decl(self) -> Tree:
        name = self.expect(TT.IDENTIFIER, "Expect variable name.")
        children: List = [as_token(name)]

        if self.match(TT.EQUAL):
            children.append(self.parse_expr())

        self.expect(TT.SEMICOLON, "Expect ';' after variable declaration.")
        return Tree('vardecl', children)

    def parse_for_stmt(self) -> Tree:
        """
        Desugar for loop into a while loop:

            for (init; cond; incr) body
        =>
            { init; while (cond) { body; incr; } }

        A missing condition becomes `true`; missing init/incr are left out.
        """
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TT.SEMICOLON):
            initializer = None
        elif self.match(TT.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        condition = None
        if not self.check(TT.SEMICOLON):
            condition = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TT.RIGHT_PAREN):
            increment = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.parse_statement()

        if increment is not None:
            body = Tree('block', [body, Tree('exprstmt', [increment])])

        if condition is None:
            condition = Tree('literal', [TRUE])

        loop = Tree('whilestmt', [condition, body])

        if initializer is not None:
            loop = Tree('block', [initializer, loop])

        return loop

    def parse_if_stmt(self) -> Tree:
        """if (cond) stmt [else stmt]; else binds to the nearest if"""
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'if'.")
        cond = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after if condition.")

        children = [cond, self.parse_statement()]
        if self.match(TT.ELSE):
            children.append(self.parse_statement())

        return Tree('ifstmt', children)

    def parse_print_stmt(self) -> Tree:
        value = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after value.")
        return Tree('printstmt', [value])

    def parse_return_stmt(self) -> Tree:
        keyword = as_token(self.previous())
        children: List = [keyword]

        if not self.check(TT.SEMICOLON):
            children.append(self.parse_expr())

        self.expect(TT.SEMICOLON, "Expect ';' after return value.")
        return Tree('returnstmt', children)

    def parse_while_stmt(self) -> Tree:
        """Parse while loop: while (expr) stmt"""
        self.expect(TT.LEFT_PAREN, "Expect '(' after 'while'.")
        cond = self.parse_expr()
        self.expect(TT.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return Tree('whilestmt', [cond, body])

    def parse_block(self) -> List[Tree]:
        """Statements up to the closing brace; the opening brace is already consumed"""
        statements: List[Tree] = []

        while not self.check(TT.RIGHT_BRACE) and not self.at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.expect(TT.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_expr_stmt(self) -> Tree:
        expr = self.parse_expr()
        self.expect(TT.SEMICOLON, "Expect ';' after expression.")
        return Tree('exprstmt', [expr])

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Tree:
        return self.parse_assignment()

    def parse_assignment(self) -> Tree:
        expr = self.parse_or()

        if self.check(TT.EQUAL):
            equals = self.advance()
            value = self.parse_assignment()

            if tree_label(expr) == 'variable':
                return Tree('assign', [expr.children[0], value])

            # Reported, not raised: parsing continues as if there were no '='
            self.error(equals, "Invalid assignment target.")

        return expr

    def parse_or(self) -> Tree:
        expr = self.parse_and()

        while self.check(TT.OR):
            op = as_token(self.advance())
            right = self.parse_and()
            expr = Tree('logical', [expr, op, right])

        return expr

    def parse_and(self) -> Tree:
        expr = self.parse_equality()

        while self.check(TT.AND):
            op = as_token(self.advance())
            right = self.parse_equality()
            expr = Tree('logical', [expr, op, right])

        return expr

    def _parse_binary_level(self, operand, *ops: TT) -> Tree:
        """Left-associative binary level: operand (op operand)*"""
        expr = operand()

        while self.check(*ops):
            op = as_token(self.advance())
            right = operand()
            expr = Tree('binary', [expr, op, right])

        return expr

    def parse_equality(self) -> Tree:
        return self._parse_binary_level(self.parse_comparison, TT.BANG_EQUAL, TT.EQUAL_EQUAL)

    def parse_comparison(self) -> Tree:
        return self._parse_binary_level(
            self.parse_term, TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL
        )

    def parse_term(self) -> Tree:
        return self._parse_binary_level(self.parse_factor, TT.MINUS, TT.PLUS)

    def parse_factor(self) -> Tree:
        return self._parse_binary_level(self.parse_unary, TT.SLASH, TT.STAR)

    def parse_unary(self) -> Tree:
        if self.check(TT.BANG, TT.MINUS):
            op = as_token(self.advance())
            operand = self.parse_unary()
            return Tree('unary', [op, operand])

        return self.parse_call()

    def parse_call(self) -> Tree:
        """Zero or more argument lists applied left to right: f(a)(b)"""
        expr = self.parse_primary()

        while self.match(TT.LEFT_PAREN):
            expr = self.finish_call(expr)

        return expr

    def finish_call(self, callee: Tree) -> Tree:
        args: List[Tree] = []

        if not self.check(TT.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGS:
                    self.error(self.current, f"Can't have more than {MAX_ARGS} arguments.")

                args.append(self.parse_expr())
                if not self.match(TT.COMMA):
                    break

        paren = self.expect(TT.RIGHT_PAREN, "Expect ')' after arguments.")
        return Tree('call', [callee, as_token(paren), Tree('arguments', args)])

    def parse_primary(self) -> Tree:
        """
        Parse primary expressions:
        - Literals (numbers, strings, true, false, nil)
        - Identifiers
        - Parenthesized expressions
        """
        if self.match(TT.FALSE):
            return Tree('literal', [FALSE])
        if self.match(TT.TRUE):
            return Tree('literal', [TRUE])
        if self.match(TT.NIL):
            return Tree('literal', [NIL])

        if self.check(TT.NUMBER):
            tok = self.advance()
            return Tree('literal', [LoxNumber(tok.literal)])

        if self.check(TT.STRING):
            tok = self.advance()
            return Tree('literal', [LoxString(tok.literal)])

        if self.check(TT.IDENTIFIER):
            return Tree('variable', [as_token(self.advance())])

        if self.match(TT.LEFT_PAREN):
            inner = self.parse_expr()
            self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return Tree('grouping', [inner])

        raise self.error(self.current, "Expect expression.")


def parse_tokens(tokens: List[Tok], errors: Optional[ErrorSink] = None) -> List[Tree]:
    """Parse a token list, raising the first ParseError once the whole pass is done"""
    parser = Parser(tokens, errors=errors)
    statements = parser.parse()

    if parser.failed:
        first = parser.parse_errors[0]
        first.statements = statements
        first.all_errors = list(parser.parse_errors)
        raise first

    return statements


def parse_source(source: str, errors: Optional[ErrorSink] = None) -> List[Tree]:
    """
    Parse Lox source code to a list of statement trees.

    Raises LexError if scanning failed (the parser never runs then) or
    ParseError if any statement was malformed.
    """
    from .lexer_rd import tokenize

    tokens = tokenize(source, errors=errors)
    return parse_tokens(tokens, errors=errors)
