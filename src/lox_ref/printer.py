"""Debug printers: the token dump and an s-expression rendering of statement trees."""

from __future__ import annotations

from typing import Iterable, List

from lark import Transformer

from .token_types import Tok
from .tree import Node
from .utils import stringify


def dump_tokens(tokens: Iterable[Tok]) -> List[str]:
    return [tok.dump() for tok in tokens]


def _sexpr(head: str, *parts: str) -> str:
    return "(" + " ".join([head, *parts]) + ")"


class AstPrinter(Transformer):
    """Renders a statement or expression tree as nested s-expressions."""

    # ---- expressions ----
    def literal(self, c):
        return stringify(c[0])

    def variable(self, c):
        return str(c[0])

    def assign(self, c):
        return _sexpr("=", str(c[0]), c[1])

    def unary(self, c):
        return _sexpr(str(c[0]), c[1])

    def binary(self, c):
        left, op, right = c
        return _sexpr(str(op), left, right)

    def logical(self, c):
        left, op, right = c
        return _sexpr(str(op), left, right)

    def grouping(self, c):
        return _sexpr("group", c[0])

    def arguments(self, c):
        return list(c)

    def call(self, c):
        callee, _paren, args = c
        return _sexpr("call", callee, *args)

    # ---- statements ----
    def exprstmt(self, c):
        return _sexpr(";", c[0])

    def printstmt(self, c):
        return _sexpr("print", c[0])

    def vardecl(self, c):
        return _sexpr("var", str(c[0]), *c[1:])

    def block(self, c):
        return _sexpr("block", *c)

    def ifstmt(self, c):
        return _sexpr("if", *c)

    def whilestmt(self, c):
        return _sexpr("while", *c)

    def params(self, c):
        return "(" + " ".join(str(p) for p in c) + ")"

    def body(self, c):
        return list(c)

    def fundecl(self, c):
        name, params, body = c
        return _sexpr("fun", str(name), params, *body)

    def returnstmt(self, c):
        return _sexpr("return", *c[1:])


def print_ast(node: Node) -> str:
    return AstPrinter().transform(node)


def print_program(statements: Iterable[Node]) -> List[str]:
    printer = AstPrinter()
    return [printer.transform(stmt) for stmt in statements]
