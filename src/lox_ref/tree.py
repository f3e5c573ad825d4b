"""Shared helpers for working with the Tree/Token nodes the parser builds.

Statements and expressions are `lark.Tree` nodes labelled by kind; names,
operators, call parens and `return` keywords are `lark.Token`s that keep the
source line for diagnostics. Literal payloads are stored as runtime values
directly in the children list.
"""
from __future__ import annotations
from typing import Any, List, Optional

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

from .token_types import Tok

Node: TypeAlias = Any

EXPRESSION_LABELS = frozenset({
    'literal', 'variable', 'assign', 'unary', 'binary', 'logical', 'grouping', 'call',
})

STATEMENT_LABELS = frozenset({
    'exprstmt', 'printstmt', 'vardecl', 'block', 'ifstmt', 'whilestmt', 'fundecl', 'returnstmt',
})

def as_token(tok: Tok) -> Token:
    """Convert a scanner token into the tree's token type, keeping its line."""
    return Token(tok.type.name, tok.lexeme or "", line=tok.line)

def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def token_line(tok: Token) -> Optional[int]:
    return getattr(tok, "line", None)

def node_line(node: Node) -> Optional[int]:
    """Best source line for a node: its operator/paren/name token, else the first one found."""
    if is_token(node):
        return token_line(node)

    if not is_tree(node):
        return None

    if node.data in {'binary', 'logical', 'call'} and len(node.children) > 1:
        line = token_line(node.children[1])
        if line is not None:
            return line

    for child in node.children:
        line = node_line(child)
        if line is not None:
            return line

    return None
