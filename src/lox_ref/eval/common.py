from __future__ import annotations

from typing import Any, Callable

from lark import Token

from ..runtime import Frame, LoxRuntimeError
from ..tree import Node, is_token
from ..types import LoxValue

EvalFunc = Callable[[Node, Frame], LoxValue]

def token_kind(node: Any) -> str | None:
    if not is_token(node):
        return None
    tok: Token = node
    return str(tok.type)

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENTIFIER':
        return str(node.value)

    raise LoxRuntimeError(f"{context} must be an identifier")
