from __future__ import annotations

from typing import List

from lark import Token, Tree

from ..runtime import Frame, LoxRuntimeError
from ..tree import tree_children, tree_label
from ..types import NIL, LoxFunction, LoxValue
from .common import expect_ident_token as _expect_ident_token

def extract_params(params_node: Tree) -> List[Token]:
    params: List[Token] = []

    for p in tree_children(params_node):
        _expect_ident_token(p, "Parameter")
        params.append(p)

    return params

def eval_fn_def(children: List, frame: Frame) -> LoxValue:
    """Bind a function that closes over the defining scope, not the call site."""
    if len(children) != 3:
        raise LoxRuntimeError("Malformed function definition")

    name_tok, params_node, body_node = children
    name = _expect_ident_token(name_tok, "Function name")

    if tree_label(params_node) != 'params' or tree_label(body_node) != 'body':
        raise LoxRuntimeError("Malformed function definition")

    fn_value = LoxFunction(
        name=name,
        params=extract_params(params_node),
        body=list(body_node.children),
        closure=frame,
    )
    frame.define(name, fn_value)

    return NIL
