from __future__ import annotations

from lark import Tree

from ..runtime import Frame, LoxRuntimeError
from ..tree import tree_children
from ..types import NIL, LoxValue
from .common import EvalFunc
from .helpers import is_truthy as _is_truthy

def eval_if_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    children = tree_children(n)

    if len(children) not in (2, 3):
        raise LoxRuntimeError("Malformed if statement")

    cond_node, then_node, *rest = children

    if _is_truthy(eval_func(cond_node, frame)):
        eval_func(then_node, frame)
    elif rest:
        eval_func(rest[0], frame)

    return NIL

def eval_while_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    """Condition is re-evaluated before every pass; `return` unwinds straight through."""
    cond_node, body_node = n.children

    while _is_truthy(eval_func(cond_node, frame)):
        eval_func(body_node, frame)

    return NIL
