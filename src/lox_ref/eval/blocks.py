from __future__ import annotations

from typing import Iterable

from lark import Tree

from ..runtime import Frame
from ..tree import Node
from ..types import NIL, LoxValue

def eval_statements(statements: Iterable[Node], frame: Frame) -> LoxValue:
    """Run statements in order in `frame`; a ReturnSignal or runtime error stops the run."""
    from ..evaluator import eval_node  # local import to avoid cycle

    for stmt in statements:
        eval_node(stmt, frame)

    return NIL

def eval_block(n: Tree, frame: Frame) -> LoxValue:
    """A block gets its own scope; the scope lives on only if a closure captured it."""
    return eval_statements(n.children, Frame(parent=frame))
