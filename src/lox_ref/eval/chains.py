from __future__ import annotations

from typing import List

from lark import Token, Tree

from ..runtime import Frame, LoxArityError, LoxTypeError, call_function
from ..runtime import call_native
from ..types import LoxFunction, LoxValue, NativeFunction
from .common import EvalFunc

def eval_args_node(args_node: Tree, frame: Frame, eval_func: EvalFunc) -> List[LoxValue]:
    return [eval_func(arg, frame) for arg in args_node.children]

def call_value(callee: LoxValue, args: List[LoxValue], frame: Frame, paren: Token | None = None) -> LoxValue:
    match callee:
        case NativeFunction():
            if len(args) != callee.arity():
                raise LoxArityError(callee.arity(), len(args), paren)
            return call_native(callee, args, frame)
        case LoxFunction():
            if len(args) != callee.arity():
                raise LoxArityError(callee.arity(), len(args), paren)
            return call_function(callee, args)
        case _:
            raise LoxTypeError("Can only call functions.", paren)

def eval_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    """Callee first, then arguments left to right, then the arity check."""
    callee_node, paren, args_node = n.children
    callee = eval_func(callee_node, frame)
    args = eval_args_node(args_node, frame, eval_func)
    return call_value(callee, args, frame, paren)
