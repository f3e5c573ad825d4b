from __future__ import annotations

import importlib
from typing import List

from .types import (
    LoxValue, LoxFunction, NativeFunction, NativeFn, Frame,
    Builtins, LoxRuntimeError, LoxTypeError, LoxArityError, UndefinedVariable, ReturnSignal,
    NIL, is_callable, is_lox_value,
)

__all__ = [
    "Frame", "LoxRuntimeError", "LoxTypeError", "LoxArityError", "UndefinedVariable",
    "ReturnSignal", "init_stdlib", "register_native", "call_function", "is_callable",
]

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load the stdlib module (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("lox_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_native(name: str, *, arity: int = 0):
    def dec(fn: NativeFn):
        Builtins.native_functions[name] = NativeFunction(name=name, fn=fn, arity_count=arity)
        return fn

    return dec

def call_function(fn: LoxFunction, args: List[LoxValue]) -> LoxValue:
    """
    Run a user function body in a fresh scope parented at its closure.

    Arity is checked by the caller. A `return` anywhere in the body unwinds
    to here as ReturnSignal; falling off the end yields nil.
    """
    from .eval.blocks import eval_statements  # local import to avoid cycle

    callee_frame = Frame(parent=fn.closure)
    callee_frame.mark_function_frame()

    for param, val in zip(fn.params, args):
        callee_frame.define(str(param.value), val)

    try:
        eval_statements(fn.body, callee_frame)
    except ReturnSignal as signal:
        return signal.value

    return NIL

def call_native(native: NativeFunction, args: List[LoxValue], frame: Frame) -> LoxValue:
    result = native.fn(frame, args)

    if not is_lox_value(result):
        raise LoxTypeError(f"Native function '{native.name}' returned {type(result).__name__}")

    return result
