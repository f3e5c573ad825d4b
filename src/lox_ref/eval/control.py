from __future__ import annotations

from typing import List

from ..runtime import Frame, LoxRuntimeError, ReturnSignal
from ..types import NIL, LoxValue
from ..utils import stringify
from .common import EvalFunc
from .helpers import current_function_frame as _current_function_frame

def eval_return_stmt(children: List, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    keyword = children[0]

    if _current_function_frame(frame) is None:
        raise LoxRuntimeError("return outside of a function", keyword)

    value = eval_func(children[1], frame) if len(children) > 1 else NIL

    raise ReturnSignal(value)

def eval_print_stmt(children: List, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    value = eval_func(children[0], frame)
    print(stringify(value))

    return NIL
