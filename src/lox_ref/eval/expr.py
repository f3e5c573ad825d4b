from __future__ import annotations

import math
from typing import Callable, Dict, List, Tuple

from lark import Token, Tree

from ..runtime import Frame, LoxTypeError, UndefinedVariable
from ..types import FALSE, TRUE, LoxBool, LoxNumber, LoxString, LoxValue
from ..utils import concat_text, lox_equals, stringify
from .common import EvalFunc, expect_ident_token
from .helpers import is_truthy

def _as_bool(flag: bool) -> LoxBool:
    return TRUE if flag else FALSE

def _divide(lhs: float, rhs: float) -> float:
    # IEEE-754 semantics instead of ZeroDivisionError
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)

    return lhs / rhs

_ARITHMETIC: Dict[str, Callable[[float, float], LoxValue]] = {
    'MINUS': lambda a, b: LoxNumber(a - b),
    'STAR': lambda a, b: LoxNumber(a * b),
    'SLASH': lambda a, b: LoxNumber(_divide(a, b)),
    'PLUS': lambda a, b: LoxNumber(a + b),
    'GREATER': lambda a, b: _as_bool(a > b),
    'GREATER_EQUAL': lambda a, b: _as_bool(a >= b),
    'LESS': lambda a, b: _as_bool(a < b),
    'LESS_EQUAL': lambda a, b: _as_bool(a <= b),
}

def _number_operands(lhs: LoxValue, op: Token, rhs: LoxValue) -> Tuple[float, float]:
    if isinstance(lhs, LoxNumber) and isinstance(rhs, LoxNumber):
        return lhs.value, rhs.value

    raise LoxTypeError(
        f"Operands must be numbers for operator ({stringify(lhs)} {op.value} {stringify(rhs)}).",
        op,
    )

def apply_binary_operator(op: Token, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    kind = op.type

    if kind == 'EQUAL_EQUAL':
        return _as_bool(lox_equals(lhs, rhs))
    if kind == 'BANG_EQUAL':
        return _as_bool(not lox_equals(lhs, rhs))

    # String on the left concatenates with the shortest text of the right
    if kind == 'PLUS' and isinstance(lhs, LoxString):
        return LoxString(lhs.value + concat_text(rhs))

    handler = _ARITHMETIC.get(kind)
    if handler is None:
        raise LoxTypeError(f"Unsupported binary operator {op.value}", op)

    a, b = _number_operands(lhs, op, rhs)
    return handler(a, b)

def eval_binary(children: List, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    left_node, op, right_node = children
    lhs = eval_func(left_node, frame)
    rhs = eval_func(right_node, frame)
    return apply_binary_operator(op, lhs, rhs)

def eval_unary(children: List, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    op, operand_node = children
    operand = eval_func(operand_node, frame)

    match op.type:
        case 'MINUS':
            if not isinstance(operand, LoxNumber):
                raise LoxTypeError(
                    f"Operand must be a number for operator (- {stringify(operand)}).", op
                )
            return LoxNumber(-operand.value)
        case 'BANG':
            return _as_bool(not is_truthy(operand))
        case _:
            raise LoxTypeError(f"Unsupported unary operator {op.value}", op)

def eval_logical(children: List, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    """Short-circuit and/or; the result is one of the operands, not a coerced bool."""
    left_node, op, right_node = children
    lhs = eval_func(left_node, frame)

    if op.type == 'OR':
        if is_truthy(lhs):
            return lhs
    elif not is_truthy(lhs):
        return lhs

    return eval_func(right_node, frame)

def eval_variable(n: Tree, frame: Frame) -> LoxValue:
    name_tok = n.children[0]
    name = expect_ident_token(name_tok, "Variable reference")

    try:
        return frame.get(name)
    except UndefinedVariable as exc:
        raise UndefinedVariable(name, name_tok) from exc

def eval_assign(children: List, frame: Frame, eval_func: EvalFunc) -> LoxValue:
    """Assignment is an expression; its value is the assigned value."""
    name_tok, value_node = children
    name = expect_ident_token(name_tok, "Assignment target")
    value = eval_func(value_node, frame)

    try:
        frame.assign(name, value)
    except UndefinedVariable as exc:
        raise UndefinedVariable(name, name_tok) from exc

    return value
