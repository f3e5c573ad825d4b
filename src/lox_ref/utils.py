from __future__ import annotations

import os

from .types import (
    LoxValue,
    LoxBool,
    LoxFunction,
    LoxNil,
    LoxNumber,
    LoxString,
    NativeFunction,
)

_TRUTHY_ENV = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """Whether runtime-error reports should carry the Python traceback."""
    return os.environ.get("LOX_DEBUG_PY_TRACE", "").strip().lower() in _TRUTHY_ENV


def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        # Callables are equal only to themselves
        case (LoxFunction() | NativeFunction(), LoxFunction() | NativeFunction()):
            return lhs is rhs
        case _:
            return False


def stringify(value: LoxValue) -> str:
    """Display form used by `print`, the REPL echo, error operands and the AST printer."""
    return repr(value)


def concat_text(value: LoxValue) -> str:
    """Form appended by string `+`: integral numbers drop the `.0`."""
    if isinstance(value, LoxNumber) and float(value.value).is_integer():
        return f"{float(value.value):.0f}"

    return repr(value)
