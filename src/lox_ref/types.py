from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from lark import Token

from .tree import Node

# ---------- Value Model ----------

@dataclass(frozen=True)
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass(frozen=True)
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        v = float(self.value)
        return f"{v:.1f}" if v.is_integer() else str(v)

@dataclass(frozen=True)
class LoxString:
    value: str
    def __repr__(self) -> str:
        return self.value

@dataclass(frozen=True)
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

NativeFn = Callable[['Frame', List['LoxValue']], 'LoxValue']

@dataclass(frozen=True, eq=False)
class NativeFunction:
    name: str
    fn: NativeFn
    arity_count: int = 0

    def arity(self) -> int:
        return self.arity_count

    def __repr__(self) -> str:
        return "<native fn>"

@dataclass(eq=False)
class LoxFunction:
    name: str
    params: List[Token]
    body: List[Node]           # statement nodes
    closure: 'Frame'           # defining scope, shared with siblings

    def arity(self) -> int:
        return len(self.params)

    def __repr__(self) -> str:
        return f"<fn {self.name}>"

LoxCallable: TypeAlias = NativeFunction | LoxFunction

LoxValue: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | NativeFunction
    | LoxFunction
)

_LOX_VALUE_TYPES: Tuple[type, ...] = (
    LoxNil,
    LoxNumber,
    LoxString,
    LoxBool,
    NativeFunction,
    LoxFunction,
)

def is_lox_value(value: object) -> TypeGuard[LoxValue]:
    return isinstance(value, _LOX_VALUE_TYPES)

def is_callable(value: object) -> TypeGuard[LoxCallable]:
    return isinstance(value, (NativeFunction, LoxFunction))

NIL = LoxNil()
TRUE = LoxBool(True)
FALSE = LoxBool(False)

# ---------- Environment ----------

class Frame:
    """
    One lexical scope. Lookup and assignment walk `parent` links outward;
    `define` always writes the innermost scope. A global frame (no parent)
    starts with every registered native.
    """

    def __init__(self, parent: Optional['Frame']=None):
        self.parent = parent
        self.vars: Dict[str, LoxValue] = {}
        self._is_function_frame = False

        if parent is None and Builtins.native_functions:
            for name, native in Builtins.native_functions.items():
                self.vars[name] = native

    def define(self, name: str, val: LoxValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> LoxValue:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                return frame.vars[name]
            frame = frame.parent

        raise UndefinedVariable(name)

    def assign(self, name: str, val: LoxValue) -> None:
        frame: Optional[Frame] = self

        while frame is not None:
            if name in frame.vars:
                frame.vars[name] = val
                return
            frame = frame.parent

        raise UndefinedVariable(name)

    def mark_function_frame(self) -> None:
        self._is_function_frame = True

    def is_function_frame(self) -> bool:
        return self._is_function_frame

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    line: Optional[int]

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.line = getattr(token, "line", None) if token is not None else None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        if self.line is None:
            return self.message

        return f"{self.message} (line {self.line})"

class LoxTypeError(LoxRuntimeError):
    pass

class LoxArityError(LoxRuntimeError):
    def __init__(self, expected: int, got: int, token: Optional[Token] = None):
        super().__init__(f"Expected {expected} arguments but got {got}.", token)
        self.expected = expected
        self.got = got

class UndefinedVariable(LoxRuntimeError):
    def __init__(self, name: str, token: Optional[Token] = None):
        super().__init__(f"Undefined variable '{name}'.", token)
        self.name = name

class ReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`."""
    def __init__(self, value: LoxValue):
        super().__init__()
        self.value = value

# ---------- Registries ----------

class Builtins:
    native_functions: Dict[str, NativeFunction] = {}
