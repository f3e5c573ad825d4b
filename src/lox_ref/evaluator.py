from __future__ import annotations

import sys
from typing import Callable, Iterable, Optional

from lark import Token

from .diagnostics import ErrorSink
from .runtime import (
    Frame,
    LoxRuntimeError,
    init_stdlib,
)
from .tree import Node, Tree, is_token, is_tree, node_line
from .types import NIL, LoxValue, is_lox_value
from .eval.blocks import eval_block, eval_statements
from .eval.chains import eval_call
from .eval.control import eval_print_stmt, eval_return_stmt
from .eval.expr import (
    eval_assign,
    eval_binary,
    eval_logical,
    eval_unary,
    eval_variable,
)
from .eval.fn import eval_fn_def
from .eval.loops import eval_if_stmt, eval_while_stmt
from .utils import debug_py_trace_enabled

# Every Lox call costs a dozen or so host frames
MIN_RECURSION_LIMIT = 8000


def _maybe_attach_location(exc: LoxRuntimeError, node: Node) -> None:
    if exc.line is not None:
        return

    line = node_line(node)
    if line is not None:
        exc.line = line

# ---------------- Public API ----------------

def eval_expr(ast: Node, frame: Optional[Frame]=None) -> LoxValue:
    init_stdlib()

    if frame is None:
        frame = Frame()

    try:
        return eval_node(ast, frame)
    except LoxRuntimeError as e:
        _maybe_attach_location(e, ast)
        raise

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> LoxValue:
    try:
        return _eval_node_inner(n, frame)
    except LoxRuntimeError as e:
        _maybe_attach_location(e, n)
        raise
    except RecursionError as e:
        # Deep Lox recursion exhausts the host stack first
        raise LoxRuntimeError("Stack overflow.") from e


def _eval_node_inner(n: Node, frame: Frame) -> LoxValue:
    if is_lox_value(n):
        return n

    if is_token(n):
        raise LoxRuntimeError(f"Unexpected token {n.type} in expression position", n)

    if not is_tree(n):
        raise LoxRuntimeError(f"Unknown node: {n!r}")

    handler = _NODE_DISPATCH.get(n.data)
    if handler is None:
        raise LoxRuntimeError(f"Unknown node: {n.data}")

    return handler(n, frame)


def _eval_var_decl(n: Tree, frame: Frame) -> LoxValue:
    name_tok: Token = n.children[0]
    value = eval_node(n.children[1], frame) if len(n.children) > 1 else NIL
    # Redeclaring in the same scope overwrites
    frame.define(str(name_tok.value), value)
    return NIL


def _eval_expr_stmt(n: Tree, frame: Frame) -> LoxValue:
    eval_node(n.children[0], frame)
    return NIL


_NODE_DISPATCH: dict[str, Callable[[Tree, Frame], LoxValue]] = {
    'literal': lambda n, frame: n.children[0],
    'grouping': lambda n, frame: eval_node(n.children[0], frame),
    'variable': eval_variable,
    'assign': lambda n, frame: eval_assign(n.children, frame, eval_node),
    'unary': lambda n, frame: eval_unary(n.children, frame, eval_node),
    'binary': lambda n, frame: eval_binary(n.children, frame, eval_node),
    'logical': lambda n, frame: eval_logical(n.children, frame, eval_node),
    'call': lambda n, frame: eval_call(n, frame, eval_node),
    'exprstmt': _eval_expr_stmt,
    'printstmt': lambda n, frame: eval_print_stmt(n.children, frame, eval_node),
    'vardecl': _eval_var_decl,
    'block': eval_block,
    'ifstmt': lambda n, frame: eval_if_stmt(n, frame, eval_node),
    'whilestmt': lambda n, frame: eval_while_stmt(n, frame, eval_node),
    'fundecl': lambda n, frame: eval_fn_def(n.children, frame),
    'returnstmt': lambda n, frame: eval_return_stmt(n.children, frame, eval_node),
}

# ---------------- Interpreter ----------------

class Interpreter:
    """
    Owns the global scope. Each `interpret` call runs a program against the
    same globals, so REPL entries see earlier definitions.
    """

    def __init__(self, errors: Optional[ErrorSink] = None):
        init_stdlib()
        if sys.getrecursionlimit() < MIN_RECURSION_LIMIT:
            sys.setrecursionlimit(MIN_RECURSION_LIMIT)

        self.errors = errors if errors is not None else ErrorSink()
        self.globals = Frame()

    def interpret(self, statements: Iterable[Node]) -> bool:
        """Run statements in order; report the first runtime error and stop. Returns success."""
        try:
            eval_statements(statements, self.globals)
        except LoxRuntimeError as e:
            self.report(e)
            return False

        return True

    def report(self, exc: LoxRuntimeError) -> None:
        self.errors.runtime_error(exc.line, exc.message)

        if debug_py_trace_enabled():
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
