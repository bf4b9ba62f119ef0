from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from lark import Tree

from .runtime import (
    CalqRuntimeError,
    RecursionLimitExceeded,
    SymbolTable,
    Unit,
    init_prelude,
)
from .tree import Node, is_tree, tree_label
from .utils import DEFAULT_MAX_DEPTH

from .eval.common import expect_ident_token, token_number
from .eval.expr import eval_binary, eval_group, eval_unary, eval_unit, eval_var
from .eval.fn import eval_fn_call

# ---------------- Context ----------------

class Context:
    """State threaded through one interpretation pass.

    The symbol table is borrowed from the host and mutated in place, so
    declarations outlive the context. The angle unit is fixed for the pass.
    ``depth`` counts nested expansions of variable declarations and user
    function bodies, the only places evaluation can recurse without bound.
    """

    def __init__(self, angle_unit: Unit, symbol_table: SymbolTable, max_depth: int = DEFAULT_MAX_DEPTH):
        self.angle_unit = angle_unit
        self.symbol_table = symbol_table
        self.max_depth = max_depth
        self.depth = 0

    def interpret(self, statements: Sequence[Tree]) -> Optional[float]:
        """Run statements in order; surface the value of a trailing expression statement."""
        init_prelude()
        last = len(statements) - 1

        try:
            for i, stmt in enumerate(statements):
                value = eval_stmt(stmt, self)

                if i == last and tree_label(stmt) == 'expr_stmt':
                    return value
        except RecursionError:
            # Python ran out of stack before the expansion limit was reached.
            raise RecursionLimitExceeded(self.max_depth) from None

        return None

    def expand(self, n: Node) -> float:
        """Evaluate a stored declaration or function body one expansion deeper."""
        if self.depth >= self.max_depth:
            raise RecursionLimitExceeded(self.max_depth)

        self.depth += 1
        try:
            return eval_node(n, self)
        finally:
            self.depth -= 1

# ---------------- Public API ----------------

def interpret(
    statements: Sequence[Tree],
    angle_unit: Unit = Unit.RADIANS,
    symbol_table: Optional[SymbolTable] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[float]:
    if symbol_table is None:
        symbol_table = SymbolTable()

    return Context(angle_unit, symbol_table, max_depth=max_depth).interpret(statements)

# ---------------- Statements ----------------

def eval_stmt(stmt: Node, ctx: Context) -> float:
    match tree_label(stmt):
        case 'var_decl':
            return _eval_var_decl(stmt, ctx)
        case 'fn_decl':
            return _eval_fn_decl(stmt, ctx)
        case 'expr_stmt':
            return eval_node(stmt.children[0], ctx)
        case _:
            raise CalqRuntimeError(f"Unknown statement: {tree_label(stmt) or stmt!r}")

def _eval_var_decl(stmt: Tree, ctx: Context) -> float:
    name = expect_ident_token(stmt.children[0], "Variable name")
    ctx.symbol_table.insert(name, stmt)
    return 0.0

def _eval_fn_decl(stmt: Tree, ctx: Context) -> float:
    # The parser registers declarations as it reads them; inserting the same
    # tree again keeps hand-built statement lists working and changes nothing.
    name = expect_ident_token(stmt.children[0], "Function name")
    ctx.symbol_table.insert(SymbolTable.fn_key(name), stmt)
    return 0.0

# ---------------- Expressions ----------------

def eval_node(n: Node, ctx: Context) -> float:
    if not is_tree(n):
        raise CalqRuntimeError(f"Unexpected token in expression: {n!r}")

    handler = _NODE_DISPATCH.get(n.data)
    if handler is None:
        raise CalqRuntimeError(f"Unknown node: {n.data}")

    return handler(n.children, ctx)

_NODE_DISPATCH: Dict[str, Callable[[List[Node], Context], float]] = {
    'binary': lambda ch, ctx: eval_binary(ch, ctx, eval_node),
    'unary': lambda ch, ctx: eval_unary(ch, ctx, eval_node),
    'unit': lambda ch, ctx: eval_unit(ch, ctx, eval_node),
    'var': lambda ch, ctx: eval_var(ch, ctx, eval_node),
    'literal': lambda ch, _: token_number(ch[0]),
    'group': lambda ch, ctx: eval_group(ch, ctx, eval_node),
    'fn_call': lambda ch, ctx: eval_fn_call(ch, ctx, eval_node, eval_stmt),
}
