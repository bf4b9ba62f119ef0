from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from lark import Token, Tree

from ..runtime import (
    ArgumentCountMismatch,
    CalqRuntimeError,
    SymbolTable,
    UndefinedFunction,
    call_binary,
    call_unary,
)
from ..tree import Node, tree_children, tree_label
from .common import expect_ident_token, ident_token_value

if TYPE_CHECKING:
    from ..evaluator import Context

EvalFunc = Callable[[Node, 'Context'], float]

def extract_param_names(params_node: Any, context: str="parameter list") -> List[str]:
    if params_node is None:
        return []

    names: List[str] = []

    for p in tree_children(params_node):
        name = ident_token_value(p)

        if name is None:
            raise CalqRuntimeError(f"Unsupported parameter node in {context}: {p}")
        names.append(name)

    return names

def _call_builtin(name: str, args: List[Node], ctx: 'Context', eval_func: EvalFunc) -> Optional[float]:
    match len(args):
        case 1:
            x = eval_func(args[0], ctx)
            return call_unary(name, x, ctx.angle_unit)
        case 2:
            x = eval_func(args[0], ctx)
            y = eval_func(args[1], ctx)
            return call_binary(name, x, y, ctx.angle_unit)
        case _:
            return None

def eval_fn_call(children: List[Node], ctx: 'Context', eval_func: EvalFunc, stmt_func: EvalFunc) -> float:
    """Builtins first (keyed on arity), then the user declaration under ``name()``.

    Arguments are bound by declaring each parameter as a global variable holding
    the unevaluated argument expression. There is no call-local scope: a call
    permanently overwrites any variable named like one of its parameters, and a
    nested call of the same function clobbers the outer call's bindings.
    """
    name = expect_ident_token(children[0], "Function name")
    args = tree_children(children[1]) if len(children) > 1 else []

    result = _call_builtin(name, args, ctx, eval_func)
    if result is not None:
        return result

    decl = ctx.symbol_table.get(SymbolTable.fn_key(name))
    if tree_label(decl) != 'fn_decl':
        raise UndefinedFunction(name)

    _, params_node, body = decl.children
    params = extract_param_names(params_node, context="function declaration")

    if len(params) != len(args):
        raise ArgumentCountMismatch(name, len(params), len(args))

    for param, arg in zip(params, args):
        stmt_func(Tree('var_decl', [Token('IDENT', param), copy.deepcopy(arg)]), ctx)

    return ctx.expand(body)
