from __future__ import annotations

import math
from typing import TYPE_CHECKING, Callable, List

from lark import Token, Tree

from ..runtime import InvalidUnitSuffix, UndefinedVariable, Unit, lookup_constant
from ..tree import Node, tree_label
from ..utils import ieee_div, ieee_pow
from .common import expect_ident_token, token_kind

if TYPE_CHECKING:
    from ..evaluator import Context

EvalFunc = Callable[[Node, 'Context'], float]

_UNIT_TOKENS = {
    'DEG': Unit.DEGREES,
    'RAD': Unit.RADIANS,
}

def apply_binary_operator(op: str, lhs: float, rhs: float) -> float:
    match op:
        case 'PLUS':
            return lhs + rhs
        case 'MINUS':
            return lhs - rhs
        case 'STAR':
            return lhs * rhs
        case 'SLASH':
            return ieee_div(lhs, rhs)
        case 'POW':
            return ieee_pow(lhs, rhs)
        case _:
            # The parser never builds a binary node with any other operator.
            return 0.0

def eval_binary(children: List[Node], ctx: 'Context', eval_func: EvalFunc) -> float:
    """Fold a left-nested chain such as ``1 + 2 - 3 * 4`` without recursing down its spine."""
    left_node, op, right_node = children
    chain = [(op, right_node)]
    node = left_node

    while tree_label(node) == 'binary':
        left_node, op, right_node = node.children
        chain.append((op, right_node))
        node = left_node

    # Left fully before right: either side may fail or touch the symbol table.
    acc = eval_func(node, ctx)

    for op, right_node in reversed(chain):
        rhs = eval_func(right_node, ctx)
        acc = apply_binary_operator(token_kind(op) or str(op), acc, rhs)

    return acc

def eval_unary(children: List[Node], ctx: 'Context', eval_func: EvalFunc) -> float:
    op, operand = children
    value = eval_func(operand, ctx)

    if token_kind(op) == 'MINUS':
        return -value
    return value

def unit_for_token(tok: Node) -> Unit:
    unit = _UNIT_TOKENS.get(token_kind(tok) or '')

    if unit is None:
        raise InvalidUnitSuffix(str(getattr(tok, 'value', tok)))
    return unit

def eval_unit(children: List[Node], ctx: 'Context', eval_func: EvalFunc) -> float:
    """Convert a value written in the annotated unit into the context's unit."""
    expr, suffix = children
    value = eval_func(expr, ctx)
    unit = unit_for_token(suffix)

    if unit is ctx.angle_unit:
        return value

    if unit is Unit.DEGREES:
        return math.radians(value)
    return math.degrees(value)

def eval_var(children: List[Node], ctx: 'Context', eval_func: EvalFunc) -> float:
    name = expect_ident_token(children[0], "Variable name")

    constant = lookup_constant(name)
    if constant is not None:
        return eval_func(Tree('literal', [Token('NUMBER', constant)]), ctx)

    decl = ctx.symbol_table.get(name)
    if tree_label(decl) == 'var_decl':
        return ctx.expand(decl.children[1])

    raise UndefinedVariable(name)

def eval_group(children: List[Node], ctx: 'Context', eval_func: EvalFunc) -> float:
    return eval_func(children[0], ctx)
