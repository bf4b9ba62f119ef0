"""Shared helpers for building and inspecting the calq AST.

The AST is made of lark ``Tree`` nodes with ``Token`` leaves, the same shape
the parser emits, so hosts can build statements by hand with these helpers.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

from lark import Token, Tree
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Union[Tree, Token]

STATEMENT_LABELS = frozenset({'var_decl', 'fn_decl', 'expr_stmt'})

_OP_TOKENS = {
    '+': 'PLUS',
    '-': 'MINUS',
    '*': 'STAR',
    '/': 'SLASH',
    '^': 'POW',
    '**': 'POW',
}

_UNIT_TOKENS = {
    'deg': 'DEG',
    '°': 'DEG',
    'rad': 'RAD',
}


def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if isinstance(node, Tree) else None

def tree_children(node: Any) -> List[Node]:
    return list(node.children) if isinstance(node, Tree) else []

def is_statement(node: Any) -> bool:
    return tree_label(node) in STATEMENT_LABELS

def ident(name: str) -> Token:
    return Token('IDENT', name)

# ---------------- Statements ----------------

def var_decl(name: str, expr: Tree) -> Tree:
    return Tree('var_decl', [ident(name), expr])

def fn_decl(name: str, params: Sequence[str], body: Tree) -> Tree:
    return Tree('fn_decl', [ident(name), Tree('paramlist', [ident(p) for p in params]), body])

def expr_stmt(expr: Tree) -> Tree:
    return Tree('expr_stmt', [expr])

# ---------------- Expressions ----------------

def binary(left: Tree, op: Union[str, Token], right: Tree) -> Tree:
    if not isinstance(op, Token):
        op = Token(_OP_TOKENS.get(op, op), op)
    return Tree('binary', [left, op, right])

def unary(op: Union[str, Token], operand: Tree) -> Tree:
    if not isinstance(op, Token):
        op = Token(_OP_TOKENS.get(op, op), op)
    return Tree('unary', [op, operand])

def unit(expr: Tree, suffix: Union[str, Token]) -> Tree:
    if not isinstance(suffix, Token):
        suffix = Token(_UNIT_TOKENS.get(suffix, 'IDENT'), suffix)
    return Tree('unit', [expr, suffix])

def var(name: str) -> Tree:
    return Tree('var', [ident(name)])

def literal(text: Union[str, int, float]) -> Tree:
    return Tree('literal', [Token('NUMBER', str(text))])

def group(expr: Tree) -> Tree:
    return Tree('group', [expr])

def fn_call(name: str, args: Sequence[Tree]) -> Tree:
    return Tree('fn_call', [ident(name), Tree('arglist', list(args))])
