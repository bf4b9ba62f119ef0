from __future__ import annotations

import math

import pytest
from lark import Token, Tree

from tests.support.harness import (
    CalqRuntimeError,
    InvalidUnitSuffix,
    RecursionLimitExceeded,
    SymbolTable,
    UndefinedVariable,
    run_program,
    run_runtime_case,
)
from calq.evaluator import interpret
from calq.tree import binary, expr_stmt, literal, unary, unit, var, var_decl

SCENARIOS = [
    pytest.param("y + 1", None, UndefinedVariable, id="undefined-in-expression"),
    pytest.param("1; nope; 2", None, UndefinedVariable, id="middle-statement-fails"),
    pytest.param("f(v) = v; v", None, UndefinedVariable, id="parameter-not-visible-before-call"),
    pytest.param("sin(nope)", None, UndefinedVariable, id="builtin-argument-fails"),
    pytest.param("f(x) = f(x); f(1)", None, RecursionLimitExceeded, id="unbounded-recursion"),
    pytest.param("a = b; b = a; a", None, RecursionLimitExceeded, id="mutual-variable-cycle"),
    pytest.param("1 / 0", ("inf", math.inf), None, id="division-by-zero-is-not-an-error"),
    pytest.param("sqrt(-1)", ("nan", None), None, id="domain-error-is-not-an-error"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_error_handling(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_runtime_errors_share_base_class() -> None:
    with pytest.raises(CalqRuntimeError):
        run_program("nope")


def test_undefined_variable_message() -> None:
    with pytest.raises(UndefinedVariable) as exc_info:
        run_program("x = 1; y")

    assert exc_info.value.name == "y"
    assert str(exc_info.value) == "Undefined variable: 'y'."


def test_recursion_limit_message() -> None:
    with pytest.raises(RecursionLimitExceeded) as exc_info:
        run_program("f(x) = f(x); f(1)")

    assert exc_info.value.limit == 150
    assert str(exc_info.value) == "Maximum recursion depth of 150 exceeded."


def test_unknown_statement() -> None:
    with pytest.raises(CalqRuntimeError, match="Unknown statement: bogus"):
        interpret([Tree("bogus", [])])


def test_unknown_expression_node() -> None:
    with pytest.raises(CalqRuntimeError, match="Unknown node: mystery"):
        interpret([expr_stmt(Tree("mystery", []))])


def test_bare_token_as_expression() -> None:
    with pytest.raises(CalqRuntimeError, match="Unexpected token in expression"):
        interpret([expr_stmt(Token("NUMBER", "1"))])


def test_unknown_binary_operator_yields_zero() -> None:
    assert interpret([expr_stmt(binary(literal(6), "%", literal(4)))]) == 0.0


def test_unknown_unary_operator_is_identity() -> None:
    assert interpret([expr_stmt(unary("!", literal(5)))]) == 5.0


def test_invalid_unit_suffix() -> None:
    with pytest.raises(InvalidUnitSuffix) as exc_info:
        interpret([expr_stmt(unit(literal(1), "turn"))])

    assert exc_info.value.suffix == "turn"
    assert str(exc_info.value) == "Invalid unit: 'turn'."


def test_unit_operand_evaluated_before_suffix_check() -> None:
    with pytest.raises(UndefinedVariable):
        interpret([expr_stmt(unit(var("nope"), "turn"))])


def test_error_leaves_earlier_declarations() -> None:
    table = SymbolTable()
    stmts = [
        var_decl("a", literal(1)),
        expr_stmt(var("missing")),
        var_decl("b", literal(2)),
    ]

    with pytest.raises(UndefinedVariable):
        interpret(stmts, symbol_table=table)

    assert table.contains_var("a")
    assert not table.contains_var("b")
