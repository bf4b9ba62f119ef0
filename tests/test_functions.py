from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    ArgumentCountMismatch,
    SymbolTable,
    UndefinedFunction,
    run_program,
    run_runtime_case,
)
from calq.evaluator import interpret
from calq.tree import binary, expr_stmt, fn_call, fn_decl, literal, var, var_decl

SCENARIOS = [
    pytest.param("f(a, b) = a * a + b; f(3, 4)", ("number", 13), None, id="positional-binding"),
    pytest.param("f(a, b) := a * a + b; f(3, 4)", ("number", 13), None, id="walrus-declaration"),
    pytest.param("sq(x) = x ^ 2; sq(5)", ("number", 25), None, id="unary-user-fn"),
    pytest.param("k() = 7; k() * 2", ("number", 14), None, id="zero-arity-user-fn"),
    pytest.param("s(a, b, c) = a + b + c; s(1, 2, 3)", ("number", 6), None, id="three-arity-user-fn"),
    pytest.param("g(y) = y + 1; h(x) = g(x) * 2; h(4)", ("number", 10), None, id="fn-calls-fn"),
    pytest.param("f(x) = x * 2; f(f(3))", ("number", 12), None, id="nested-call-same-fn"),
    pytest.param("f(x) = x * 2; f(2 + 3)", ("number", 10), None, id="expression-argument"),
    pytest.param("f(x) = x + 1; f(1); f(x) = x + 2; f(1)", ("number", 3), None, id="fn-redeclare"),
    pytest.param("sin(x) = 42; sin(0)", ("number", 0), None, id="builtin-beats-user-fn"),
    pytest.param("log(x, y, z) = x + y + z; log(1, 2, 3)", ("number", 6), None, id="user-fn-at-non-builtin-arity"),
    pytest.param("f(a, b) = a + b; f(1)", None, ArgumentCountMismatch, id="too-few-args"),
    pytest.param("f(a) = a; f(1, 2, 3)", None, ArgumentCountMismatch, id="too-many-args"),
    pytest.param("nope(1)", None, UndefinedFunction, id="unknown-fn"),
    pytest.param("nope()", None, UndefinedFunction, id="unknown-fn-no-args"),
    pytest.param("x = 3; x(1)", None, UndefinedFunction, id="variable-is-not-fn"),
    pytest.param(
        dedent(
            """\
            area(r) = pi * r ^ 2
            scale = 2
            area(scale) / pi
            """
        ),
        ("number", 4),
        None,
        id="multiline-program",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_argument_count_error_fields() -> None:
    with pytest.raises(ArgumentCountMismatch) as exc_info:
        run_program("f(a, b) = a + b; f(1)")

    err = exc_info.value
    assert (err.name, err.expected, err.actual) == ("f", 2, 1)
    assert str(err) == "Expected 2 arguments in function 'f' but found 1."


def test_undefined_function_message() -> None:
    with pytest.raises(UndefinedFunction) as exc_info:
        run_program("g(2)")

    assert exc_info.value.name == "g"
    assert str(exc_info.value) == "Undefined function: 'g'."


def test_hand_built_fn_decl_is_registered_by_interpret() -> None:
    body = binary(binary(var("a"), "*", var("a")), "+", var("b"))
    stmts = [
        fn_decl("f", ["a", "b"], body),
        expr_stmt(fn_call("f", [literal(3), literal(4)])),
    ]

    assert interpret(stmts) == 13


def test_variable_and_function_share_base_name() -> None:
    table = SymbolTable()

    result = run_program("f = 10; f(x) = x + 1; f(f)", symbol_table=table)

    assert result == 11
    assert table.contains_var("f")
    assert table.contains_fn("f")


def test_parser_registers_fn_before_evaluation() -> None:
    table = SymbolTable()

    assert run_program("f(x) = x", symbol_table=table) is None
    assert table.get(SymbolTable.fn_key("f")) is not None


def test_arguments_are_evaluated_before_builtin_lookup() -> None:
    stmts = [
        var_decl("y", literal(1)),
        expr_stmt(fn_call("sqrt", [binary(var("y"), "+", literal(8))])),
    ]

    assert interpret(stmts) == 3
