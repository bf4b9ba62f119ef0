from __future__ import annotations

import math

import pytest

from tests.support.harness import InvalidUnitSuffix, Unit, run_program, run_runtime_case
from calq.evaluator import interpret
from calq.tree import expr_stmt, literal, unit

RADIAN_SCENARIOS = [
    pytest.param("180 deg", ("number", math.pi), None, id="deg-to-rad"),
    pytest.param("180°", ("number", math.pi), None, id="degree-sign"),
    pytest.param("2 rad", ("number", 2), None, id="rad-is-noop"),
    pytest.param("(90 + 90) deg", ("number", math.pi), None, id="group-annotation"),
    pytest.param("sin(90 deg)", ("number", 1), None, id="sin-of-degrees"),
    pytest.param("sin(pi / 2)", ("number", 1), None, id="sin-radians"),
    pytest.param("cos(0)", ("number", 1), None, id="cos-zero"),
    pytest.param("asin(1)", ("number", math.pi / 2), None, id="asin-in-radians"),
    pytest.param("atan2(1, 1)", ("number", math.pi / 4), None, id="atan2-in-radians"),
    pytest.param("sinh(0)", ("number", 0), None, id="hyperbolic-ignores-unit"),
    pytest.param("sec(0)", ("number", 1), None, id="sec-zero"),
    pytest.param("csc(0)", ("inf", float("inf")), None, id="csc-zero-inf"),
    pytest.param("asin(2)", ("nan", None), None, id="asin-domain-nan"),
]

DEGREE_SCENARIOS = [
    pytest.param("90 deg", ("number", 90), None, id="deg-is-noop"),
    pytest.param("pi rad", ("number", 180), None, id="rad-to-deg"),
    pytest.param("sin(90)", ("number", 1), None, id="sin-degrees"),
    pytest.param("cos(180)", ("number", -1), None, id="cos-degrees"),
    pytest.param("tan(45)", ("number", 1), None, id="tan-degrees"),
    pytest.param("sin(pi rad)", ("number", 0), None, id="sin-of-radian-annotation"),
    pytest.param("asin(1)", ("number", 90), None, id="asin-in-degrees"),
    pytest.param("acos(0)", ("number", 90), None, id="acos-in-degrees"),
    pytest.param("atan2(1, 1)", ("number", 45), None, id="atan2-in-degrees"),
    pytest.param("acot(1)", ("number", 45), None, id="acot-in-degrees"),
    pytest.param("cosh(0)", ("number", 1), None, id="hyperbolic-ignores-degrees"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", RADIAN_SCENARIOS)
def test_units_radians(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc, angle_unit=Unit.RADIANS)


@pytest.mark.parametrize("source, expectation, expected_exc", DEGREE_SCENARIOS)
def test_units_degrees(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc, angle_unit=Unit.DEGREES)


@pytest.mark.parametrize("value", [0.0, 1.0, 37.5, -720.25, 1e6])
def test_annotation_round_trip(value: float) -> None:
    as_radians = interpret([expr_stmt(unit(literal(value), "deg"))], angle_unit=Unit.RADIANS)
    back = interpret([expr_stmt(unit(literal(repr(as_radians)), "rad"))], angle_unit=Unit.DEGREES)

    assert math.isclose(back, value, rel_tol=1e-12, abs_tol=1e-12)


def test_unknown_unit_suffix_fails() -> None:
    with pytest.raises(InvalidUnitSuffix) as exc_info:
        interpret([expr_stmt(unit(literal(1), "grad"))])

    assert exc_info.value.suffix == "grad"
    assert str(exc_info.value) == "Invalid unit: 'grad'."


def test_angle_unit_accepts_strings() -> None:
    assert run_program("90 deg", angle_unit="deg") == 90
    assert run_program("90 deg", angle_unit="radians") == pytest.approx(math.pi / 2)


def test_angle_unit_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CALQ_ANGLE_UNIT", "deg")

    assert run_program("sin(90)") == pytest.approx(1.0)


def test_unit_from_name_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        Unit.from_name("gradians")
