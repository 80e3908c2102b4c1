import math

import pytest

from plugins.scientific_calculator.core import (
    EMPTY_SCOPE,
    AngleUnit,
    ErrorKind,
    build_scope,
    evaluate_expression,
    function_names,
)


def _value(expression, angle_unit="degree"):
    outcome = evaluate_expression(expression, build_scope(angle_unit))
    assert outcome.ok, outcome
    return outcome.value


def test_sin_in_degrees_and_radians():
    assert _value("sin(90)", "degree") == pytest.approx(1.0)
    assert _value("sin(1.5707963267948966)", "radian") == pytest.approx(1.0)


def test_cos_and_tan_follow_angle_unit():
    assert _value("cos(60)") == pytest.approx(0.5)
    assert _value("tan(45)") == pytest.approx(1.0)
    assert _value("cos(0)", "radian") == pytest.approx(1.0)


def test_inverse_trig_reports_in_selected_unit():
    assert _value("asin(1)", "degree") == pytest.approx(90.0)
    assert _value("acos(0)", "degree") == pytest.approx(90.0)
    assert _value("atan(1)", "degree") == pytest.approx(45.0)
    assert _value("atan(1)", "radian") == pytest.approx(math.pi / 4)


def test_logs_roots_and_powers():
    assert _value("log(exp(2))") == pytest.approx(2.0)
    assert _value("log2(8)") == pytest.approx(3.0)
    assert _value("log10(1000)") == pytest.approx(3.0)
    assert _value("sqrt(16)") == pytest.approx(4.0)
    assert _value("pow(2, 10)") == pytest.approx(1024.0)
    assert _value("inv(4)") == pytest.approx(0.25)
    assert _value("2 * sqrt(pow(3, 2) + pow(4, 2))") == pytest.approx(10.0)


@pytest.mark.parametrize(
    "expression",
    ["inv(0)", "sqrt(-1)", "log(0)", "log(-1)", "log10(0)", "asin(2)", "exp(1000)", "pow(10, 400)", "pow(0, -1)"],
)
def test_domain_errors_and_poles_become_division_by_zero(expression):
    outcome = evaluate_expression(expression, build_scope(AngleUnit.RADIAN))
    assert not outcome.ok
    assert outcome.kind is ErrorKind.DIVISION_BY_ZERO


def test_empty_scope_resolves_nothing():
    assert EMPTY_SCOPE.resolve("sin") is None
    assert EMPTY_SCOPE.names() == []


def test_scope_lists_every_function():
    assert sorted(function_names()) == sorted(
        ["sin", "cos", "tan", "asin", "acos", "atan", "log", "log2", "log10", "sqrt", "pow", "exp", "inv"]
    )


def test_invalid_angle_unit_rejected():
    with pytest.raises(ValueError):
        build_scope("gradian")


def test_angle_unit_toggles():
    assert AngleUnit.DEGREE.toggled() is AngleUnit.RADIAN
    assert AngleUnit.RADIAN.toggled() is AngleUnit.DEGREE
