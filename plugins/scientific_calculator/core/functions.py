"""Named functions that Advanced mode exposes to the evaluator."""

from __future__ import annotations

import math
from enum import Enum
from functools import wraps
from typing import Callable, Mapping


class AngleUnit(str, Enum):
    DEGREE = "degree"
    RADIAN = "radian"

    def toggled(self) -> "AngleUnit":
        return AngleUnit.RADIAN if self is AngleUnit.DEGREE else AngleUnit.DEGREE


def parse_angle_unit(value: AngleUnit | str) -> AngleUnit:
    try:
        return AngleUnit(value)
    except ValueError as exc:
        raise ValueError("angle_unit must be 'radian' or 'degree'") from exc


class FunctionScope:
    """Resolves identifiers used in call position to callables."""

    def resolve(self, name: str) -> Callable[..., float] | None:
        return None

    def names(self) -> list[str]:
        return []


class EmptyScope(FunctionScope):
    """Scope used by Basic mode and by conversion operands: no functions."""


class ScientificScope(FunctionScope):
    """Fixed function table bound to one angle unit."""

    def __init__(self, angle_unit: AngleUnit | str = AngleUnit.DEGREE) -> None:
        self.angle_unit = parse_angle_unit(angle_unit)
        self._functions: Mapping[str, Callable[..., float]] = _make_function_table(self.angle_unit)

    def resolve(self, name: str) -> Callable[..., float] | None:
        return self._functions.get(name)

    def names(self) -> list[str]:
        return list(self._functions)


def _ieee(fn: Callable[..., float]) -> Callable[..., float]:
    """Report domain errors as NaN and overflow as infinity instead of raising."""

    @wraps(fn)
    def wrapped(*args: float) -> float:
        try:
            return fn(*args)
        except ValueError:
            return math.nan
        except (OverflowError, ZeroDivisionError):
            return math.inf

    return wrapped


def _wrap_trig(fn: Callable[[float], float], *, use_degrees: bool) -> Callable[[float], float]:
    def wrapped(value: float) -> float:
        rad = math.radians(value) if use_degrees else value
        return fn(rad)

    return wrapped


def _wrap_inverse_trig(fn: Callable[[float], float], *, use_degrees: bool) -> Callable[[float], float]:
    def wrapped(value: float) -> float:
        angle = fn(value)
        return math.degrees(angle) if use_degrees else angle

    return wrapped


def _wrap_log(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(value: float) -> float:
        if value == 0:
            return -math.inf
        return fn(value)

    return wrapped


def _pow(base: float, exponent: float) -> float:
    if base == 0 and exponent < 0:
        return math.inf
    return math.pow(base, exponent)


def _inv(value: float) -> float:
    if value == 0:
        return math.copysign(math.inf, value)
    return 1 / value


def _make_function_table(angle_unit: AngleUnit) -> dict[str, Callable[..., float]]:
    use_degrees = angle_unit is AngleUnit.DEGREE
    funcs: dict[str, Callable[..., float]] = {
        "sin": _wrap_trig(math.sin, use_degrees=use_degrees),
        "cos": _wrap_trig(math.cos, use_degrees=use_degrees),
        "tan": _wrap_trig(math.tan, use_degrees=use_degrees),
        "asin": _wrap_inverse_trig(math.asin, use_degrees=use_degrees),
        "acos": _wrap_inverse_trig(math.acos, use_degrees=use_degrees),
        "atan": _wrap_inverse_trig(math.atan, use_degrees=use_degrees),
        "log": _wrap_log(math.log),
        "log2": _wrap_log(math.log2),
        "log10": _wrap_log(math.log10),
        "sqrt": math.sqrt,
        "pow": _pow,
        "exp": math.exp,
        "inv": _inv,
    }
    return {name: _ieee(func) for name, func in funcs.items()}


EMPTY_SCOPE = EmptyScope()


def build_scope(angle_unit: AngleUnit | str) -> ScientificScope:
    """Return the Advanced mode scope for ``angle_unit``."""

    return ScientificScope(angle_unit)


def function_names() -> list[str]:
    return build_scope(AngleUnit.RADIAN).names()


__all__ = [
    "AngleUnit",
    "EMPTY_SCOPE",
    "EmptyScope",
    "FunctionScope",
    "ScientificScope",
    "build_scope",
    "function_names",
    "parse_angle_unit",
]
