"""Phrase-driven unit conversion used by Metric mode."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable

from .evaluator import (
    MAX_EXPR_LENGTH,
    ErrorKind,
    EvaluationResult,
    Failure,
    Success,
    evaluate_expression,
)
from .functions import EMPTY_SCOPE


@dataclass(frozen=True, slots=True)
class Conversion:
    """A single ``"<from> to <to>"`` phrase and the formula it selects."""

    from_unit: str
    to_unit: str
    category: str
    apply: Callable[[float], float]

    @property
    def phrase(self) -> str:
        return f"{self.from_unit} to {self.to_unit}"


def _scale(factor: float) -> Callable[[float], float]:
    def convert(value: float) -> float:
        return value * factor

    return convert


# Order matters only for reporting; phrase matching is boundary-aware so no
# two entries can match the same span of text.
CONVERSIONS: tuple[Conversion, ...] = (
    Conversion("m", "km", "length", _scale(0.001)),
    Conversion("km", "m", "length", _scale(1000)),
    Conversion("m", "cm", "length", _scale(100)),
    Conversion("cm", "m", "length", _scale(0.01)),
    Conversion("m", "mm", "length", _scale(1000)),
    Conversion("mm", "m", "length", _scale(0.001)),
    Conversion("km", "miles", "length", _scale(0.621371)),
    Conversion("miles", "km", "length", _scale(1.60934)),
    Conversion("kg", "g", "mass", _scale(1000)),
    Conversion("g", "kg", "mass", _scale(0.001)),
    Conversion("kg", "mg", "mass", _scale(1e6)),
    Conversion("mg", "kg", "mass", _scale(1e-6)),
    Conversion("cm", "mm", "length", _scale(10)),
    Conversion("mm", "cm", "length", _scale(0.1)),
    Conversion("inch", "cm", "length", _scale(2.54)),
    Conversion("cm", "inch", "length", _scale(0.393701)),
    Conversion("°C", "°F", "temperature", lambda value: value * 9 / 5 + 32),
    Conversion("°F", "°C", "temperature", lambda value: (value - 32) * 5 / 9),
    Conversion("K", "°C", "temperature", lambda value: value - 273.15),
    Conversion("°C", "K", "temperature", lambda value: value + 273.15),
)

CONVERSION_TABLE: dict[str, Conversion] = {item.phrase: item for item in CONVERSIONS}

_PATTERNS: tuple[tuple[Conversion, re.Pattern[str]], ...] = tuple(
    (item, re.compile(rf"(?<![^\W\d_°]){re.escape(item.phrase)}(?![^\W\d_])"))
    for item in CONVERSIONS
)


def find_conversion(expression: str) -> tuple[Conversion, re.Match[str]] | None:
    """Return the first table entry whose phrase appears in ``expression``.

    A phrase only counts when it is not glued to a neighbouring letter, so
    ``"km to m"`` does not match inside ``"5 km to miles"``.
    """

    for item, pattern in _PATTERNS:
        match = pattern.search(expression)
        if match:
            return item, match
    return None


def convert_expression(expression: str, *, max_length: int = MAX_EXPR_LENGTH) -> EvaluationResult:
    """Evaluate ``expression``, applying the conversion phrase it contains."""

    if not isinstance(expression, str):
        return Failure(ErrorKind.SYNTAX, "Expression is required")
    found = find_conversion(expression)
    if found is None:
        return evaluate_expression(expression, EMPTY_SCOPE, max_length=max_length)

    conversion, match = found
    operand = (expression[: match.start()] + expression[match.end() :]).strip()
    outcome = evaluate_expression(operand, EMPTY_SCOPE, max_length=max_length)
    if isinstance(outcome, Failure):
        return outcome
    converted = conversion.apply(outcome.value)
    if not math.isfinite(converted):
        return Failure(ErrorKind.DIVISION_BY_ZERO, "Result is not finite")
    return Success(converted)


def list_conversions() -> list[dict[str, str]]:
    return [
        {
            "phrase": item.phrase,
            "from_unit": item.from_unit,
            "to_unit": item.to_unit,
            "category": item.category,
        }
        for item in CONVERSIONS
    ]


__all__ = [
    "Conversion",
    "CONVERSIONS",
    "CONVERSION_TABLE",
    "convert_expression",
    "find_conversion",
    "list_conversions",
]
