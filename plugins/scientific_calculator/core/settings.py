"""Configuration helpers for the Scientific Calculator plugin."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .evaluator import MAX_EXPR_LENGTH
from .functions import AngleUnit
from .session import EvaluationMode


@dataclass(frozen=True)
class CalculatorSettings:
    history_limit: int | None = None
    max_expression_length: int = MAX_EXPR_LENGTH
    max_sessions: int = 256
    session_ttl_minutes: int = 30
    default_mode: EvaluationMode = EvaluationMode.BASIC
    default_angle_unit: AngleUnit = AngleUnit.DEGREE


def _positive_int(raw: Any, default: int | None) -> int | None:
    if raw is None:
        return default
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(value, 1)


def load_settings(raw: Mapping[str, Any] | None) -> CalculatorSettings:
    """Build settings from the ``plugins.scientific_calculator`` config block.

    Missing or malformed values fall back to the defaults so a bad
    ``config.yml`` never prevents the app from starting. ``history_limit``
    may be ``null`` to keep the whole history.
    """

    raw = raw or {}
    defaults = CalculatorSettings()

    try:
        default_mode = EvaluationMode(raw.get("default_mode", defaults.default_mode))
    except ValueError:
        default_mode = defaults.default_mode
    try:
        default_angle_unit = AngleUnit(raw.get("default_angle_unit", defaults.default_angle_unit))
    except ValueError:
        default_angle_unit = defaults.default_angle_unit

    return CalculatorSettings(
        history_limit=_positive_int(raw.get("history_limit"), None),
        max_expression_length=_positive_int(
            raw.get("max_expression_length"), defaults.max_expression_length
        ),
        max_sessions=_positive_int(raw.get("max_sessions"), defaults.max_sessions),
        session_ttl_minutes=_positive_int(
            raw.get("session_ttl_minutes"), defaults.session_ttl_minutes
        ),
        default_mode=default_mode,
        default_angle_unit=default_angle_unit,
    )


__all__ = ["CalculatorSettings", "load_settings"]
