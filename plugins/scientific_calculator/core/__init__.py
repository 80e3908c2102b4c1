"""Exports for scientific calculator core."""

from .conversions import (
    CONVERSION_TABLE,
    CONVERSIONS,
    Conversion,
    convert_expression,
    find_conversion,
    list_conversions,
)
from .evaluator import (
    MAX_EXPR_LENGTH,
    ErrorKind,
    EvaluationResult,
    ExpressionError,
    Failure,
    Success,
    evaluate_expression,
    format_number,
)
from .functions import (
    EMPTY_SCOPE,
    AngleUnit,
    EmptyScope,
    FunctionScope,
    ScientificScope,
    build_scope,
    function_names,
    parse_angle_unit,
)
from .settings import CalculatorSettings, load_settings
from .session import (
    CalculatorSession,
    EvaluationMode,
    HistoryEntry,
    SessionState,
    evaluate,
    parse_mode,
)
from .store import SessionNotFoundError, SessionStore, StoredSession

__all__ = [
    "AngleUnit",
    "CONVERSIONS",
    "CONVERSION_TABLE",
    "CalculatorSession",
    "CalculatorSettings",
    "Conversion",
    "EMPTY_SCOPE",
    "EmptyScope",
    "ErrorKind",
    "EvaluationMode",
    "EvaluationResult",
    "ExpressionError",
    "Failure",
    "FunctionScope",
    "HistoryEntry",
    "MAX_EXPR_LENGTH",
    "ScientificScope",
    "SessionNotFoundError",
    "SessionState",
    "SessionStore",
    "StoredSession",
    "Success",
    "build_scope",
    "convert_expression",
    "evaluate",
    "evaluate_expression",
    "find_conversion",
    "format_number",
    "function_names",
    "list_conversions",
    "load_settings",
    "parse_angle_unit",
    "parse_mode",
]
