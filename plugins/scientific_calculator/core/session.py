"""Stateful calculator session: mode, angle unit, memory and history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum

from .conversions import convert_expression
from .evaluator import (
    MAX_EXPR_LENGTH,
    ErrorKind,
    EvaluationResult,
    Failure,
    evaluate_expression,
    format_number,
)
from .functions import EMPTY_SCOPE, AngleUnit, build_scope, parse_angle_unit


class EvaluationMode(str, Enum):
    BASIC = "basic"
    ADVANCED = "advanced"
    METRIC = "metric"


class SessionState(str, Enum):
    IDLE = "idle"
    HAS_INPUT = "has_input"
    HAS_RESULT = "has_result"
    HAS_ERROR = "has_error"


def parse_mode(value: EvaluationMode | str) -> EvaluationMode:
    try:
        return EvaluationMode(value)
    except ValueError as exc:
        raise ValueError("mode must be 'basic', 'advanced' or 'metric'") from exc


def evaluate(
    expression: str,
    *,
    mode: EvaluationMode | str = EvaluationMode.BASIC,
    angle_unit: AngleUnit | str = AngleUnit.DEGREE,
    max_length: int = MAX_EXPR_LENGTH,
) -> EvaluationResult:
    """Route ``expression`` to the evaluator or converter that ``mode`` selects."""

    mode = parse_mode(mode)
    if mode is EvaluationMode.METRIC:
        return convert_expression(expression, max_length=max_length)
    scope = build_scope(angle_unit) if mode is EvaluationMode.ADVANCED else EMPTY_SCOPE
    return evaluate_expression(expression, scope, max_length=max_length)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    expression: str
    result: str

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"

    def to_dict(self) -> dict[str, str]:
        return {"expression": self.expression, "result": self.result, "text": str(self)}


class CalculatorSession:
    """One calculator owned by a single caller.

    Failures from :meth:`submit` only ever touch the result and error; the
    expression, history and memory survive them unchanged.
    """

    def __init__(
        self,
        mode: EvaluationMode | str = EvaluationMode.BASIC,
        angle_unit: AngleUnit | str = AngleUnit.DEGREE,
        *,
        history_limit: int | None = None,
        max_expression_length: int = MAX_EXPR_LENGTH,
    ) -> None:
        if history_limit is not None and history_limit < 1:
            raise ValueError("history_limit must be positive or None")
        self._mode = parse_mode(mode)
        self._angle_unit = parse_angle_unit(angle_unit)
        self._max_expression_length = max_expression_length
        self._history: deque[HistoryEntry] = deque(maxlen=history_limit)
        self._memory: str | None = None
        self._expression = ""
        self._result = ""
        self._error: ErrorKind | None = None
        self._state = SessionState.IDLE

    # ---- Observers -------------------------------------------------------
    @property
    def expression(self) -> str:
        return self._expression

    @property
    def result(self) -> str:
        return self._result

    @property
    def error(self) -> ErrorKind | None:
        return self._error

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def memory(self) -> str | None:
        return self._memory

    @property
    def angle_unit(self) -> AngleUnit:
        return self._angle_unit

    @property
    def mode(self) -> EvaluationMode:
        return self._mode

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def history_limit(self) -> int | None:
        return self._history.maxlen

    def snapshot(self) -> dict[str, object]:
        return {
            "expression": self._expression,
            "result": self._result,
            "error": self._error.value if self._error else None,
            "error_label": self._error.label if self._error else None,
            "state": self._state.value,
            "mode": self._mode.value,
            "angle_unit": self._angle_unit.value,
            "memory": self._memory,
            "history": [entry.to_dict() for entry in self._history],
        }

    # ---- Editing ---------------------------------------------------------
    def append(self, text: str) -> None:
        self._expression += text
        self._error = None
        self._state = SessionState.HAS_INPUT

    def backspace(self) -> None:
        # Result and error stay on display; only an emptied expression changes state.
        self._expression = self._expression[:-1]
        if not self._expression:
            self._state = SessionState.IDLE

    def clear(self) -> None:
        self._expression = ""
        self._result = ""
        self._error = None
        self._state = SessionState.IDLE

    def change_mode(self, mode: EvaluationMode | str) -> None:
        new_mode = parse_mode(mode)
        self.clear()
        self._mode = new_mode

    def toggle_angle_unit(self) -> AngleUnit:
        self._angle_unit = self._angle_unit.toggled()
        return self._angle_unit

    def set_angle_unit(self, angle_unit: AngleUnit | str) -> AngleUnit:
        self._angle_unit = parse_angle_unit(angle_unit)
        return self._angle_unit

    # ---- Evaluation ------------------------------------------------------
    def submit(self) -> dict[str, str]:
        """Evaluate the current expression and record the outcome.

        Returns ``{"result": text}`` on success or ``{"error": kind}`` on
        failure.
        """

        outcome = evaluate(
            self._expression,
            mode=self._mode,
            angle_unit=self._angle_unit,
            max_length=self._max_expression_length,
        )
        if isinstance(outcome, Failure):
            self._result = ""
            self._error = outcome.kind
            self._state = SessionState.HAS_ERROR
            return {"error": outcome.kind.value}

        text = format_number(outcome.value)
        self._result = text
        self._error = None
        self._history.append(HistoryEntry(self._expression, text))
        self._state = SessionState.HAS_RESULT
        return {"result": text}

    # ---- Memory ----------------------------------------------------------
    def store_memory(self) -> bool:
        if self._state is not SessionState.HAS_RESULT:
            return False
        self._memory = self._result
        return True

    def recall_memory(self) -> bool:
        if self._memory is None:
            return False
        self.append(self._memory)
        return True

    def clear_memory(self) -> None:
        self._memory = None


__all__ = [
    "CalculatorSession",
    "EvaluationMode",
    "HistoryEntry",
    "SessionState",
    "evaluate",
    "parse_mode",
]
