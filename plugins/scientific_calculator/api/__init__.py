"""API routes for the Scientific Calculator plugin."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Literal

from flask import Blueprint, Response, current_app, request
from pydantic import Field

from common.errors import NotFoundAppError, ValidationAppError
from common.logging import get_logger
from common.responses import fail, ok
from common.validation import RawTextModel, SchemaModel, ValidationError, parse_model

from ..core import (
    CalculatorSession,
    CalculatorSettings,
    Failure,
    SessionNotFoundError,
    SessionStore,
    StoredSession,
    evaluate,
    format_number,
    function_names,
    list_conversions,
    load_settings,
)

ModeName = Literal["basic", "advanced", "metric"]
AngleUnitName = Literal["degree", "radian"]

_STORE_KEY = "scientific_calculator.sessions"
_SETTINGS_KEY = "scientific_calculator.settings"

logger = get_logger()


class EvaluatePayload(SchemaModel):
    expression: str
    mode: ModeName = "basic"
    angle_unit: AngleUnitName | None = None


class CreateSessionPayload(SchemaModel):
    mode: ModeName | None = None
    angle_unit: AngleUnitName | None = None


class AppendPayload(RawTextModel):
    text: str = Field(min_length=1)


class ModePayload(SchemaModel):
    mode: ModeName


class AngleUnitPayload(SchemaModel):
    angle_unit: AngleUnitName | None = None


api_bp = Blueprint("scientific_calculator_api", __name__, url_prefix="/api/scientific_calculator")


@api_bp.record_once
def _init_sessions(state) -> None:
    raw = state.app.config.get("PLUGIN_SETTINGS", {}).get("scientific_calculator", {})
    settings = load_settings(raw)
    state.app.extensions[_SETTINGS_KEY] = settings
    state.app.extensions[_STORE_KEY] = SessionStore(
        max_sessions=settings.max_sessions,
        ttl=timedelta(minutes=settings.session_ttl_minutes),
    )


def _settings() -> CalculatorSettings:
    return current_app.extensions[_SETTINGS_KEY]


def _store() -> SessionStore:
    return current_app.extensions[_STORE_KEY]


def _invalid_request(exc: ValidationError) -> Response:
    return fail(
        ValidationAppError(
            message=str(exc),
            code="sci_calc.invalid_request",
            details=getattr(exc, "details", None),
        )
    )


def _session_payload(stored: StoredSession, **extra: Any) -> dict[str, Any]:
    return {"session": {"id": stored.session_id, **stored.session.snapshot()}, **extra}


def _with_session(
    session_id: str,
    command: Callable[[CalculatorSession], dict[str, Any] | None],
) -> Response:
    try:
        stored = _store().get(session_id)
    except SessionNotFoundError as exc:
        return fail(NotFoundAppError(message=exc.args[0], code="sci_calc.session_not_found"))
    with stored.lock:
        extra = command(stored.session) or {}
        payload = _session_payload(stored, **extra)
    return ok(payload)


@api_bp.post("/evaluate")
def evaluate_endpoint() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(EvaluatePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)

    settings = _settings()
    angle_unit = payload.angle_unit or settings.default_angle_unit.value
    outcome = evaluate(
        payload.expression,
        mode=payload.mode,
        angle_unit=angle_unit,
        max_length=settings.max_expression_length,
    )
    if isinstance(outcome, Failure):
        return fail(
            ValidationAppError(
                message=outcome.message,
                code="sci_calc.invalid_expression",
                details={"kind": outcome.kind.value, "label": outcome.kind.label},
            )
        )
    return ok(
        {
            "result": format_number(outcome.value),
            "value": outcome.value,
            "mode": payload.mode,
            "angle_unit": angle_unit,
        }
    )


@api_bp.get("/functions")
def functions_endpoint() -> Response:
    return ok({"functions": function_names()})


@api_bp.get("/conversions")
def conversions_endpoint() -> Response:
    return ok({"conversions": list_conversions()})


@api_bp.post("/sessions")
def create_session() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(CreateSessionPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)

    settings = _settings()

    def factory() -> CalculatorSession:
        return CalculatorSession(
            payload.mode or settings.default_mode,
            payload.angle_unit or settings.default_angle_unit,
            history_limit=settings.history_limit,
            max_expression_length=settings.max_expression_length,
        )

    stored = _store().create(factory)
    logger.info("created calculator session %s", stored.session_id)
    return ok(_session_payload(stored), status=201)


@api_bp.get("/sessions/<session_id>")
def get_session(session_id: str) -> Response:
    return _with_session(session_id, lambda session: None)


@api_bp.delete("/sessions/<session_id>")
def delete_session(session_id: str) -> Response:
    if not _store().delete(session_id):
        return fail(
            NotFoundAppError(message="Session expired or not found", code="sci_calc.session_not_found")
        )
    logger.info("deleted calculator session %s", session_id)
    return ok({"deleted": session_id})


@api_bp.post("/sessions/<session_id>/append")
def append(session_id: str) -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(AppendPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    return _with_session(session_id, lambda session: session.append(payload.text))


@api_bp.post("/sessions/<session_id>/backspace")
def backspace(session_id: str) -> Response:
    return _with_session(session_id, lambda session: session.backspace())


@api_bp.post("/sessions/<session_id>/clear")
def clear(session_id: str) -> Response:
    return _with_session(session_id, lambda session: session.clear())


@api_bp.post("/sessions/<session_id>/mode")
def change_mode(session_id: str) -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(ModePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    return _with_session(session_id, lambda session: session.change_mode(payload.mode))


@api_bp.post("/sessions/<session_id>/angle_unit")
def angle_unit(session_id: str) -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(AngleUnitPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)

    def command(session: CalculatorSession) -> None:
        if payload.angle_unit is None:
            session.toggle_angle_unit()
        else:
            session.set_angle_unit(payload.angle_unit)

    return _with_session(session_id, command)


@api_bp.post("/sessions/<session_id>/submit")
def submit(session_id: str) -> Response:
    def command(session: CalculatorSession) -> dict[str, Any]:
        outcome = session.submit()
        if "error" in outcome:
            logger.info("session %s submit failed: %s", session_id, outcome["error"])
        return {"outcome": outcome}

    return _with_session(session_id, command)


@api_bp.post("/sessions/<session_id>/memory/store")
def store_memory(session_id: str) -> Response:
    return _with_session(session_id, lambda session: {"applied": session.store_memory()})


@api_bp.post("/sessions/<session_id>/memory/recall")
def recall_memory(session_id: str) -> Response:
    return _with_session(session_id, lambda session: {"applied": session.recall_memory()})


@api_bp.post("/sessions/<session_id>/memory/clear")
def clear_memory(session_id: str) -> Response:
    return _with_session(session_id, lambda session: session.clear_memory())


blueprints = [api_bp]


__all__ = [
    "blueprints",
    "evaluate_endpoint",
    "create_session",
    "submit",
]
