"""Validation primitives for plugin APIs."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

import pydantic
from pydantic import BaseModel


class ValidationError(ValueError):
    """Raised when validation fails."""

    def __init__(self, message: str, *, details: Any | None = None):
        super().__init__(message)
        self.details = details


class SchemaModel(BaseModel):
    """Strict base model for request/response validation."""

    model_config = pydantic.ConfigDict(extra="forbid", str_strip_whitespace=True)


class RawTextModel(SchemaModel):
    """Variant that keeps surrounding whitespace, for payloads carrying typed input."""

    model_config = pydantic.ConfigDict(extra="forbid", str_strip_whitespace=False)


TModel = TypeVar("TModel", bound=BaseModel)


def parse_model(model: type[TModel], payload: Mapping[str, Any] | None) -> TModel:
    payload = payload or {}
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        details = {"errors": exc.errors(include_url=False, include_context=False)}
        raise ValidationError("Invalid request payload", details=details) from exc


__all__ = [
    "ValidationError",
    "SchemaModel",
    "RawTextModel",
    "parse_model",
]
