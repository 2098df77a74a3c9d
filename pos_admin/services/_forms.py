"""Shared helpers for validating page input and parsing backend responses."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pos_admin.exceptions import APIError, MissingRequiredFieldError, ValidationError

logger = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=BaseModel)
ModelT = TypeVar("ModelT", bound=BaseModel)

UNEXPECTED_RESPONSE = "Unexpected response from server"


def build_form(form_cls: type[FormT], data: FormT | dict[str, Any]) -> FormT:
    """Validate ``data`` into ``form_cls``, raising our ValidationError types."""
    if isinstance(data, form_cls):
        return data
    try:
        return form_cls.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or None
        if first.get("type") in ("missing", "string_too_short") and field:
            raise MissingRequiredFieldError(field) from exc
        raise ValidationError(first.get("msg", "Invalid value"), field=field) from exc


def parse_model(model_cls: type[ModelT], data: Any, *, path: str) -> ModelT:
    """
    Validate one backend record.

    Raises:
        APIError: the record does not match ``model_cls``.
    """
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        logger.warning("Malformed %s from %s: %s", model_cls.__name__, path, exc)
        raise APIError(UNEXPECTED_RESPONSE, path=path) from exc


def parse_models(model_cls: type[ModelT], data: Any, *, path: str) -> list[ModelT]:
    """Validate a list response; ``None`` is an empty list."""
    if data is None:
        return []
    if not isinstance(data, list):
        logger.warning("Expected a list from %s, got %s", path, type(data).__name__)
        raise APIError(UNEXPECTED_RESPONSE, path=path)
    return [parse_model(model_cls, item, path=path) for item in data]
