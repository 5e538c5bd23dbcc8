"""
Uniform success/failure wrapping for store operations and auth actions
"""

from typing import Awaitable, Callable, Optional, Type, TypeVar, Any, Dict, Union
import logging

import pydantic
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import FastbreakException, ValidationError, ExternalServiceError
from app.schemas.response import ActionSuccess, ActionFailure, ActionResponse

logger = logging.getLogger(__name__)

T = TypeVar('T')
M = TypeVar('M', bound=BaseModel)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def validation_message(exc: pydantic.ValidationError) -> str:
    """
    First validation problem as "<field>: <message>"
    """
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


def parse_input(schema: Type[M], payload: Union[M, Dict[str, Any]]) -> M:
    """
    Coerce a dict (or another model) into `schema`, raising ValidationError
    """
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = e.errors()
        field = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
        raise ValidationError(validation_message(e), field=field)


def to_failure(exc: Exception) -> ActionFailure:
    """
    Normalize any exception into the failure shape
    """
    if isinstance(exc, pydantic.ValidationError):
        exc = ValidationError(validation_message(exc))
    elif isinstance(exc, SQLAlchemyError):
        orig = getattr(exc, "orig", None)
        exc = ExternalServiceError("database", str(orig or exc))

    if isinstance(exc, FastbreakException):
        if exc.details:
            logger.debug(f"{exc.code} details: {exc.details}")
        return ActionFailure(error=exc.message, code=exc.code, status_code=exc.status_code)

    return ActionFailure(
        error=str(exc) or UNEXPECTED_ERROR_MESSAGE,
        code="INTERNAL_ERROR",
        status_code=500
    )


async def handle_action(
    action: Callable[[], Awaitable[T]],
    on_error: Optional[Callable[[], Awaitable[None]]] = None
) -> ActionResponse[T]:
    """
    Run `action` and wrap its outcome. Exceptions never escape: they are
    logged and returned as an ActionFailure. `on_error` runs first on
    failure (e.g. a session rollback).
    """
    try:
        data = await action()
        return ActionSuccess(data=data)
    except Exception as e:
        if on_error is not None:
            try:
                await on_error()
            except Exception as cleanup_error:
                logger.error(f"Cleanup after failed action raised: {cleanup_error}")
        expected = isinstance(e, (FastbreakException, pydantic.ValidationError))
        logger.error(f"Action error: {type(e).__name__}: {e}", exc_info=not expected)
        return to_failure(e)
