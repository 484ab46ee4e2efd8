# handler_wrappers.py
"""Shared wrappers and helpers for AJAX handlers.

This module provides common functionality used by the @Invocation and
@Submission decorators:
- Error logging wrapper (logs handler failures, re-raises them unchanged)
- Form validation wrapper (turns form values into a pydantic model)
- Result normalisation (turns handler return values into response text)

Error Handling Strategy:
    Handler functions can raise HandlerError for structured errors with hints,
    or any other exception for unexpected failures. The _error_handler wrapper
    only logs; the exception leaves the dispatcher as-is. The host pipeline
    answers HandlerError with its status code and leaves everything else to
    Starlette's error middleware.
"""

from typing import Any, Callable, Optional
from functools import wraps
import json
import logging

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# HandlerError - Custom exception for handler failures with structured error info
# ------------------------------------------------------------------------------
# Raise this in handler functions to answer the client with a clean error.
# - message: What went wrong
# - hint: Actionable suggestion for the caller (optional)
# - **data: Extra context like field names, values, etc. (optional)
#
# Example: raise HandlerError("Unknown product", hint="Check the id", product_id="x1")
# ------------------------------------------------------------------------------
class HandlerError(Exception):
    """Structured error for AJAX handlers.

    The host pipeline turns this exception into a plain-text response with
    ``status_code``, which the client runtime reports through its error hook.

    Args:
        message: Description of what went wrong
        hint: Actionable suggestion for the caller (optional)
        **data: Extra context like field names, values, etc. (optional)

    Example:
        raise HandlerError(
            "Quantity must be positive",
            hint="Enter a number greater than zero",
            field="quantity"
        )
    """

    status_code = 400

    def __init__(self, message: str, hint: Optional[str] = None, **data: Any):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.data = data

    def format(self) -> str:
        """Message with hint and context appended, as sent to the client."""
        msg = self.message
        if self.hint:
            msg += f" (hint: {self.hint})"
        if self.data:
            msg += f" (context: {self.data})"
        return msg


class UnknownHandlerError(HandlerError):
    """A callback named a handler that is not registered on the page."""

    status_code = 404


# ------------------------------------------------------------------------------
# _error_handler - Outermost wrapper that logs failures
# ------------------------------------------------------------------------------
# Logs HandlerError as a warning and anything else with its traceback, then
# re-raises the original exception. Dispatch never swallows handler errors.
# ------------------------------------------------------------------------------
def _error_handler(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a handler so its failures are logged under the handler name.

    Args:
        name: Handler name used in log messages
        func: The handler function to wrap

    Returns:
        Wrapped function that logs and re-raises exceptions
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HandlerError as e:
            logger.warning("Handler %s failed: %s (hint: %s)", name, e.message, e.hint)
            raise
        except Exception as e:
            logger.exception("Unexpected error in handler %s: %s", name, e)
            raise

    return wrapper


# ------------------------------------------------------------------------------
# _validate_form - Parse form values into a pydantic model
# ------------------------------------------------------------------------------
# Single-valued fields become plain strings, repeated fields become lists.
# A pydantic ValidationError becomes a HandlerError (HTTP 400) carrying the
# failing fields; the handler itself is not called.
# ------------------------------------------------------------------------------
def _validate_form(model: type[BaseModel], func: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(func)
    def wrapper(params: Any) -> Any:
        data: dict[str, Any] = {}
        for key in params.keys():
            values = params.getlist(key)
            data[key] = values[0] if len(values) == 1 else values
        try:
            parsed = model.model_validate(data)
        except ValidationError as e:
            raise HandlerError(
                "Invalid form values",
                hint="Correct the listed fields and submit again",
                fields=_field_errors(e),
            ) from e
        return func(parsed)

    return wrapper


def _field_errors(error: ValidationError) -> dict[str, str]:
    """Map dotted field locations to pydantic's messages."""
    fields: dict[str, str] = {}
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or error.title
        fields.setdefault(location, item["msg"])
    return fields


# ------------------------------------------------------------------------------
# to_response_text - Normalize handler return values to response text
# ------------------------------------------------------------------------------
#   - str -> unchanged
#   - None -> ""
#   - bytes -> decoded as UTF-8
#   - dict/list/tuple -> JSON text
#   - pydantic model -> its JSON
#   - other -> str(value)
# ------------------------------------------------------------------------------
def to_response_text(result: Any) -> str:
    if isinstance(result, str):
        return result
    if result is None:
        return ""
    if isinstance(result, bytes):
        return result.decode("utf-8")
    if isinstance(result, BaseModel):
        return result.model_dump_json()
    if isinstance(result, (dict, list, tuple)):
        return json.dumps(result)
    return str(result)
