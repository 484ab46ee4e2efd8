"""Handlers used by the demo page."""
from typing import Any
import math
import logging

from pydantic import BaseModel, Field

from ..handler_wrappers import HandlerError

logger = logging.getLogger(__name__)


def echo(value: str) -> str:
    """Return the payload unchanged."""
    return value


class SumFormParams(BaseModel):
    """Form fields of the sum form."""

    a: float = Field(description="First addend")
    b: float = Field(description="Second addend")


def sum_form(params: SumFormParams) -> str:
    """Add the two form fields.

    Whole numbers come back without a decimal point, so ``a=2&b=3`` answers
    ``5`` rather than ``5.0``.
    """
    total = params.a + params.b
    if not math.isfinite(total):
        raise HandlerError("Sum is not a finite number", hint="Use finite numbers", a=params.a, b=params.b)
    if total.is_integer():
        return str(int(total))
    return repr(total)


def field_count(params: Any) -> dict[str, Any]:
    """Report which form fields arrived; answers JSON."""
    names = sorted(params.keys())
    logger.debug("field_count received %d fields", len(names))
    return {"fields": names, "total": len(names)}
