from typing import Any, Callable, Optional
import logging

from pydantic import BaseModel

from .capsules import HandlerDescriptor, HandlerKind
from .handler_registry import HandlerRegistry
from .handler_wrappers import _error_handler, _validate_form

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Capsule - Decorator base class that registers functions as AJAX handlers
# ------------------------------------------------------------------------------
# Usage:
#   @Invocation(registry, "Echo")
#   def echo(value: str) -> str:
#       ...
#
#   @Submission(registry, "SumForm")
#   def sum_form(params) -> str:
#       ...
#
# Parameters:
#   - registry: The page's HandlerRegistry
#   - name: Handler name, also the client function name (explicit, never
#           derived from the function)
#   - interrupt_response: If True (default), the handler result replaces the
#           whole response and page rendering stops
#   - description: Free text kept on the descriptor
#
# What happens on registration:
#   1. Wraps with the subclass's input adapter, if any
#   2. Wraps with _error_handler (logs failures, re-raises)
#   3. Builds a HandlerDescriptor of the subclass's kind
#   4. Registers it, replacing a previous handler of the same name
# ------------------------------------------------------------------------------
class Capsule:
    kind: HandlerKind

    def __init__(
        self,
        registry: HandlerRegistry,
        name: str,
        handler: Optional[Callable[..., Any]] = None,
        *,
        interrupt_response: bool = True,
        description: str = "",
    ):
        self.registry = registry
        self.name = name
        self.interrupt_response = interrupt_response
        self.description = description

        # Support both @Invocation(...) decorator and Invocation(..., handler=fn) direct call
        if handler is not None:
            self._register(handler)

    # Called when used as @Invocation(...) decorator
    def __call__(self, func: Callable[..., Any]) -> Callable[..., Any]:
        self._register(func)
        return func  # Return original so it can be called directly for testing

    def _adapt(self, func: Callable[..., Any]) -> Callable[..., Any]:
        return func

    def _register(self, func: Callable[..., Any]) -> None:
        wrapped = _error_handler(self.name, self._adapt(func))

        self.registry.register(
            HandlerDescriptor(
                name=self.name,
                kind=self.kind,
                callback=wrapped,
                interrupt_response=self.interrupt_response,
                description=self.description,
            )
        )


class Invocation(Capsule):
    """Registers a handler called with the single payload string."""

    kind = HandlerKind.SINGLE_VALUE


class Submission(Capsule):
    """Registers a handler called with the submitted form values.

    With ``model`` set, the values are validated into that pydantic model and
    the handler receives the model instance instead of the raw parameters.
    """

    kind = HandlerKind.FORM_VALUES

    def __init__(
        self,
        registry: HandlerRegistry,
        name: str,
        handler: Optional[Callable[..., Any]] = None,
        *,
        model: Optional[type[BaseModel]] = None,
        interrupt_response: bool = True,
        description: str = "",
    ):
        # Set before super().__init__, which may register right away
        self.model = model
        super().__init__(
            registry,
            name,
            handler,
            interrupt_response=interrupt_response,
            description=description,
        )

    def _adapt(self, func: Callable[..., Any]) -> Callable[..., Any]:
        if self.model is None:
            return func
        return _validate_form(self.model, func)
