"""The page control that dispatches AJAX callbacks and emits the client script.

Each page owns one :class:`AjaxInvocation`. During setup the page registers
its handlers on it; the host pipeline then asks it to dispatch the request.

Request Flow:
    1. Dispatch token absent -> not a callback; the page renders as usual and
       ``render()`` contributes the client script.
    2. Token present and registered -> the handler runs and its result is
       written to the response. With ``interrupt_response`` the response is
       cleared first and ended afterwards, and the returned DispatchResult
       tells the host to stop.
    3. Token present but unknown -> per ``Config.unmatched_token``: ignored
       (logged, nothing written) or UnknownHandlerError.

Handler exceptions are not caught here; they reach the host pipeline as-is.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional
import logging

from .capsule_decorator import Invocation, Submission
from .capsules import HandlerDescriptor
from .client_script import render_script
from .config import Config
from .handler_registry import HandlerRegistry
from .handler_wrappers import UnknownHandlerError
from .web import PageRequest, PageResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of :meth:`AjaxInvocation.dispatch`.

    Attributes:
        handled: True if a handler ran.
        terminate: True if the response has ended; the host must not render
            or write anything else.
        handler_name: Name of the handler that ran, if any.
    """

    handled: bool = False
    terminate: bool = False
    handler_name: Optional[str] = None


NOT_HANDLED = DispatchResult()


class AjaxInvocation:
    """AJAX bridge for one page instance.

    Usage:
        >>> ajax = AjaxInvocation(Config())
        >>> @ajax.invocation("Echo")
        ... def echo(value: str) -> str:
        ...     return value
        >>> result = ajax.dispatch(request, response)
        >>> if not result.terminate:
        ...     response.write(ajax.render(request))

    Attributes:
        config: Wire names and policies shared with the client script.
        registry: Handlers registered on this page.
    """

    def __init__(self, config: Optional[Config] = None, registry: Optional[HandlerRegistry] = None) -> None:
        self.config = config or Config()
        self.registry = registry if registry is not None else HandlerRegistry()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, descriptor: HandlerDescriptor) -> None:
        self.registry.register(descriptor)

    def invocation(
        self,
        name: str,
        handler: Optional[Callable[..., Any]] = None,
        **options: Any,
    ) -> Invocation:
        """Register a single-value handler; usable as a decorator."""
        return Invocation(self.registry, name, handler, **options)

    def submission(
        self,
        name: str,
        handler: Optional[Callable[..., Any]] = None,
        **options: Any,
    ) -> Submission:
        """Register a form handler; usable as a decorator."""
        return Submission(self.registry, name, handler, **options)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch_token(self, request: PageRequest) -> str:
        return request.params.get(self.config.dispatch_param) or ""

    def is_callback(self, request: PageRequest) -> bool:
        return bool(self.dispatch_token(request))

    def dispatch(self, request: PageRequest, response: PageResponse) -> DispatchResult:
        """Run the handler named by the request, if any.

        Raises:
            UnknownHandlerError: Token names no handler and the config says
                ``unmatched_token="error"``.
            Exception: Whatever the handler raised.
        """
        token = self.dispatch_token(request)
        if not token:
            return NOT_HANDLED

        descriptor = self.registry.find(token)
        if descriptor is None:
            if self.config.unmatched_token == "error":
                raise UnknownHandlerError(
                    f"Unknown handler: {token}",
                    hint="Register the handler while setting up the page",
                    handler=token,
                )
            logger.warning("Callback for unknown handler ignored: %s", token)
            return NOT_HANDLED

        logger.debug("Dispatching callback to %s", descriptor.name)
        text = descriptor.invoke(request, self.config)

        if descriptor.interrupt_response:
            response.clear()
        response.write(text)
        if descriptor.interrupt_response:
            response.end()

        return DispatchResult(
            handled=True,
            terminate=descriptor.interrupt_response,
            handler_name=descriptor.name,
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def client_script(self) -> str:
        """Client script for the current registry contents."""
        return render_script(self.config, self.registry)

    def render(self, request: PageRequest) -> str:
        """What the control contributes to the page markup.

        Callbacks get nothing; the script only belongs on normal page loads.
        """
        if self.is_callback(request):
            return ""
        return self.client_script()
