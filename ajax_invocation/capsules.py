"""Handler descriptors - what gets registered under a handler name.

A descriptor pairs a server-side callable with the shape of input it expects.
The kind decides both how the dispatcher calls it and which client stub the
page emits for it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .config import Config
from .handler_wrappers import to_response_text
from .web import PageRequest


class HandlerKind(str, Enum):
    """Input shape of a handler."""

    # Called with one string, the payload parameter
    SINGLE_VALUE = "single_value"
    # Called with every request parameter
    FORM_VALUES = "form_values"


@dataclass(frozen=True)
class HandlerDescriptor:
    """A named server-side handler.

    Attributes:
        name: Handler name; also the name of the generated client function.
        kind: Input shape, see :class:`HandlerKind`.
        callback: The callable to run. Single-value callbacks receive a
            ``str``; form callbacks receive an ``ImmutableMultiDict``.
        interrupt_response: If True, output buffered before dispatch is
            discarded and the response ends right after the handler result,
            so the page never renders.
        description: Free text for people reading the registry.
    """

    name: str
    kind: HandlerKind
    callback: Callable[..., Any]
    interrupt_response: bool = True
    description: str = ""

    def invoke(self, request: PageRequest, config: Config) -> str:
        """Call the handler with request data shaped for its kind.

        A missing payload reaches single-value handlers as an empty string.
        The client runtime omits the payload only for null or undefined, so
        such a call carried no value at all.

        Returns:
            Response text, see :func:`to_response_text`.
        """
        if self.kind is HandlerKind.SINGLE_VALUE:
            result = self.callback(request.params.get(config.payload_param, ""))
        elif self.kind is HandlerKind.FORM_VALUES:
            result = self.callback(request.params)
        else:
            raise ValueError(f"Unknown handler kind: {self.kind!r}")
        return to_response_text(result)
