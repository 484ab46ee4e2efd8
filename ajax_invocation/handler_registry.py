"""Per-page registry of AJAX handlers.

Pages register handlers while they are set up. The dispatcher uses this
registry to route a callback to the correct handler, and the client script
is generated from it.

Every page instance owns its own registry, so a registry only ever serves one
request and needs no locking. Sharing one registry between concurrent
requests is not supported.
"""
from typing import Iterator, Optional
import logging
import re

from .capsules import HandlerDescriptor

logger = logging.getLogger(__name__)

# The handler name doubles as a JavaScript property name in the client stub
_HANDLER_NAME_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Members of the client namespace object the runtime defines or relies on
RESERVED_HANDLER_NAMES = frozenset({
    "InternalAjaxInvocation",
    "OnInitFailure",
    "OnAbort",
    "OnError",
    "SummonServer",
    "SummonSubmit",
    "__proto__",
    "constructor",
    "prototype",
    "hasOwnProperty",
    "toString",
    "valueOf",
})


class HandlerRegistry:
    """Maps handler names to descriptors, in registration order."""

    def __init__(self) -> None:
        self._handlers: dict[str, HandlerDescriptor] = {}

    def register(self, descriptor: HandlerDescriptor) -> None:
        """Register a descriptor, replacing any handler with the same name.

        Raises:
            ValueError: If the name cannot be used as a client function name
                or would replace a member of the client runtime.
        """
        name = descriptor.name
        if not isinstance(name, str) or not _HANDLER_NAME_PATTERN.match(name):
            raise ValueError(f"Invalid handler name: {name!r}")
        if name in RESERVED_HANDLER_NAMES:
            raise ValueError(f"Reserved handler name: {name!r}")

        if name in self._handlers:
            logger.info("Replacing handler: %s", name)
        else:
            logger.debug("Registered handler: %s (%s)", name, descriptor.kind.value)
        self._handlers[name] = descriptor

    def get(self, name: str) -> HandlerDescriptor:
        """Get descriptor by name. Raises KeyError if not found."""
        if name not in self._handlers:
            raise KeyError(f"Unknown handler: {name}")
        return self._handlers[name]

    def find(self, name: str) -> Optional[HandlerDescriptor]:
        """Get descriptor by name, or None if not registered."""
        return self._handlers.get(name)

    def names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __iter__(self) -> Iterator[HandlerDescriptor]:
        return iter(list(self._handlers.values()))

    def __len__(self) -> int:
        return len(self._handlers)
