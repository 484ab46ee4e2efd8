"""
AJAX invocation bridge for server pages.

Pages register server-side handlers under explicit names. A callback request
carries the handler name in the dispatch token and gets the handler result as
the whole response; a normal request gets a script block exposing every
handler as a client-side function.
"""

from .capsule_decorator import Invocation, Submission
from .capsules import HandlerDescriptor, HandlerKind
from .config import Config, ConfigManager
from .dispatcher import AjaxInvocation, DispatchResult
from .handler_registry import HandlerRegistry
from .handler_wrappers import HandlerError, UnknownHandlerError
from .page import Page, create_app, page_endpoint
from .page_server import PageServer
from .web import PageRequest, PageResponse, ResponseEndedError

__version__ = "0.1.0"

__all__ = [
    "AjaxInvocation",
    "Config",
    "ConfigManager",
    "DispatchResult",
    "HandlerDescriptor",
    "HandlerError",
    "HandlerKind",
    "HandlerRegistry",
    "Invocation",
    "Page",
    "PageRequest",
    "PageResponse",
    "PageServer",
    "ResponseEndedError",
    "Submission",
    "UnknownHandlerError",
    "create_app",
    "page_endpoint",
]
