"""Server pages hosted on Starlette.

A page is created fresh for every request, registers its AJAX handlers in
``setup()`` and renders its markup in ``render_body()``. The pipeline in
``Page.process()`` sits between the two and honours the dispatcher's
terminate signal: once a handler has ended the response, nothing else runs.

Pipeline (per request):
    1. Starlette request -> PageRequest (query + form parameters)
    2. Page(request, response, config)
    3. page.setup()            - handlers registered on page.ajax
    4. page.ajax.dispatch()    - callback handled, maybe terminate
    5. page.render()           - skipped after terminate
    6. PageResponse -> Starlette response

The synchronous part (steps 2-5) runs in Starlette's thread pool so blocking
handlers never stall the event loop.
"""

from typing import Awaitable, Callable, Optional, Sequence, Union
import html
import logging

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.routing import Route

from .config import Config
from .dispatcher import AjaxInvocation, DispatchResult
from .handler_wrappers import HandlerError
from .web import PageRequest, PageResponse

logger = logging.getLogger(__name__)

_LAYOUT = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
{body}
{script}
</body>
</html>
"""


class Page:
    """Base class for server pages with AJAX callbacks.

    Subclasses override ``setup()`` to register handlers and
    ``render_body()`` to produce markup.

    Example:
        class EchoPage(Page):
            title = "Echo"

            def setup(self) -> None:
                self.ajax.invocation("Echo")(lambda value: value)

            def render_body(self) -> str:
                return '<button onclick="alert(AjaxInvocation.Echo(\\'hi\\'))">Go</button>'
    """

    title = ""

    def __init__(
        self,
        request: PageRequest,
        response: Optional[PageResponse] = None,
        config: Optional[Config] = None,
    ) -> None:
        self.request = request
        self.response = response if response is not None else PageResponse()
        self.ajax = AjaxInvocation(config)

    @property
    def is_callback(self) -> bool:
        return self.ajax.is_callback(self.request)

    def setup(self) -> None:
        """Register AJAX handlers. Runs before the dispatch decision."""

    def render_body(self) -> str:
        return ""

    def render(self) -> None:
        self.response.write(
            _LAYOUT.format(
                title=html.escape(self.title),
                body=self.render_body(),
                script=self.ajax.render(self.request),
            )
        )

    def process(self) -> DispatchResult:
        """Run the page pipeline against ``self.response``."""
        self.setup()
        result = self.ajax.dispatch(self.request, self.response)
        if result.terminate:
            logger.debug("Response ended by handler %s", result.handler_name)
            return result
        self.render()
        return result


def page_endpoint(
    page_cls: type[Page], config: Optional[Config] = None
) -> Callable[[Request], Awaitable[Response]]:
    """Build a Starlette endpoint serving ``page_cls``.

    HandlerError becomes a plain-text response with the error's status code.
    Anything else a handler raises is left to Starlette's error handling.
    """
    config = config or Config()

    async def endpoint(request: Request) -> Response:
        page_request = await PageRequest.from_starlette(request)

        def run() -> PageResponse:
            page = page_cls(page_request, PageResponse(), config)
            page.process()
            return page.response

        try:
            page_response = await run_in_threadpool(run)
        except HandlerError as e:
            return PlainTextResponse(e.format(), status_code=e.status_code)
        return page_response.to_starlette()

    return endpoint


def create_app(
    pages: Union[dict[str, type[Page]], Sequence[tuple[str, type[Page]]]],
    config: Optional[Config] = None,
    debug: bool = False,
) -> Starlette:
    """Create a Starlette application serving each page at its path.

    Args:
        pages: Mapping (or pairs) of URL path to Page subclass.
        config: Shared config for every page.
        debug: Passed to Starlette; shows tracebacks for handler failures.
    """
    config = config or Config()
    valid, error = config.is_valid()
    if not valid:
        raise ValueError(f"Invalid config: {error}")

    items = pages.items() if isinstance(pages, dict) else pages
    routes = [
        Route(path, page_endpoint(page_cls, config), methods=["GET", "POST"], name=page_cls.__name__)
        for path, page_cls in items
    ]
    return Starlette(debug=debug, routes=routes)
