"""Request and response objects seen by pages and the dispatcher.

The host pipeline adapts Starlette's request into a :class:`PageRequest` once
per request and collects everything a page writes in a buffered
:class:`PageResponse`, which is converted back into a Starlette response when
the pipeline finishes.

Parameter Merging:
    Query string values come first, form values second. Lookups through
    ``params[name]`` return the last value, so a form field wins over a query
    parameter of the same name. ``params.getlist(name)`` returns all of them.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from starlette.datastructures import ImmutableMultiDict
from starlette.requests import Request
from starlette.responses import Response

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class ResponseEndedError(RuntimeError):
    """Raised when something writes to a response that has already ended."""


@dataclass
class PageRequest:
    """A request as seen by a page.

    Attributes:
        params: Merged query and form parameters, already URL-decoded.
        method: HTTP method of the request.
        url: Full URL the client requested.
    """

    params: ImmutableMultiDict = field(default_factory=ImmutableMultiDict)
    method: str = "GET"
    url: str = ""

    @classmethod
    def from_params(cls, params: Any = None, method: str = "POST", url: str = "") -> "PageRequest":
        """Build a request from a mapping or a list of ``(name, value)`` pairs."""
        return cls(params=ImmutableMultiDict(params or []), method=method, url=url)

    @classmethod
    async def from_starlette(cls, request: Request) -> "PageRequest":
        """Read query and form parameters from a Starlette request.

        Only url-encoded and multipart bodies are parsed; other bodies are
        ignored. Uploaded files are skipped, handlers only receive strings.
        """
        items: list[tuple[str, str]] = list(request.query_params.multi_items())

        content_type = request.headers.get("content-type", "")
        if request.method == "POST" and content_type.startswith(_FORM_CONTENT_TYPES):
            async with request.form() as form:
                items.extend(
                    (name, value)
                    for name, value in form.multi_items()
                    if isinstance(value, str)
                )

        return cls(
            params=ImmutableMultiDict(items),
            method=request.method,
            url=str(request.url),
        )


class PageResponse:
    """Buffered response body written to by pages and handlers.

    Output accumulates until the host converts the response. ``clear()``
    drops everything buffered so far and ``end()`` closes the response for
    good: any later ``write()`` raises :class:`ResponseEndedError`.
    """

    def __init__(
        self,
        status_code: int = 200,
        media_type: str = "text/html",
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.media_type = media_type
        self.headers: dict[str, str] = dict(headers or {})
        self._chunks: list[str] = []
        self._ended = False

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def body(self) -> str:
        return "".join(self._chunks)

    def write(self, text: str) -> None:
        if self._ended:
            raise ResponseEndedError("Response has already ended")
        self._chunks.append(text)

    def clear(self) -> None:
        if self._ended:
            raise ResponseEndedError("Response has already ended")
        self._chunks.clear()

    def end(self) -> None:
        self._ended = True

    def to_starlette(self) -> Response:
        return Response(
            content=self.body,
            status_code=self.status_code,
            headers=self.headers,
            media_type=self.media_type,
        )
