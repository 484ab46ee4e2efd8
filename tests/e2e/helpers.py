"""Helper functions for E2E tests driving pages over HTTP."""
from __future__ import annotations

from urllib.parse import quote, urlencode

from starlette.testclient import TestClient

from ajax_invocation import Config

FORM_HEADERS = {"content-type": "application/x-www-form-urlencoded"}


def encode_query(pairs: list[tuple[str, str]]) -> str:
    """URL-encode pairs the way the client runtime's encodeURIComponent does."""
    return urlencode(pairs, quote_via=quote, safe="")


def post_callback(
    client: TestClient,
    name: str,
    payload: str | None = None,
    fields: list[tuple[str, str]] | None = None,
    path: str = "/",
    config: Config | None = None,
):
    """POST a callback, encoded like SummonServer / SummonSubmit.

    Args:
        client: Test client for the page application
        name: Handler name (dispatch token value)
        payload: Single value; omitted when None, as the client runtime does
            for null
        fields: Form fields for form handlers
        path: Page path
        config: Config supplying the parameter names

    Returns:
        The httpx response.
    """
    config = config or Config()
    pairs: list[tuple[str, str]] = [(config.dispatch_param, name)]
    if payload is not None:
        pairs.append((config.payload_param, payload))
    pairs.extend(fields or [])
    return client.post(path, content=encode_query(pairs), headers=FORM_HEADERS)
