"""Helpers for building page requests in unit tests."""
from __future__ import annotations

from typing import Any

from ajax_invocation import Config, PageRequest


def callback_request(
    name: str,
    payload: str | None = None,
    fields: dict[str, Any] | None = None,
    config: Config | None = None,
) -> PageRequest:
    """Build the PageRequest a client stub would send.

    Args:
        name: Handler name placed in the dispatch token
        payload: Value for single-value handlers (omitted when None)
        fields: Extra form fields
        config: Config supplying the parameter names
    """
    config = config or Config()
    pairs: list[tuple[str, Any]] = [(config.dispatch_param, name)]
    if payload is not None:
        pairs.append((config.payload_param, payload))
    pairs.extend((fields or {}).items())
    return PageRequest.from_params(pairs)
