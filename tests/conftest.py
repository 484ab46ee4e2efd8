"""Shared test fixtures."""
from __future__ import annotations

import pytest

from ajax_invocation import AjaxInvocation, Config, HandlerRegistry, PageResponse


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def registry():
    """Empty handler registry."""
    return HandlerRegistry()


@pytest.fixture
def ajax(config, registry):
    """AjaxInvocation control bound to the registry fixture."""
    return AjaxInvocation(config, registry)


@pytest.fixture
def response():
    """Fresh buffered response."""
    return PageResponse()
