"""
Outbound Testing - Pytest Fixtures.

Import the fixtures in your ``conftest.py`` so pytest can discover them::

    from outbound.testing.fixtures import (  # noqa: F401
        response_config, response, capture_sink,
    )
"""

from __future__ import annotations

import pytest

from ..config import ResponseConfig
from ..response import Response
from .capture import CaptureSink


@pytest.fixture
def response_config():
    """A default :class:`ResponseConfig`."""
    return ResponseConfig()


@pytest.fixture
def response(response_config):
    """A fresh, empty :class:`Response` bound to ``response_config``."""
    return Response(config=response_config)


@pytest.fixture
def capture_sink():
    """A :class:`CaptureSink` for ``Response.each``."""
    return CaptureSink()
