"""
Shared test fixtures and helpers for the outbound test suite.
"""

import hashlib

import pytest

from outbound.request import ConditionalRequest

# Import fixtures so pytest can discover them
from outbound.testing.fixtures import (  # noqa: F401
    response_config,
    response,
    capture_sink,
)


@pytest.fixture
def etag_of():
    """Expected ETag for a plain string body."""
    def _etag(text: str) -> str:
        return '"' + hashlib.md5(text.encode("utf-8")).hexdigest() + '"'
    return _etag


@pytest.fixture
def matching_request():
    """Factory building a ConditionalRequest whose If-None-Match is etag."""
    def _make(etag: str) -> ConditionalRequest:
        return ConditionalRequest({"If-None-Match": etag})
    return _make


class StubRequest:
    """Request collaborator with a fixed answer, recording what it was asked."""

    def __init__(self, answer: bool):
        self.answer = answer
        self.asked = []

    def etag_matches(self, etag):
        self.asked.append(etag)
        return self.answer


@pytest.fixture
def stub_request():
    return StubRequest
