"""
Outbound Testing - helpers for inspecting responses in test harnesses.

Usage:
    from outbound.testing import ResponseAssertions, render

    class TestHome(ResponseAssertions):
        def test_index(self):
            response = Response("Hello")
            sink = render(response)
            self.assert_status(response, 200)
            assert sink.text == "Hello"

Components:
    - CaptureSink:        Callable sink recording emitted chunks
    - render:             Finalize and stream a response into a sink
    - ResponseAssertions: Assertion mixin for status, headers, cookies
"""

from .capture import CaptureSink, render
from .assertions import ResponseAssertions

__all__ = [
    "CaptureSink",
    "render",
    "ResponseAssertions",
]
