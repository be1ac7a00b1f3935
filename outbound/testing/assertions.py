"""
Outbound Testing - Custom Assertion Helpers.

Provides descriptive assertions tailored to the outbound Response model:
status, headers, caching and cookies.
"""

from __future__ import annotations

from typing import Optional


class ResponseAssertions:
    """
    Mixin class providing response-specific assertion methods.

    Designed to be mixed into test classes, but can also be used
    standalone::

        asserts = ResponseAssertions()
        asserts.assert_status(response, 200)
    """

    # ------------------------------------------------------------------
    # Status assertions
    # ------------------------------------------------------------------

    def assert_status(self, response, expected: int, msg: str = ""):
        """Assert HTTP status code (None counts as 200)."""
        actual = response.status if response.status is not None else 200
        assert actual == expected, (
            f"Expected status {expected}, got {actual}. "
            f"{msg}\nBody: {_body_preview(response)}"
        )

    def assert_not_modified(self, response, msg: str = ""):
        """Assert the response was downgraded to 304 with an empty body."""
        self.assert_status(response, 304, msg)
        assert response.body == "", (
            f"Expected empty body on 304, got {_body_preview(response)!r}. {msg}"
        )

    def assert_redirect(self, response, location: Optional[str] = None, msg: str = ""):
        """Assert 3xx redirect, optionally checking Location header."""
        status = response.status or 200
        assert 300 <= status < 400, f"Expected 3xx redirect, got {status}. {msg}"
        if location is not None:
            actual = response.location
            assert actual == location, (
                f"Expected redirect to {location!r}, got {actual!r}"
            )

    # ------------------------------------------------------------------
    # Header assertions
    # ------------------------------------------------------------------

    def assert_header(self, response, name: str, value: Optional[str] = None, msg: str = ""):
        """Assert response header exists (and optionally matches value)."""
        actual = response.header(name)
        assert actual is not None, f"Header {name!r} not found. {msg}"
        if value is not None:
            assert actual == value, (
                f"Header {name!r}: expected {value!r}, got {actual!r}. {msg}"
            )

    def assert_no_header(self, response, name: str, msg: str = ""):
        """Assert response header does NOT exist."""
        actual = response.header(name)
        assert actual is None, f"Header {name!r} unexpectedly present: {actual!r}. {msg}"

    def assert_content_type(self, response, expected: str, msg: str = ""):
        """Assert exact Content-Type header."""
        self.assert_header(response, "Content-Type", expected, msg)

    def assert_cache_control(self, response, expected: str, msg: str = ""):
        """Assert exact Cache-Control header."""
        self.assert_header(response, "Cache-Control", expected, msg)

    # ------------------------------------------------------------------
    # Cookie assertions
    # ------------------------------------------------------------------

    def assert_cookie(self, response, name: str, value: Optional[str] = None, msg: str = ""):
        """Assert Set-Cookie carries the named cookie (and optionally its value)."""
        cookies = response.cookies
        assert name in cookies, (
            f"Cookie {name!r} not found. Cookies: {sorted(cookies)}. {msg}"
        )
        if value is not None:
            assert cookies[name] == value, (
                f"Cookie {name!r}: expected {value!r}, got {cookies[name]!r}. {msg}"
            )

    def assert_no_cookie(self, response, name: str, msg: str = ""):
        """Assert Set-Cookie does NOT carry the named cookie."""
        assert name not in response.cookies, (
            f"Cookie {name!r} unexpectedly present in Set-Cookie. {msg}"
        )


# -----------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------

def _body_preview(response, max_len: int = 200) -> str:
    try:
        return response.body[:max_len]
    except Exception:
        return repr(response.body_parts)
