"""
Request-side collaborator for conditional GET.

The response only ever asks one question of the request: does this
candidate ETag match the client's ``If-None-Match``?
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, runtime_checkable

from ._datastructures import HeaderMap, HeaderSource


@runtime_checkable
class ETagMatcher(Protocol):
    """Anything that can answer an If-None-Match comparison."""

    def etag_matches(self, etag: Optional[str]) -> bool:
        ...


def parse_etag_list(header: Optional[str]) -> List[str]:
    """Split an If-None-Match value into individual entity tags."""
    if not header:
        return []
    return [tag.strip() for tag in header.split(",") if tag.strip()]


def _weak_strip(tag: str) -> str:
    return tag[2:] if tag.startswith("W/") else tag


class ConditionalRequest:
    """
    Minimal request view exposing conditional-GET matching.

    Example:
        request = ConditionalRequest({"If-None-Match": '"abc"'})
        request.etag_matches('"abc"')  # True
    """

    def __init__(self, headers: Optional[HeaderSource] = None, method: str = "GET"):
        self.headers = headers if isinstance(headers, HeaderMap) else HeaderMap(headers)
        self.method = method.upper()

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> "ConditionalRequest":
        """Build from an ASGI HTTP scope."""
        headers = HeaderMap()
        for name, value in scope.get("headers", []):
            key = name.decode("latin-1") if isinstance(name, bytes) else name
            val = value.decode("latin-1") if isinstance(value, bytes) else value
            if key in headers:
                headers.add(key, val, separator=", ")
            else:
                headers[key] = val
        return cls(headers, method=scope.get("method", "GET"))

    @property
    def if_none_match(self) -> Optional[str]:
        """Raw If-None-Match header."""
        return self.headers.get("if-none-match")

    def etag_matches(self, etag: Optional[str]) -> bool:
        """
        Weak comparison of etag against If-None-Match.

        ``*`` matches any current representation.
        """
        if not etag:
            return False
        tags = parse_etag_list(self.if_none_match)
        if "*" in tags:
            return True
        candidate = _weak_strip(etag)
        return any(_weak_strip(tag) == candidate for tag in tags)

    def __repr__(self) -> str:
        return f"ConditionalRequest(method={self.method!r}, if_none_match={self.if_none_match!r})"
