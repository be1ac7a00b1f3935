"""
Response - Outbound HTTP response with conditional-GET finalization.

Provides:
- Status, content type, charset and body state (Fixed / Chunks / Streamed)
- Header-derived accessors (Location, ETag, Last-Modified, Content-Type)
- Cookie setting, deletion and extraction over a newline-joined Set-Cookie
- Finalization: Content-Type defaults, automatic MD5 ETag, 304 downgrade,
  Cache-Control derivation
- The write/each streaming protocol consumed by transports and test harnesses
"""

from __future__ import annotations

import logging
import weakref
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any, Callable, List, Mapping, Optional, Union

from ._datastructures import HeaderMap, HeaderSource
from .body import Body, Chunks, Fixed, Streamed, coerce_body, is_string_body
from .cache import CacheControl, is_blank, md5_etag
from .config import ResponseConfig
from .cookies import (
    normalize_cookie_options,
    parse_set_cookie,
    serialize_cookie,
    split_set_cookie,
    without_cookie,
)
from .faults import InvalidHeaderFault, ResponseStreamFault
from .request import ETagMatcher
from .status import status_message, validate_status


Writer = Callable[[str], Any]


class Response:
    """
    Outbound HTTP response.

    Application code mutates status, headers, cookies, cache intent and
    body in any order; ``finalize()`` then applies HTTP defaults exactly
    once before the response is iterated with ``each()``.

    Example:
        response = Response(config=ResponseConfig(default_charset="utf-8"))
        response.body = "<h1>Hello</h1>"
        response.request = ConditionalRequest({"If-None-Match": etag})
        response.finalize()
        response.each(sink)
    """

    def __init__(
        self,
        body: Any = None,
        status: Optional[int] = None,
        headers: Optional[HeaderSource] = None,
        *,
        config: Optional[ResponseConfig] = None,
        request: Optional[ETagMatcher] = None,
        logger: Optional[logging.Logger] = None,
        on_complete: Optional[Callable[["Response"], Any]] = None,
    ):
        """
        Initialize Response.

        Args:
            body: str, iterable of str chunks, producer callable or Body variant
            status: HTTP status (None counts as 200 for conditional GET)
            headers: Initial headers
            config: Injected defaults (charset, content type, validation)
            request: Collaborator answering ``etag_matches``
            logger: Logger for deprecations and finalize traces
            on_complete: Hook called with the response after ``each()``
        """
        self.config = config or ResponseConfig()
        self.logger = logger if logger is not None else logging.getLogger("outbound.response")
        self.on_complete = on_complete

        self._status: Optional[int] = None
        if status is not None:
            self.status = status

        self.content_type: Optional[str] = None
        self.charset: Optional[str] = None
        self.cache_control = CacheControl()
        self.finalized = False

        self._headers = HeaderMap()
        if headers:
            self.headers = headers

        self._body: Body = coerce_body(body)
        self._writer: Writer = self._buffer_chunk
        self._request_ref: Optional[Callable[[], Optional[ETagMatcher]]] = None
        self.request = request

    def __repr__(self) -> str:
        return f"<Response status={self._status!r} body={type(self._body).__name__}>"

    # ========================================================================
    # Status
    # ========================================================================

    @property
    def status(self) -> Optional[int]:
        return self._status

    @status.setter
    def status(self, value: int) -> None:
        self._status = validate_status(value)

    @property
    def response_code(self) -> Optional[int]:
        """The response code of the request."""
        return self._status

    @property
    def code(self) -> str:
        """Status as a string, e.g. ``"200"``."""
        return str(self._status) if self._status is not None else ""

    @property
    def message(self) -> Optional[str]:
        """Canonical reason phrase for the current status."""
        return status_message(self._status)

    status_message = message

    # ========================================================================
    # Request collaborator
    # ========================================================================

    @property
    def request(self) -> Optional[ETagMatcher]:
        if self._request_ref is None:
            return None
        return self._request_ref()

    @request.setter
    def request(self, value: Optional[ETagMatcher]) -> None:
        if value is None:
            self._request_ref = None
            return
        try:
            self._request_ref = weakref.ref(value)
        except TypeError:
            # Objects without weakref support are held strongly.
            self._request_ref = lambda: value

    # ========================================================================
    # Headers
    # ========================================================================

    @property
    def headers(self) -> HeaderMap:
        return self._headers

    @headers.setter
    def headers(self, value: HeaderSource) -> None:
        """Replace the header map wholesale."""
        headers = value if isinstance(value, HeaderMap) else HeaderMap(value)
        if self.config.validate_headers:
            for name, header_value in headers.items():
                self._validate_header(name, header_value, multiline=name.lower() == "set-cookie")
        self._headers = headers

    def __getitem__(self, name: str) -> Optional[str]:
        return self._headers.get(name)

    def __setitem__(self, name: str, value: str) -> None:
        self.set_header(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get single header (case-insensitive)."""
        return self._headers.get(name, default)

    def has_header(self, name: str) -> bool:
        return name in self._headers

    def set_header(self, name: str, value: str) -> None:
        """Set header (replaces existing)."""
        value = str(value)
        if self.config.validate_headers:
            self._validate_header(name, value, multiline=name.lower() == "set-cookie")
        self._headers[name] = value

    def add_header(self, name: str, value: str) -> None:
        """Append a value to a header, newline-joined."""
        value = str(value)
        if self.config.validate_headers:
            self._validate_header(name, value)
        self._headers.add(name, value)

    def unset_header(self, name: str) -> None:
        """Remove header."""
        self._headers.pop(name, None)

    def _validate_header(self, name: str, value: str, multiline: bool = False) -> None:
        """
        Reject control characters in header names and CR/LF in values.

        Set-Cookie may carry newline-joined directives when assigned whole.
        """
        for char in name:
            if ord(char) < 32 or ord(char) == 127:
                raise InvalidHeaderFault(name)

        if "\r" in value or ("\n" in value and not multiline):
            raise InvalidHeaderFault(name, value)

    # ========================================================================
    # Header-derived accessors
    # ========================================================================

    @property
    def location(self) -> Optional[str]:
        return self._headers.get("Location")

    @location.setter
    def location(self, url: str) -> None:
        self.set_header("Location", url)

    redirect_url = location

    @property
    def last_modified(self) -> Optional[datetime]:
        """Parsed Last-Modified header, or None if absent or unparsable."""
        value = self._headers.get("Last-Modified")
        if not value:
            return None
        try:
            return parsedate_to_datetime(value)
        except (TypeError, ValueError):
            self.logger.debug(f"Unparsable Last-Modified header: {value!r}")
            return None

    @last_modified.setter
    def last_modified(self, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc).replace(microsecond=0)
        self.set_header("Last-Modified", format_datetime(value, usegmt=True))

    @property
    def has_last_modified(self) -> bool:
        return "Last-Modified" in self._headers

    @property
    def etag(self) -> Optional[str]:
        return self._headers.get("ETag")

    @etag.setter
    def etag(self, value: Any) -> None:
        """Blank clears the header; anything else is hashed into a quoted MD5."""
        if is_blank(value):
            self._headers.pop("ETag", None)
        else:
            self._headers["ETag"] = md5_etag(value, self.config.cache_namespace)

    @property
    def has_etag(self) -> bool:
        return "ETag" in self._headers

    @property
    def is_sending_file(self) -> bool:
        return self._headers.get("Content-Transfer-Encoding") == "binary"

    @property
    def content_length(self) -> Optional[int]:
        value = self._headers.get("Content-Length")
        if value is None or not value.strip().isdigit():
            return None
        return int(value)

    @content_length.setter
    def content_length(self, value: int) -> None:
        self.set_header("Content-Length", str(int(value)))

    # ========================================================================
    # Body
    # ========================================================================

    @property
    def body(self) -> str:
        """
        Full body text.

        Streamed bodies run their producer to collect the text.
        """
        collected: List[str] = []
        writer = self._writer
        try:
            self._emit(collected.append)
        finally:
            self._writer = writer
        return "".join(collected)

    @body.setter
    def body(self, value: Any) -> None:
        self._body = coerce_body(value)

    @property
    def body_variant(self) -> Body:
        return self._body

    @property
    def body_parts(self) -> Any:
        """Raw body parts: a list/iterable of chunks, or the producer."""
        if isinstance(self._body, Streamed):
            return self._body.producer
        return self._body.parts

    # ========================================================================
    # Streaming protocol
    # ========================================================================

    def each(self, callback: Writer) -> None:
        """
        Emit every body chunk to callback, in order.

        A Streamed producer is called as ``producer(self, self)`` and emits
        through ``write``. Afterwards ``write`` keeps forwarding to callback
        and ``on_complete`` fires.
        """
        self._emit(callback)
        self._writer = callback
        if self.on_complete is not None:
            self.on_complete(self)

    def write(self, chunk: Any) -> str:
        """Forward one chunk to the current writer."""
        text = str(chunk)
        self._writer(text)
        return text

    def _emit(self, callback: Writer) -> None:
        body = self._body
        if isinstance(body, Streamed):
            self._writer = callback
            body.producer(self, self)
        elif isinstance(body, Fixed):
            callback(body.text)
        elif isinstance(body, Chunks):
            for part in body.parts:
                callback(str(part))
        else:
            raise TypeError(f"Unknown body variant: {type(body).__name__}")

    def _buffer_chunk(self, text: str) -> None:
        """Default writer: append to the body until a transport takes over."""
        body = self._body
        if isinstance(body, Fixed):
            self._body = Chunks([body.text, text])
        elif isinstance(body, Chunks) and isinstance(body.parts, list):
            body.parts.append(text)
        elif isinstance(body, Chunks):
            self._body = Chunks([*body.parts, text])
        else:
            raise ResponseStreamFault("cannot buffer a write into a streamed body before iteration")

    # ========================================================================
    # Cookies
    # ========================================================================

    def set_cookie(self, name: str, value: Union[str, List[str], Mapping[str, Any], None] = None, **options: Any) -> None:
        """
        Append a cookie to Set-Cookie.

        Args:
            name: Cookie name
            value: Value string, list of values, or a mapping of options
                including ``value``
            **options: domain, path, expires, max_age, secure, httponly,
                samesite (``http_only`` is accepted but deprecated)
        """
        if isinstance(value, Mapping):
            merged = {**value, **options}
        else:
            merged = {"value": value, **options}

        cookie = serialize_cookie(name, normalize_cookie_options(merged, self.logger))
        if self.config.validate_headers:
            self._validate_header("Set-Cookie", cookie)
        self._headers.add("Set-Cookie", cookie)

    def delete_cookie(self, name: str, path: Optional[str] = None, domain: Optional[str] = None) -> None:
        """Drop earlier cookies of this name and append an expired empty one."""
        kept = without_cookie(split_set_cookie(self._headers.get("Set-Cookie")), name)
        if kept:
            self._headers["Set-Cookie"] = "\n".join(kept)
        else:
            self._headers.pop("Set-Cookie", None)

        self.set_cookie(
            name,
            "",
            path=path,
            domain=domain,
            max_age=0,
            expires=datetime.fromtimestamp(0, tz=timezone.utc),
        )

    @property
    def cookies(self) -> dict:
        """Set-Cookie parsed into name -> value pairs (read-only view)."""
        return parse_set_cookie(self._headers.get("Set-Cookie"))

    # ========================================================================
    # Finalization
    # ========================================================================

    def finalize(self) -> None:
        """
        Apply HTTP defaults before the response is serialized.

        Order: Content-Type defaults, conditional GET / Cache-Control,
        Set-Cookie presence. Never raises.
        """
        self._assign_default_content_type_and_charset()
        self._handle_conditional_get()
        if "Set-Cookie" not in self._headers:
            self._headers["Set-Cookie"] = ""
        self.finalized = True

        self.logger.debug(
            f"Finalized response status={self._status} "
            f"etag={self.etag} cache-control={self._headers.get('Cache-Control')!r}"
        )

    prepare = finalize

    def _assign_default_content_type_and_charset(self) -> None:
        if not is_blank(self._headers.get("Content-Type")):
            return

        if self.content_type is None:
            self.content_type = self.config.default_content_type
        if self.charset is None:
            self.charset = self.config.default_charset

        value = str(self.content_type)
        if not self.is_sending_file:
            value += f"; charset={self.charset}"

        self._headers["Content-Type"] = value

    def _handle_conditional_get(self) -> None:
        if self.has_etag or self.has_last_modified or not self.cache_control.is_empty:
            self._set_conditional_cache_control()
        elif self._is_nonempty_ok_response():
            self.etag = "".join(self._body.parts)

            request = self.request
            if request is not None and request.etag_matches(self.etag):
                self._status = 304
                self._body = Chunks([])

            self._set_conditional_cache_control()
        else:
            self._headers["Cache-Control"] = "no-cache"

    def _is_nonempty_ok_response(self) -> bool:
        ok = self._status is None or self._status == 200
        return ok and is_string_body(self._body)

    def _set_conditional_cache_control(self) -> None:
        if self.cache_control.is_empty:
            self.cache_control.apply_defaults()
        self._headers["Cache-Control"] = self.cache_control.render()


__all__ = [
    "Response",
    "Writer",
]
