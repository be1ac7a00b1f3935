"""
ASGI adapter - Sends a finalized outbound Response over ASGI.

The response body protocol is synchronous; chunks are collected through
``Response.each`` and then sent as ``http.response.body`` messages in
production order, after headers are final.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .config import ResponseConfig
from .cookies import split_set_cookie
from .request import ConditionalRequest
from .response import Response


logger = logging.getLogger("outbound.asgi")

Send = Callable[[dict], Awaitable[None]]
Handler = Callable[[ConditionalRequest, Response], Any]


def asgi_headers(response: Response, encoding: str = "latin-1") -> List[Tuple[bytes, bytes]]:
    """
    Convert response headers to ASGI byte pairs.

    Set-Cookie becomes one header line per cookie; an empty Set-Cookie is
    omitted.
    """
    headers_list = []
    _append = headers_list.append

    for name, value in response.headers.items():
        name_bytes = name.lower().encode(encoding)
        if name.lower() == "set-cookie":
            for cookie in split_set_cookie(value):
                _append((name_bytes, cookie.encode(encoding)))
        else:
            _append((name_bytes, value.encode(encoding)))

    return headers_list


async def send_asgi(response: Response, send: Send, encoding: str = "utf-8") -> int:
    """
    Finalize (if needed) and send a response via ASGI.

    Body text is encoded with the response charset, or with ``encoding``
    when none is set or the response is sending a file. Bytes bodies
    decoded with ``surrogateescape`` come back out unchanged.

    Returns:
        Number of body bytes sent
    """
    if not response.finalized:
        response.finalize()

    chunks: List[str] = []
    charset = encoding if response.is_sending_file else (response.charset or encoding)
    response.each(chunks.append)

    await send({
        "type": "http.response.start",
        "status": response.status if response.status is not None else 200,
        "headers": asgi_headers(response),
    })

    bytes_sent = 0
    for chunk in chunks:
        body = chunk.encode(charset, errors="surrogateescape")
        if not body:
            continue
        bytes_sent += len(body)
        await send({
            "type": "http.response.body",
            "body": body,
            "more_body": True,
        })

    await send({
        "type": "http.response.body",
        "body": b"",
        "more_body": False,
    })

    logger.debug(f"Sent {response.status or 200} ({bytes_sent} bytes)")
    return bytes_sent


class ResponseApp:
    """
    ASGI application wrapping a handler ``handler(request, response)``.

    The handler mutates the response (sync or async); the app attaches the
    request for conditional GET, finalizes and sends.

    Example:
        def hello(request, response):
            response.body = "Hello"

        app = ResponseApp(hello)
    """

    __slots__ = ("handler", "config", "logger")

    def __init__(self, handler: Handler, config: Optional[ResponseConfig] = None):
        self.handler = handler
        self.config = config or ResponseConfig()
        self.logger = logger

    async def __call__(self, scope: Dict[str, Any], receive: Callable, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            self.logger.warning(f"Unsupported ASGI scope type: {scope['type']}")
            return

        request = ConditionalRequest.from_scope(scope)
        response = Response(config=self.config, request=request, logger=self.logger)

        result = self.handler(request, response)
        if inspect.isawaitable(result):
            await result

        await send_asgi(response, send)

    async def _handle_lifespan(self, receive: Callable, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
