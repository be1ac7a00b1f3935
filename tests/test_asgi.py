"""
Test ASGI adapter - send_asgi message framing and ResponseApp end-to-end
through httpx.
"""

import httpx
import pytest

from outbound.asgi import ResponseApp, asgi_headers, send_asgi
from outbound.config import ResponseConfig
from outbound.response import Response


async def _collect(response):
    messages = []

    async def mock_send(message):
        messages.append(message)

    await send_asgi(response, mock_send)
    return messages


@pytest.mark.asyncio
async def test_send_finalizes_and_frames_body(etag_of):
    response = Response(["Hello, ", "World!"])
    messages = await _collect(response)

    assert response.finalized
    assert len(messages) == 4  # start + 2 chunks + final empty

    start = messages[0]
    assert start["type"] == "http.response.start"
    assert start["status"] == 200

    headers = dict((k.decode(), v.decode()) for k, v in start["headers"])
    assert headers["content-type"] == "text/html; charset=utf-8"
    assert headers["etag"] == etag_of("Hello, World!")
    assert headers["cache-control"] == "max-age=0, private, must-revalidate"
    assert "set-cookie" not in headers

    assert messages[1] == {"type": "http.response.body", "body": b"Hello, ", "more_body": True}
    assert messages[2] == {"type": "http.response.body", "body": b"World!", "more_body": True}
    assert messages[3] == {"type": "http.response.body", "body": b"", "more_body": False}


@pytest.mark.asyncio
async def test_send_does_not_refinalize():
    response = Response("x", status=201)
    response.finalize()
    response.headers["Cache-Control"] = "public"
    messages = await _collect(response)

    headers = dict((k.decode(), v.decode()) for k, v in messages[0]["headers"])
    assert headers["cache-control"] == "public"
    assert messages[0]["status"] == 201


@pytest.mark.asyncio
async def test_send_streamed_producer():
    def producer(resp, sink):
        sink.write("a")
        sink.write("")
        sink.write("b")

    messages = await _collect(Response(producer))
    bodies = [m["body"] for m in messages[1:]]
    assert bodies == [b"a", b"b", b""]

    headers = dict((k.decode(), v.decode()) for k, v in messages[0]["headers"])
    assert headers["cache-control"] == "no-cache"


@pytest.mark.asyncio
async def test_send_returns_byte_count():
    sent = await send_asgi(Response("café"), _noop_send)
    assert sent == 5


async def _noop_send(message):
    pass


@pytest.mark.asyncio
async def test_body_encoded_with_response_charset():
    response = Response("café", config=ResponseConfig(default_charset="iso-8859-1"))
    messages = await _collect(response)

    headers = dict(messages[0]["headers"])
    assert headers[b"content-type"] == b"text/html; charset=iso-8859-1"
    assert messages[1]["body"] == b"caf\xe9"


@pytest.mark.asyncio
async def test_binary_body_round_trips():
    raw = b"%PDF\xff\xfe\x00\xc3\xa9"
    response = Response(raw)
    response.content_type = "application/pdf"
    response.headers["Content-Transfer-Encoding"] = "binary"
    messages = await _collect(response)

    assert b"".join(m["body"] for m in messages[1:]) == raw
    assert dict(messages[0]["headers"])[b"content-type"] == b"application/pdf"


def test_cookies_become_separate_header_lines():
    response = Response()
    response.set_cookie("a", "1")
    response.set_cookie("b", "2", httponly=True)

    cookies = [v for k, v in asgi_headers(response) if k == b"set-cookie"]
    assert cookies == [b"a=1", b"b=2; HttpOnly"]


# ============================================================================
# ResponseApp through httpx
# ============================================================================

def page(request, response):
    response.body = "<h1>Welcome</h1>"
    response.set_cookie("visited", "yes", path="/")


async def async_redirect(request, response):
    response.status = 302
    response.location = "/login"


@pytest.fixture
def client_for():
    def _make(handler, config=None):
        transport = httpx.ASGITransport(app=ResponseApp(handler, config=config))
        return httpx.AsyncClient(transport=transport, base_url="http://testserver")
    return _make


@pytest.mark.asyncio
async def test_app_serves_page(client_for, etag_of):
    async with client_for(page) as client:
        r = await client.get("/")

    assert r.status_code == 200
    assert r.text == "<h1>Welcome</h1>"
    assert r.headers["etag"] == etag_of("<h1>Welcome</h1>")
    assert r.headers["content-type"] == "text/html; charset=utf-8"
    assert r.headers.get_list("set-cookie") == ["visited=yes; Path=/"]


@pytest.mark.asyncio
async def test_app_conditional_get(client_for):
    async with client_for(page) as client:
        first = await client.get("/")
        second = await client.get("/", headers={"If-None-Match": first.headers["etag"]})

    assert second.status_code == 304
    assert second.content == b""
    assert second.headers["etag"] == first.headers["etag"]


@pytest.mark.asyncio
async def test_app_async_handler(client_for):
    async with client_for(async_redirect) as client:
        r = await client.get("/", follow_redirects=False)

    assert r.status_code == 302
    assert r.headers["location"] == "/login"
    assert r.headers["cache-control"] == "no-cache"


@pytest.mark.asyncio
async def test_app_uses_injected_config(client_for):
    config = ResponseConfig(default_charset="iso-8859-1")
    async with client_for(page, config=config) as client:
        r = await client.get("/")

    assert r.headers["content-type"] == "text/html; charset=iso-8859-1"


@pytest.mark.asyncio
async def test_app_lifespan():
    app = ResponseApp(page)
    incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
    sent = []

    async def receive():
        return incoming.pop(0)

    async def send(message):
        sent.append(message)

    await app({"type": "lifespan"}, receive, send)
    assert [m["type"] for m in sent] == [
        "lifespan.startup.complete",
        "lifespan.shutdown.complete",
    ]
