import json
import socket
import threading
from http.server import HTTPServer

import pytest

from conftest import json_body

from api.index import handle_index, handler as index_handler
from api.agape import edit, thumb
from core.http_adapter import encode_body, make_handler, parse_query
from core.models import Request
from core.responses import json_response


def test_index_reports_routes_without_leaking_key():
    response = handle_index(Request(method="GET"), env={"FAL_KEY": "secret"})
    body = json_body(response)
    assert response["statusCode"] == 200
    assert body["fal_key_configured"] is True
    assert body["routes"]["thumb"]["path"] == "/api/agape/thumb"
    assert "secret" not in response["body"]


def test_index_without_key():
    body = json_body(handle_index(Request(method="GET"), env={}))
    assert body["fal_key_configured"] is False


def test_handlers_are_request_handler_classes():
    from http.server import BaseHTTPRequestHandler

    for h in (index_handler, edit.handler, thumb.handler):
        assert issubclass(h, BaseHTTPRequestHandler)


def test_parse_query_takes_first_value():
    assert parse_query("/api/agape/thumb?src=https%3A%2F%2Ffal.media%2Fa.png&raw=1&raw=0") == {
        "src": "https://fal.media/a.png",
        "raw": "1",
    }
    assert parse_query("/api/agape/thumb") == {}


def test_encode_body():
    assert encode_body(None) == b""
    assert encode_body(b"\x00\x01") == b"\x00\x01"
    assert encode_body("hola") == b"hola"
    assert json.loads(encode_body({"ok": True})) == {"ok": True}


@pytest.fixture
def serve():
    servers = []

    def start(fn):
        server = HTTPServer(("127.0.0.1", 0), make_handler(fn))
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server.server_address

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def _raw_exchange(address, data: bytes) -> bytes:
    chunks = []
    with socket.create_connection(address, timeout=5) as sock:
        sock.sendall(data)
        while True:
            chunk = sock.recv(65536)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


def _echo_length(request):
    return json_response(200, {"length": len(request.body)})


def test_adapter_round_trip(serve):
    address = serve(_echo_length)
    reply = _raw_exchange(address, b"POST /api/agape/edit HTTP/1.1\r\nHost: x\r\nContent-Length: 2\r\n\r\n{}")
    assert reply.startswith(b"HTTP/1.0 200")
    assert reply.endswith(b'{"length": 2}')


@pytest.mark.parametrize("length", [b"abc", b"-5"])
def test_adapter_rejects_bad_content_length(serve, length):
    address = serve(_echo_length)
    reply = _raw_exchange(address, b"POST / HTTP/1.1\r\nHost: x\r\nContent-Length: " + length + b"\r\n\r\n")
    assert reply.startswith(b"HTTP/1.0 400")
    assert reply.endswith(b"Invalid Content-Length")


def test_adapter_turns_handler_crash_into_500(serve):
    def crash(request):
        raise RuntimeError("boom")

    address = serve(crash)
    reply = _raw_exchange(address, b"GET / HTTP/1.1\r\nHost: x\r\n\r\n")
    assert reply.startswith(b"HTTP/1.0 500")
    assert reply.endswith(b"Server error")
    assert b"boom" not in reply
