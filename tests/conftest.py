from pathlib import Path
import io
import json
import sys

import httpx
import pytest
from PIL import Image

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))


def png_bytes(width: int, height: int, color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it sees."""

    def __init__(self, responder):
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return responder(request)

        super().__init__(handler)


@pytest.fixture
def make_client():
    def factory(responder):
        transport = RecordingTransport(responder)
        return httpx.Client(transport=transport), transport
    return factory


@pytest.fixture
def fal_ok():
    def responder(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"images": [{"url": "https://v3b.fal.media/files/out/abc.png"}]})
    return responder


def json_body(response: dict) -> dict:
    return json.loads(response["body"])
