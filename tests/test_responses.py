from urllib.parse import parse_qs, urlsplit

from conftest import json_body

from core.errors import MissingCredential, UpstreamError
from core.models import UpstreamImageResult
from core.responses import (
    IMMUTABLE_CACHE,
    build_proxy_url,
    markdown_link_target,
    error_response,
    image_response,
    request_origin,
    shape_success,
)
from core.sanitize import sanitize_request

IMAGE = "https://v3b.fal.media/files/out/a b&c.png?token=1"


def test_origin_prefers_forwarded_headers():
    headers = {"X-Forwarded-Proto": "https, http", "X-Forwarded-Host": "agape.example.com", "Host": "internal:3000"}
    assert request_origin(headers) == "https://agape.example.com"


def test_origin_falls_back_to_host():
    assert request_origin({"host": "localhost:3000", "x-forwarded-proto": "http"}) == "http://localhost:3000"
    assert request_origin({"host": "agape.vercel.app"}) == "https://agape.vercel.app"
    assert request_origin({}) == "https://localhost"


def test_proxy_url_round_trips_src():
    proxy = build_proxy_url("https://agape.example.com", IMAGE)
    parts = urlsplit(proxy)
    assert parts.path == "/api/agape/thumb"
    assert parse_qs(parts.query)["src"] == [IMAGE]
    assert "&c.png" not in proxy


def test_shape_success_fields():
    request = sanitize_request({"mode": "caribe", "sku": "600ml", "tapa": False})
    body = shape_success(UpstreamImageResult(url=IMAGE), request, {"host": "agape.example.com"})

    assert body["ok"] is True
    assert body["image_url"] == IMAGE
    assert body["image_proxy_url"].startswith("https://agape.example.com/api/agape/thumb?src=")
    assert body["render_markdown"].endswith(f"({body['image_proxy_url']})")
    assert body["render_markdown"].startswith("![")
    assert body["download_markdown"] == f"[Descargar imagen](<{IMAGE}>)"
    assert body["mode"] == "caribe"
    assert body["sku"] == "600ml"
    assert body["tapa"] is False
    assert body["reference_mode"] is False
    assert body["ignored"] == {}


def test_error_response_with_details():
    response = error_response(UpstreamError("fal returned status 422", status=422, details={"detail": "x"}))
    assert response["statusCode"] == 422
    assert json_body(response) == {
        "ok": False,
        "error": "fal_error",
        "message": "fal returned status 422",
        "status": 422,
        "details": {"detail": "x"},
    }


def test_error_response_without_details():
    response = error_response(MissingCredential("Missing FAL_KEY in environment"))
    assert response["statusCode"] == 500
    assert json_body(response) == {"ok": False, "error": "missing_fal_key", "message": "Missing FAL_KEY in environment"}
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"


def test_image_response_headers():
    response = image_response(b"abc", "image/png")
    assert response["headers"]["Cache-Control"] == IMMUTABLE_CACHE
    assert response["headers"]["Content-Disposition"] == "inline"
    assert response["body"] == b"abc"


def test_markdown_link_target_survives_parentheses_and_brackets():
    assert markdown_link_target("https://fal.media/a (1).png") == "<https://fal.media/a (1).png>"
    assert markdown_link_target("https://fal.media/<x>.png") == "<https://fal.media/%3Cx%3E.png>"


def test_image_response_disables_sniffing():
    assert image_response(b"abc", "image/png")["headers"]["X-Content-Type-Options"] == "nosniff"
