"""Tests for app.services.fetcher.

Requests go through ``httpx.MockTransport`` and DNS-based SSRF checks are
patched out, so no test touches the network.
"""

import asyncio
from unittest.mock import patch

import httpx
import pytest

from app.models.crawl_config import CrawlConfig
from app.services.fetcher import FetchError, fetch_page, validate_url

_HTML = "<html><head><title>Hi</title></head><body><p>Hello</p></body></html>"


@pytest.fixture(autouse=True)
def public_dns():
    with patch("app.services.fetcher._is_private_address", return_value=False):
        yield


def _fetch(handler, url="https://example.com/", config=None):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_page(url, config or CrawlConfig(), client)

    return asyncio.run(run())


class TestFetchPage:
    def test_returns_html_and_final_url(self):
        def handler(request):
            return httpx.Response(200, text=_HTML, headers={"content-type": "text/html; charset=utf-8"})

        result = _fetch(handler)

        assert result.html == _HTML
        assert result.final_url == "https://example.com/"
        assert result.content_type.startswith("text/html")
        assert result.load_time_ms >= 0

    def test_sends_user_agent_and_accept_headers(self):
        seen = {}

        def handler(request):
            seen.update(request.headers)
            return httpx.Response(200, text=_HTML, headers={"content-type": "text/html"})

        _fetch(handler, config=CrawlConfig(user_agent="TestBot/1.0"))

        assert seen["user-agent"] == "TestBot/1.0"
        assert "text/html" in seen["accept"]

    def test_non_html_returns_none(self):
        def handler(request):
            return httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})

        assert _fetch(handler) is None

    def test_http_error_raises_with_status(self):
        def handler(request):
            return httpx.Response(404, text="not found", headers={"content-type": "text/html"})

        with pytest.raises(FetchError) as exc_info:
            _fetch(handler)

        assert exc_info.value.kind == "http"
        assert exc_info.value.status_code == 404
        assert "404" in str(exc_info.value)

    def test_follows_redirects_and_reports_final_url(self):
        def handler(request):
            if request.url.host == "example.com":
                return httpx.Response(301, headers={"location": "https://www.example.com/"})
            return httpx.Response(200, text=_HTML, headers={"content-type": "text/html"})

        result = _fetch(handler)

        assert result.final_url == "https://www.example.com/"

    def test_redirect_to_private_address_is_blocked(self):
        def handler(request):
            return httpx.Response(302, headers={"location": "http://internal.local/admin"})

        def is_private(hostname):
            return hostname == "internal.local"

        with patch("app.services.fetcher._is_private_address", side_effect=is_private):
            with pytest.raises(FetchError) as exc_info:
                _fetch(handler)

        assert exc_info.value.kind == "blocked"

    def test_redirect_loop_raises(self):
        def handler(request):
            return httpx.Response(302, headers={"location": str(request.url)})

        with pytest.raises(FetchError, match="redirects"):
            _fetch(handler)

    def test_transport_timeout_maps_to_timeout_kind(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(FetchError) as exc_info:
            _fetch(handler)

        assert exc_info.value.kind == "timeout"

    def test_connect_error_maps_to_network_kind(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FetchError) as exc_info:
            _fetch(handler)

        assert exc_info.value.kind == "network"

    def test_oversized_content_length_is_rejected(self):
        def handler(request):
            return httpx.Response(
                200,
                text=_HTML,
                headers={"content-type": "text/html", "content-length": str(50 * 1024 * 1024)},
            )

        with pytest.raises(FetchError) as exc_info:
            _fetch(handler)

        assert exc_info.value.kind == "too_large"

    def test_unsupported_scheme_is_blocked_before_request(self):
        def handler(request):  # pragma: no cover - never reached
            raise AssertionError("request should not be sent")

        with pytest.raises(FetchError) as exc_info:
            _fetch(handler, url="ftp://example.com/")

        assert exc_info.value.kind == "blocked"


class TestValidateUrl:
    def test_rejects_missing_hostname(self):
        with pytest.raises(ValueError, match="hostname"):
            validate_url("https:///path")

    def test_rejects_private_address(self):
        with patch("app.services.fetcher._is_private_address", return_value=True):
            with pytest.raises(ValueError, match="private"):
                validate_url("http://10.0.0.1/")

    def test_accepts_public_https(self):
        validate_url("https://example.com/")
