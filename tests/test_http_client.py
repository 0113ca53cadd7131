"""Tests for adapters.http_client: endpoint selection, retries and errors."""

import httpx
import pytest

from adapters.http_client import LIVE_URL, TEST_URL, HttpTransport, build_http_client
from core.config import AppSettings
from core.domain.errors import TransportError
from core.interfaces.transport import Transport


def _transport(handler, **overrides):
    settings = AppSettings(_env_file=None, **overrides)
    client = build_http_client(settings, transport=httpx.MockTransport(handler))
    return HttpTransport(settings, client=client)


class TestHttpTransport:

    def test_satisfies_transport_protocol(self):
        assert isinstance(_transport(lambda request: httpx.Response(200)), Transport)

    def test_posts_to_selected_endpoint(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.host, request.url.path))
            return httpx.Response(200, text="<Reply/>")

        transport = _transport(handler)
        assert transport.submit("<Request/>", test=True) == "<Reply/>"
        transport.submit("<Request/>", test=False)
        assert seen == [("POST", "gatewaybeta.fedex.com", "/xml"), ("POST", "gateway.fedex.com", "/xml")]
        assert transport.endpoint(test=True) == TEST_URL
        assert transport.endpoint() == LIVE_URL

    def test_strips_newlines_and_sets_headers(self):
        seen = {}

        def handler(request):
            seen["body"] = request.content.decode("utf-8")
            seen["content_type"] = request.headers["Content-Type"]
            seen["user_agent"] = request.headers["User-Agent"]
            return httpx.Response(200, text="<Reply/>")

        _transport(handler, user_agent="tests/1.0").submit("<A>\n  <B>1</B>\r\n</A>\n")
        assert seen["body"] == "<A>  <B>1</B></A>"
        assert seen["content_type"].startswith("text/xml")
        assert seen["user_agent"] == "tests/1.0"

    def test_retries_connection_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, text="<Reply/>")

        assert _transport(handler, http_max_retries=2).submit("<Request/>") == "<Reply/>"
        assert len(calls) == 3

    def test_gives_up_after_max_retries(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="Could not reach"):
            _transport(handler, http_max_retries=1).submit("<Request/>")
        assert len(calls) == 2

    def test_http_error_status_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="Internal error")

        with pytest.raises(TransportError) as excinfo:
            _transport(handler).submit("<Request/>")
        assert excinfo.value.status_code == 500
        assert excinfo.value.body == "Internal error"
        assert len(calls) == 1

    def test_context_manager_closes_client(self):
        with _transport(lambda request: httpx.Response(200, text="ok")) as transport:
            assert transport.submit("x") == "ok"
        assert transport._client.is_closed
