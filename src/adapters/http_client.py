"""httpx wrapper for the FedEx XML gateway.

Why a wrapper:
- Standardizes timeouts, headers, retries and endpoint selection.
- Makes testing easy: the underlying client can be swapped for one built on
  `httpx.MockTransport`.
"""

from __future__ import annotations

import logging

import httpx

from core.config import AppSettings
from core.domain.errors import TransportError

logger = logging.getLogger(__name__)

TEST_URL = "https://gatewaybeta.fedex.com:443/xml"
LIVE_URL = "https://gateway.fedex.com:443/xml"


def build_http_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so every request behaves the same.
    - `transport` lets tests inject an `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Content-Type": "text/xml; charset=utf-8",
        "Accept": "text/xml, application/xml;q=0.9, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpTransport:
    """`core.interfaces.transport.Transport` over HTTPS POST.

    Rules:
    - Newlines are stripped from the request before it is sent.
    - Connection-level failures are retried up to `max_retries` times; the
      gateway treats a repeated quote or lookup as harmless.
    - HTTP error statuses are not retried: the body is surfaced through
      `TransportError`.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.Client | None = None,
        test_url: str = TEST_URL,
        live_url: str = LIVE_URL,
    ) -> None:
        self.settings = settings or AppSettings()
        self._client = client or build_http_client(self.settings)
        self.test_url = test_url
        self.live_url = live_url
        self.max_retries = self.settings.http_max_retries

    def endpoint(self, test: bool = False) -> str:
        return self.test_url if test else self.live_url

    def submit(self, request_text: str, test: bool = False) -> str:
        url = self.endpoint(test)
        payload = request_text.replace("\r", "").replace("\n", "")

        attempt = 0
        while True:
            try:
                response = self._client.post(url, content=payload.encode("utf-8"))
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise TransportError(
                    f"Gateway answered HTTP {exc.response.status_code}",
                    status_code=exc.response.status_code,
                    body=exc.response.text,
                ) from exc
            except (httpx.ConnectError, httpx.ReadError, httpx.WriteError, httpx.RemoteProtocolError) as exc:
                if attempt >= self.max_retries:
                    raise TransportError(f"Could not reach {url}: {exc}") from exc
                attempt += 1
                logger.warning("Connection to %s failed (%s); retry %d/%d", url, exc, attempt, self.max_retries)
                continue
            except httpx.HTTPError as exc:
                raise TransportError(f"Request to {url} failed: {exc}") from exc
            return response.text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
