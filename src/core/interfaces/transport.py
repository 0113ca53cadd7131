"""Transport contract.

The carrier facade only needs one synchronous call: send a request document
and get the reply text back. Timeouts, retries and endpoint URLs belong to
the implementation (see `adapters.http_client.HttpTransport`).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Minimal contract for delivering a request document.

    Rules:
    - `submit` blocks until the reply is available.
    - `test` selects the test endpoint instead of production.
    - Transport failures are raised; the reply body is returned untouched.
    """

    def submit(self, request_text: str, test: bool = False) -> str:
        """Send `request_text` and return the raw reply body."""

        ...
