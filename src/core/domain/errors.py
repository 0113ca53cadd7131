"""Exceptions raised by the carrier integration.

Only unrecoverable conditions are exceptions. A reply that parses but
reports an error severity is returned as a response with
`success=False`, never raised.
"""

from __future__ import annotations


class CarrierError(Exception):
    """Base class for every error raised by this package."""


class MissingCredentialsError(CarrierError):
    """Required credential fields are absent."""

    def __init__(self, missing: list[str] | tuple[str, ...]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing required credentials: {', '.join(self.missing)}")


class UnknownCodeError(CarrierError, ValueError):
    """An option value has no entry in the corresponding code table."""

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Unknown {kind}: {value!r}")


class TransportError(CarrierError):
    """The HTTP exchange with the gateway failed."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class MalformedResponseError(CarrierError):
    """The gateway answered with a body that is not XML.

    The raw body is kept on the exception because some gateway errors are
    plain text or broken markup and are only readable as such.
    """

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(body)
