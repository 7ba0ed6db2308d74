"""Exception types raised by hydra-consent operations.

Only lightweight, **data-carrying** exceptions live here so that web/CLI layers
can branch on the error kind and render an error page or retry as they see fit.

Retrying an accept/reject after :class:`NotFoundError` is pointless: the
challenge has already been consumed (or has expired) on the server.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of non-success HTTP statuses."""

    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNHANDLED = "unhandled"


class HydraError(RuntimeError):
    """Base class for every error surfaced by this package."""

    error_code = "hydra_error"

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable payload **without secrets**."""
        return {"error": self.error_code, "message": str(self)}


class TransportError(HydraError):
    """The request never produced an HTTP response (DNS, TLS, timeout...)."""

    error_code = "transport_error"

    def __init__(self, message: str, *, method: str | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.url = url

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.method:
            payload["method"] = self.method
        return payload


class TokenError(TransportError):
    """The client-credentials grant failed, so no bearer token could be attached."""

    error_code = "token_error"


class DecodeError(HydraError):
    """A success response carried a body that does not match the expected shape."""

    error_code = "decode_error"

    def __init__(self, message: str, *, body: bytes = b"", status_code: int | None = None) -> None:
        super().__init__(message)
        self.body = body
        self.status_code = status_code

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["status_code"] = self.status_code
        return payload


class ProtocolError(HydraError):
    """The Authorization Server answered with a non-success status."""

    error_code = "protocol_error"
    kind: ErrorKind = ErrorKind.UNHANDLED

    def __init__(self, message: str, *, status_code: int, body: bytes | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.kind.value,
            "status_code": self.status_code,
            "message": str(self),
        }


class BadRequestError(ProtocolError):
    kind = ErrorKind.BAD_REQUEST


class UnauthorizedError(ProtocolError):
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(ProtocolError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(ProtocolError):
    """Unknown resource, or a challenge that was already resolved or expired."""

    kind = ErrorKind.NOT_FOUND


class ServerError(ProtocolError):
    kind = ErrorKind.SERVER_ERROR


class UnhandledStatusError(ProtocolError):
    kind = ErrorKind.UNHANDLED
