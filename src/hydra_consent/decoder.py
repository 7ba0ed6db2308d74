"""Turn a raw transport response into a typed record or a classified error.

This is the single place where HTTP statuses are mapped onto the
:class:`~hydra_consent.errors.ProtocolError` taxonomy:

=======  ==========================================================
Status   Outcome
=======  ==========================================================
200      JSON body decoded into *shape*
201      JSON body decoded into *shape* (POST /clients)
204      empty payload decoded into *shape* (DELETE endpoints)
400      :class:`BadRequestError` (raw body echoed)
401      :class:`UnauthorizedError` (raw body echoed)
403      :class:`ForbiddenError` (raw body echoed)
404      :class:`NotFoundError` (raw body echoed)
500      :class:`ServerError` (raw body **not** echoed)
other    :class:`UnhandledStatusError`
=======  ==========================================================
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Final, TypeVar, overload

from hydra_consent.errors import (
    BadRequestError,
    DecodeError,
    ForbiddenError,
    NotFoundError,
    ProtocolError,
    ServerError,
    UnauthorizedError,
    UnhandledStatusError,
)
from hydra_consent.transport import RawResponse

_LOG = logging.getLogger("hydra-consent.decoder")

T = TypeVar("T")

_BODY_PREVIEW: Final[int] = 500
_SUCCESS: Final[frozenset[int]] = frozenset({200, 201, 204})

_ECHOING_ERRORS: Final[dict[int, tuple[type[ProtocolError], str]]] = {
    400: (BadRequestError, "Bad Request"),
    401: (UnauthorizedError, "Unauthorized"),
    403: (ForbiddenError, "Forbidden"),
    404: (NotFoundError, "Not Found"),
}


def _text(body: bytes) -> str:
    return body[:_BODY_PREVIEW].decode("utf-8", errors="replace")


def raise_for_status(body: bytes, status_code: int) -> None:
    """Raise the classified :class:`ProtocolError` for a non-success status."""
    if status_code in _SUCCESS:
        return
    if status_code in _ECHOING_ERRORS:
        exc_type, label = _ECHOING_ERRORS[status_code]
        raise exc_type(f"{label}: {_text(body)}", status_code=status_code, body=body)
    if status_code == 500:
        # internal detail stays out of the message
        raise ServerError("Internal Server Error", status_code=status_code)
    raise UnhandledStatusError(f"Unhandled status {status_code}", status_code=status_code)


@overload
def decode_response(body: bytes, status_code: int, shape: Callable[[Any], T]) -> T: ...
@overload
def decode_response(body: bytes, status_code: int, shape: None) -> None: ...


def decode_response(body, status_code, shape):
    """Decode *body* into *shape* (any ``from_dict``-style callable).

    ``shape=None`` means no payload is expected; a success status then yields
    ``None``.
    """
    raise_for_status(body, status_code)
    if shape is None:
        return None

    if status_code == 204:
        payload: Any = {}
    else:
        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise DecodeError(
                f"Malformed JSON in response: {_text(body)}", body=body, status_code=status_code
            ) from exc

    try:
        return shape(payload)
    except (KeyError, TypeError, ValueError) as exc:
        _LOG.debug("Response did not match expected shape: %s", exc)
        raise DecodeError(
            f"Unexpected response shape: {exc}", body=body, status_code=status_code
        ) from exc


def decode(response: RawResponse, shape):
    """Shorthand for :func:`decode_response` on a :class:`RawResponse`."""
    return decode_response(response.body, response.status_code, shape)
