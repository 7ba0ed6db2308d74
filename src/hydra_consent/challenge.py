"""Generic fetch/resolve machinery shared by the login, consent and logout flows.

A challenge moves through ``Issued -> Fetched (repeatable) -> Resolved``
(terminal) on the Authorization Server.  This module only observes that state
machine through status codes: a fetch or resolve after resolution (or expiry)
raises :class:`~hydra_consent.errors.NotFoundError`.  Do not retry a resolve
that failed with ``NotFoundError``; the challenge is gone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from hydra_consent.decoder import decode
from hydra_consent.log_utils import get_hydra_logger
from hydra_consent.models import (
    ConsentRequest,
    LoginRequest,
    LogoutRequest,
    RedirectOutcome,
)
from hydra_consent.transport import Timeout, Transport

R = TypeVar("R")


@dataclass(frozen=True)
class Flow(Generic[R]):
    """Describes one challenge flow: its name and read-side record."""

    name: str
    request_shape: Callable[[Any], R]

    @property
    def query_param(self) -> str:
        return f"{self.name}_challenge"


LOGIN: Flow[LoginRequest] = Flow("login", LoginRequest.from_dict)
CONSENT: Flow[ConsentRequest] = Flow("consent", ConsentRequest.from_dict)
LOGOUT: Flow[LogoutRequest] = Flow("logout", LogoutRequest.from_dict)


def _ensure_challenge(flow: Flow[Any], challenge: str) -> None:
    if not challenge:
        raise ValueError(f"{flow.query_param} is required")


def fetch_challenge(
    transport: Transport,
    flow: Flow[R],
    url: str,
    challenge: str,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> R:
    """``GET url?{flow}_challenge=challenge`` and decode the pending request."""
    _ensure_challenge(flow, challenge)
    log = get_hydra_logger(flow=flow.name, challenge=challenge, correlation_id=correlation_id)

    response = transport.send(
        "GET",
        url,
        params={flow.query_param: challenge},
        authenticated=authenticated,
        timeout=timeout,
    )
    request = decode(response, flow.request_shape)
    log.debug("Fetched %s request", flow.name)
    return request


def resolve_challenge(
    transport: Transport,
    flow: Flow[Any],
    url: str,
    challenge: str,
    payload: dict[str, Any],
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> RedirectOutcome:
    """``PUT url?{flow}_challenge=challenge`` with a JSON decision body."""
    _ensure_challenge(flow, challenge)
    log = get_hydra_logger(flow=flow.name, challenge=challenge, correlation_id=correlation_id)

    response = transport.send(
        "PUT",
        url,
        params={flow.query_param: challenge},
        json=payload,
        authenticated=authenticated,
        timeout=timeout,
    )
    outcome = decode(response, RedirectOutcome.from_dict)
    log.info("Resolved %s challenge", flow.name)
    return outcome
