"""Logout challenge flow (acknowledgement only, there is no reject)."""

from __future__ import annotations

from hydra_consent.challenge import LOGOUT, fetch_challenge, resolve_challenge
from hydra_consent.models import LogoutAccept, LogoutRequest, RedirectOutcome
from hydra_consent.transport import Timeout, Transport


def get_logout_request(
    transport: Transport,
    url: str,
    challenge: str,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> LogoutRequest:
    return fetch_challenge(
        transport,
        LOGOUT,
        url,
        challenge,
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )


def accept_logout(
    transport: Transport,
    url: str,
    challenge: str,
    decision: LogoutAccept | None = None,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> RedirectOutcome:
    """Acknowledge the logout and return where to send the browser."""
    return resolve_challenge(
        transport,
        LOGOUT,
        url,
        challenge,
        (decision or LogoutAccept()).to_payload(),
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )
