"""Login challenge flow.

When ``LoginRequest.skip`` is true the server already authenticated the
subject; accept straight away with ``LoginAccept(subject=request.subject)``
instead of showing a login form.
"""

from __future__ import annotations

from hydra_consent.challenge import LOGIN, fetch_challenge, resolve_challenge
from hydra_consent.models import LoginAccept, LoginRequest, RedirectOutcome, RejectDecision
from hydra_consent.transport import Timeout, Transport


def get_login_request(
    transport: Transport,
    url: str,
    challenge: str,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> LoginRequest:
    """Fetch the pending login request named by *challenge*."""
    return fetch_challenge(
        transport,
        LOGIN,
        url,
        challenge,
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )


def accept_login(
    transport: Transport,
    url: str,
    challenge: str,
    decision: LoginAccept,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> RedirectOutcome:
    """Accept the login; raises ``NotFoundError`` if already resolved."""
    return resolve_challenge(
        transport,
        LOGIN,
        url,
        challenge,
        decision.to_payload(),
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )


def reject_login(
    transport: Transport,
    url: str,
    challenge: str,
    decision: RejectDecision,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> RedirectOutcome:
    """Deny the login; empty error fields are left out of the body."""
    return resolve_challenge(
        transport,
        LOGIN,
        url,
        challenge,
        decision.to_payload(omit_empty=True),
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )
