"""Consent challenge flow.

``ConsentRequest.skip`` is only carried through.  The usual handling of a
skipped request is::

    request = get_consent_request(transport, url, challenge)
    if request.skip:
        accept_consent(transport, accept_url, challenge, ConsentAccept.from_request(request))
"""

from __future__ import annotations

from hydra_consent.challenge import CONSENT, fetch_challenge, resolve_challenge
from hydra_consent.models import ConsentAccept, ConsentRequest, RedirectOutcome, RejectDecision
from hydra_consent.transport import Timeout, Transport


def get_consent_request(
    transport: Transport,
    url: str,
    challenge: str,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> ConsentRequest:
    """Fetch the pending consent request.

    Raises ``NotFoundError`` when the challenge does not exist or has already
    been resolved.
    """
    return fetch_challenge(
        transport,
        CONSENT,
        url,
        challenge,
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )


def accept_consent(
    transport: Transport,
    url: str,
    challenge: str,
    decision: ConsentAccept,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> RedirectOutcome:
    return resolve_challenge(
        transport,
        CONSENT,
        url,
        challenge,
        decision.to_payload(),
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )


def reject_consent(
    transport: Transport,
    url: str,
    challenge: str,
    decision: RejectDecision,
    *,
    authenticated: bool = True,
    timeout: Timeout = None,
    correlation_id: str | None = None,
) -> RedirectOutcome:
    """Deny the consent; all five error fields are always sent."""
    return resolve_challenge(
        transport,
        CONSENT,
        url,
        challenge,
        decision.to_payload(omit_empty=False),
        authenticated=authenticated,
        timeout=timeout,
        correlation_id=correlation_id,
    )
