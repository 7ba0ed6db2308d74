"""Token introspection, user info and login-session revocation."""

from __future__ import annotations

import logging

from hydra_consent.decoder import decode
from hydra_consent.log_utils import mask_sensitive
from hydra_consent.models import IntrospectionResult, SessionRevocationOutcome, UserInfo
from hydra_consent.transport import Timeout, Transport

_LOG = logging.getLogger("hydra-consent.oauth2")


def introspect_token(
    transport: Transport,
    url: str,
    token: str,
    scope: str | None = None,
    *,
    timeout: Timeout = None,
) -> IntrospectionResult:
    """Ask the server whether *token* is active.

    The body is form-encoded.  Invalid, expired and revoked tokens come back
    as ``active=False`` with status 200; that is a verdict, not an error.
    """
    if not token:
        raise ValueError("token is required")
    form = {"token": token, "scope": scope or ""}
    response = transport.send("POST", url, data=form, timeout=timeout)
    result = decode(response, IntrospectionResult.from_dict)
    _LOG.debug("Introspected token=%s active=%s", mask_sensitive(token), result.active)
    return result


def get_user_info(transport: Transport, url: str, *, timeout: Timeout = None) -> UserInfo:
    """Fetch the OIDC user info for the transport's bearer token."""
    response = transport.send("GET", url, timeout=timeout)
    return decode(response, UserInfo.from_dict)


def delete_login_sessions(
    transport: Transport,
    url: str,
    subject: str,
    *,
    timeout: Timeout = None,
) -> SessionRevocationOutcome:
    """Revoke every remembered login session of *subject* (sign out everywhere)."""
    if not subject:
        raise ValueError("subject is required")
    response = transport.send("DELETE", url, params={"subject": subject}, timeout=timeout)
    outcome = decode(response, SessionRevocationOutcome.from_dict)
    _LOG.info("Revoked login sessions for subject=%s", mask_sensitive(subject))
    return outcome
