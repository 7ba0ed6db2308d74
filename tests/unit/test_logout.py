"""Logout flow: fetch + acknowledge, no reject path."""

from __future__ import annotations

import pytest

from hydra_consent import logout
from hydra_consent.errors import NotFoundError
from hydra_consent.logout import accept_logout, get_logout_request


def test_get_and_accept_logout(hydra) -> None:
    challenge = hydra.issue(
        "logout", request_url="https://app/logout", rp_initiated=True, sid="sid-1", subject="alice"
    )
    req = get_logout_request(hydra, hydra.endpoints.logout_request, challenge)
    assert req.rp_initiated is True
    assert req.sid == "sid-1"
    assert req.subject == "alice"

    outcome = accept_logout(hydra, hydra.endpoints.logout_accept, challenge)
    assert outcome.redirect_to
    assert hydra.decisions[challenge] == ("accept", {})
    assert hydra.sent[-1].params == {"logout_challenge": challenge}


def test_accept_logout_twice_is_not_found(hydra) -> None:
    challenge = hydra.issue("logout", subject="alice")
    accept_logout(hydra, hydra.endpoints.logout_accept, challenge)
    with pytest.raises(NotFoundError):
        accept_logout(hydra, hydra.endpoints.logout_accept, challenge)


def test_logout_has_no_reject() -> None:
    assert not hasattr(logout, "reject_logout")
