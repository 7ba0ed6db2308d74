"""Environment configuration and endpoint layout."""

from __future__ import annotations

import pytest

from hydra_consent.config import HydraConfig, HydraEndpoints, build_transport
from hydra_consent.transport import ClientCredentialsAuth

_ENV_KEYS = (
    "HYDRA_URL",
    "HYDRA_ADMIN_URL",
    "HYDRA_CLIENT_ID",
    "HYDRA_CLIENT_SECRET",
    "HYDRA_TOKEN_URL",
    "HYDRA_SCOPES",
    "HYDRA_AUDIENCE",
    "HYDRA_TIMEOUT",
    "HYDRA_CHALLENGE_AUTH",
    "HYDRA_CONSENT_ACCEPT_URL",
    "CLIENT_ID",
    "CLIENT_SECRET",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_default_endpoint_layout() -> None:
    eps = HydraEndpoints.from_urls("http://admin:4445/", "http://public:4444")
    assert eps.login_request == "http://admin:4445/oauth2/auth/requests/login"
    assert eps.consent_accept == "http://admin:4445/oauth2/auth/requests/consent/accept"
    assert eps.logout_accept == "http://admin:4445/oauth2/auth/requests/logout/accept"
    assert eps.clients == "http://admin:4445/clients"
    assert eps.introspect == "http://admin:4445/oauth2/introspect"
    assert eps.login_sessions == "http://admin:4445/oauth2/auth/sessions/login"
    assert eps.userinfo == "http://public:4444/userinfo"


def test_endpoint_overrides_and_unknown_names() -> None:
    eps = HydraEndpoints.from_urls("http://admin", clients="http://elsewhere/clients")
    assert eps.clients == "http://elsewhere/clients"
    assert eps.userinfo == "http://admin/userinfo"
    with pytest.raises(ValueError, match="unknown endpoint"):
        HydraEndpoints.from_urls("http://admin", bogus="http://x")


def test_from_env_full(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HYDRA_URL", "http://public:4444")
    monkeypatch.setenv("HYDRA_ADMIN_URL", "http://admin:4445")
    monkeypatch.setenv("HYDRA_CLIENT_ID", "cid")
    monkeypatch.setenv("HYDRA_CLIENT_SECRET", "csec")
    monkeypatch.setenv("HYDRA_SCOPES", "openid,hydra.clients")
    monkeypatch.setenv("HYDRA_TIMEOUT", "3,10")
    monkeypatch.setenv("HYDRA_CHALLENGE_AUTH", "false")
    monkeypatch.setenv("HYDRA_CONSENT_ACCEPT_URL", "http://proxy/consent/accept")

    cfg = HydraConfig.from_env()
    assert cfg.has_client
    assert cfg.scopes == ("openid", "hydra.clients")
    assert cfg.audience == "hydra"
    assert cfg.timeout == (3.0, 10.0)
    assert cfg.challenge_auth is False
    eps = cfg.resolved_endpoints()
    assert eps.consent_accept == "http://proxy/consent/accept"
    assert eps.consent_request == "http://admin:4445/oauth2/auth/requests/consent"
    assert "csec" not in repr(cfg)


def test_from_env_legacy_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HYDRA_URL", "http://hydra:4444")
    monkeypatch.setenv("CLIENT_ID", "legacy-id")
    monkeypatch.setenv("CLIENT_SECRET", "legacy-secret")
    cfg = HydraConfig.from_env()
    assert cfg.client_id == "legacy-id"
    assert cfg.admin_url == "http://hydra:4444"
    assert cfg.challenge_auth is True


def test_from_env_requires_url() -> None:
    with pytest.raises(ValueError, match="HYDRA_ADMIN_URL"):
        HydraConfig.from_env()


def test_from_env_rejects_bad_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HYDRA_URL", "http://hydra")
    monkeypatch.setenv("HYDRA_TIMEOUT", "1,2,3")
    with pytest.raises(ValueError, match="invalid timeout"):
        HydraConfig.from_env()


def test_build_transport_with_explicit_token_url() -> None:
    cfg = HydraConfig(
        admin_url="http://admin",
        client_id="cid",
        client_secret="csec",
        token_url="http://public/oauth2/token",
    )
    transport = build_transport(cfg)
    assert isinstance(transport.auth, ClientCredentialsAuth)
    assert transport.auth.token_url == "http://public/oauth2/token"
    assert transport.auth.audience == "hydra"


def test_build_transport_discovers_token_url(monkeypatch: pytest.MonkeyPatch) -> None:
    from hydra_consent import config as config_mod

    seen: dict[str, str] = {}

    def _discover(issuer_url: str, **kwargs) -> str:  # noqa: ANN003
        seen["issuer"] = issuer_url
        return "http://public/oauth2/token"

    monkeypatch.setattr(config_mod, "discover_token_endpoint", _discover)
    cfg = HydraConfig(admin_url="http://admin", public_url="http://public", client_id="c", client_secret="s")
    transport = build_transport(cfg)
    assert seen["issuer"] == "http://public"
    assert transport.auth.token_url == "http://public/oauth2/token"


def test_build_transport_without_client_has_no_auth() -> None:
    transport = build_transport(HydraConfig(admin_url="http://admin"))
    assert transport.auth is None
