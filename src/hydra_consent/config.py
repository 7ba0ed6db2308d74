"""Environment-driven configuration and endpoint layout.

Resolution order for every value (highest -> lowest):

1. Prefixed variable, e.g. ``HYDRA_CLIENT_ID``
2. Legacy un-prefixed variable (``CLIENT_ID``, ``CLIENT_SECRET``) where one exists
3. Built-in default

Endpoint URLs default to the Hydra admin/public layout and can each be
overridden with ``HYDRA_<NAME>_URL`` (for example ``HYDRA_CONSENT_ACCEPT_URL``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Final, Tuple

import requests

from hydra_consent.transport import (
    DEFAULT_TIMEOUT,
    ClientCredentialsAuth,
    RequestsTransport,
    Timeout,
    discover_token_endpoint,
)

logger = logging.getLogger("hydra-consent.config")

_TRUTHY: Final[Tuple[str, ...]] = ("true", "1", "yes", "y", "on")

_LEGACY_KEYS: Final[dict[str, str]] = {
    "URL": "HYDRA_URL",
    "CLIENT_ID": "CLIENT_ID",
    "CLIENT_SECRET": "CLIENT_SECRET",
}

# endpoint name -> (base, path)
_ENDPOINT_PATHS: Final[dict[str, tuple[str, str]]] = {
    "login_request": ("admin", "/oauth2/auth/requests/login"),
    "login_accept": ("admin", "/oauth2/auth/requests/login/accept"),
    "login_reject": ("admin", "/oauth2/auth/requests/login/reject"),
    "consent_request": ("admin", "/oauth2/auth/requests/consent"),
    "consent_accept": ("admin", "/oauth2/auth/requests/consent/accept"),
    "consent_reject": ("admin", "/oauth2/auth/requests/consent/reject"),
    "logout_request": ("admin", "/oauth2/auth/requests/logout"),
    "logout_accept": ("admin", "/oauth2/auth/requests/logout/accept"),
    "clients": ("admin", "/clients"),
    "introspect": ("admin", "/oauth2/introspect"),
    "login_sessions": ("admin", "/oauth2/auth/sessions/login"),
    "userinfo": ("public", "/userinfo"),
}


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _env(prefix: str, key: str, default: str | None = None) -> str | None:
    value = os.getenv(f"{prefix}{key}")
    if value:
        return value
    legacy = _LEGACY_KEYS.get(key)
    if legacy and os.getenv(legacy):
        return os.getenv(legacy)
    return default


def _parse_timeout(raw: str | None) -> Timeout:
    """``"10"`` -> 10.0, ``"5,20"`` -> (5.0, 20.0)."""
    if not raw:
        return DEFAULT_TIMEOUT
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    if len(parts) == 1:
        return float(parts[0])
    if len(parts) == 2:
        return float(parts[0]), float(parts[1])
    raise ValueError(f"invalid timeout {raw!r}; expected '<seconds>' or '<connect>,<read>'")


@dataclass(frozen=True, slots=True)
class HydraEndpoints:
    """Absolute URLs of every endpoint the operations talk to."""

    login_request: str
    login_accept: str
    login_reject: str
    consent_request: str
    consent_accept: str
    consent_reject: str
    logout_request: str
    logout_accept: str
    clients: str
    introspect: str
    login_sessions: str
    userinfo: str

    @classmethod
    def from_urls(
        cls,
        admin_url: str,
        public_url: str | None = None,
        **overrides: str,
    ) -> "HydraEndpoints":
        """Build the default layout under *admin_url* / *public_url*."""
        if not admin_url:
            raise ValueError("admin_url is required")
        unknown = set(overrides) - set(_ENDPOINT_PATHS)
        if unknown:
            raise ValueError(f"unknown endpoint(s): {', '.join(sorted(unknown))}")
        bases = {
            "admin": admin_url.rstrip("/"),
            "public": (public_url or admin_url).rstrip("/"),
        }
        urls = {
            name: overrides.get(name) or f"{bases[base]}{path}"
            for name, (base, path) in _ENDPOINT_PATHS.items()
        }
        return cls(**urls)


@dataclass(frozen=True, slots=True)
class HydraConfig:
    """Everything needed to build a credentialed transport and endpoint map."""

    admin_url: str
    public_url: str = ""
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    token_url: str = ""
    scopes: tuple[str, ...] = ("openid",)
    audience: str = "hydra"
    timeout: Timeout = DEFAULT_TIMEOUT
    challenge_auth: bool = True
    endpoints: HydraEndpoints | None = None

    @property
    def has_client(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @classmethod
    def from_env(cls, prefix: str = "HYDRA_") -> "HydraConfig":
        """Load configuration from environment variables."""
        public_url = _env(prefix, "URL", "") or ""
        admin_url = _env(prefix, "ADMIN_URL", public_url) or ""
        if not admin_url:
            raise ValueError(f"{prefix}ADMIN_URL or {prefix}URL must be set")

        overrides = {
            name: os.environ[f"{prefix}{name.upper()}_URL"]
            for name in _ENDPOINT_PATHS
            if os.getenv(f"{prefix}{name.upper()}_URL")
        }
        endpoints = HydraEndpoints.from_urls(admin_url, public_url or admin_url, **overrides)

        scopes_raw = _env(prefix, "SCOPES", "openid") or ""
        challenge_auth_raw = os.getenv(f"{prefix}CHALLENGE_AUTH")

        cfg = cls(
            admin_url=admin_url,
            public_url=public_url,
            client_id=_env(prefix, "CLIENT_ID", "") or "",
            client_secret=_env(prefix, "CLIENT_SECRET", "") or "",
            token_url=_env(prefix, "TOKEN_URL", "") or "",
            scopes=tuple(scopes_raw.replace(",", " ").split()),
            audience=_env(prefix, "AUDIENCE", "hydra") or "",
            timeout=_parse_timeout(os.getenv(f"{prefix}TIMEOUT")),
            challenge_auth=True if challenge_auth_raw is None else _truthy(challenge_auth_raw),
            endpoints=endpoints,
        )
        if not cfg.has_client:
            logger.info(
                "No %sCLIENT_ID/%sCLIENT_SECRET set - requests will be sent without credentials",
                prefix,
                prefix,
            )
        return cfg

    def resolved_endpoints(self) -> HydraEndpoints:
        return self.endpoints or HydraEndpoints.from_urls(self.admin_url, self.public_url or None)


def build_transport(
    config: HydraConfig,
    *,
    session: requests.Session | None = None,
) -> RequestsTransport:
    """Return a transport that attaches client-credentials tokens when configured.

    Without ``token_url`` the token endpoint is discovered from the public
    (issuer) URL.
    """
    http = session or requests.Session()
    auth = None
    if config.has_client:
        token_url = config.token_url or discover_token_endpoint(
            config.public_url or config.admin_url, session=http, timeout=config.timeout
        )
        auth = ClientCredentialsAuth(
            token_url,
            config.client_id,
            config.client_secret,
            scopes=config.scopes,
            audience=config.audience or None,
            session=http,
            timeout=config.timeout,
        )
    return RequestsTransport(http, auth=auth, timeout=config.timeout)
