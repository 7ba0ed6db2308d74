"""HTTP transport for talking to the Authorization Server.

Every operation in this package receives a :class:`Transport` explicitly; there
is no module-level HTTP handle.  The shipped implementation wraps a
:class:`requests.Session` and, optionally, a :class:`ClientCredentialsAuth`
hook that attaches a bearer token obtained through the client-credentials
grant.

No retries happen here.  Every ``requests`` failure (DNS, TLS, connection
reset, per-call timeout) surfaces as :class:`~hydra_consent.errors.TransportError`
with the underlying exception chained.

SECURITY NOTE
-------------
Access tokens and client secrets are never logged.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Final, Iterable, Mapping, Protocol, Tuple, Union, runtime_checkable

import requests
from requests.auth import AuthBase, HTTPBasicAuth

from hydra_consent.clock import Clock, default_clock
from hydra_consent.errors import TokenError, TransportError
from hydra_consent.log_utils import mask_sensitive

_LOG = logging.getLogger("hydra-consent.transport")

Timeout = Union[float, Tuple[float, float], None]

DEFAULT_TIMEOUT: Final[tuple[float, float]] = (5, 20)
_WELL_KNOWN: Final[str] = "/.well-known/openid-configuration"


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Undecoded HTTP answer: body bytes plus status code."""

    body: bytes
    status_code: int


@runtime_checkable
class Transport(Protocol):
    """Minimal HTTP contract every operation is built on."""

    def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        data: Mapping[str, str] | None = None,
        authenticated: bool = True,
        timeout: Timeout = None,
    ) -> RawResponse: ...


# --------------------------------------------------------------------------- #
# Client-credentials bearer auth                                              #
# --------------------------------------------------------------------------- #
class ClientCredentialsAuth(AuthBase):
    """Attach a client-credentials bearer token to outgoing requests.

    The token is cached until ``expires_in - grace_seconds``.  Refresh is
    single-flight: concurrent callers block on a lock, re-check the cache and
    reuse the token fetched by whoever got there first.
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        *,
        scopes: Iterable[str] = ("openid",),
        audience: str | None = None,
        session: requests.Session | None = None,
        timeout: Timeout = DEFAULT_TIMEOUT,
        clock: Clock = default_clock,
        grace_seconds: int = 30,
    ) -> None:
        if not token_url or not client_id:
            raise ValueError("token_url and client_id are required")
        self.token_url = token_url
        self.client_id = client_id
        self._client_secret = client_secret
        self.scopes = tuple(scopes)
        self.audience = audience
        self._session = session or requests.Session()
        self._timeout = timeout
        self._clock = clock
        self._grace_seconds = grace_seconds
        self._lock = threading.Lock()
        self._access_token: str | None = None
        self._expires_at: float = 0.0

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.get_token()}"
        return r

    def _is_fresh(self) -> bool:
        return self._access_token is not None and (
            self._expires_at - self._clock()
        ) > self._grace_seconds

    def get_token(self, timeout: Timeout = None) -> str:
        """Return a valid access token, fetching a new one when needed.

        *timeout* bounds the token request; ``None`` falls back to the timeout
        given at construction.
        """
        if self._is_fresh():
            return self._access_token  # type: ignore[return-value]
        with self._lock:
            # Another thread may have refreshed while we waited.
            if self._is_fresh():
                return self._access_token  # type: ignore[return-value]
            self._fetch_token(timeout if timeout is not None else self._timeout)
            return self._access_token  # type: ignore[return-value]

    def invalidate(self) -> None:
        """Forget the cached token so the next request fetches a new one."""
        with self._lock:
            self._access_token = None
            self._expires_at = 0.0

    def _fetch_token(self, timeout: Timeout) -> None:
        payload: dict[str, str] = {"grant_type": "client_credentials"}
        if self.scopes:
            payload["scope"] = " ".join(self.scopes)
        if self.audience:
            payload["audience"] = self.audience

        try:
            resp = self._session.post(
                self.token_url,
                data=payload,
                auth=HTTPBasicAuth(self.client_id, self._client_secret),
                timeout=timeout,
            )
        except requests.RequestException as exc:
            raise TokenError(
                f"Token request failed: {exc}", method="POST", url=self.token_url
            ) from exc

        if not resp.ok:
            raise TokenError(
                f"Token endpoint returned {resp.status_code}: {resp.text[:200]}",
                method="POST",
                url=self.token_url,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise TokenError("Token endpoint returned malformed JSON", url=self.token_url) from exc

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise TokenError("Token response missing access_token", url=self.token_url)

        raw_expiry = data.get("expires_in", 3600)
        if isinstance(raw_expiry, bool) or not isinstance(raw_expiry, (int, float)):
            raise TokenError(
                f"Token response has non-numeric expires_in: {raw_expiry!r}", url=self.token_url
            )
        expires_in = int(raw_expiry)
        self._access_token = access_token
        self._expires_at = self._clock() + expires_in
        _LOG.info(
            "Obtained client-credentials token for client_id=%s (expires in %ss)",
            mask_sensitive(self.client_id, 6),
            expires_in,
        )


# --------------------------------------------------------------------------- #
# requests-based transport                                                    #
# --------------------------------------------------------------------------- #
class RequestsTransport:
    """:class:`Transport` implementation on top of :class:`requests.Session`."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        auth: AuthBase | None = None,
        timeout: Timeout = DEFAULT_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.auth = auth
        self.timeout = timeout

    def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        data: Mapping[str, str] | None = None,
        authenticated: bool = True,
        timeout: Timeout = None,
    ) -> RawResponse:
        kwargs: dict[str, Any] = {
            "params": dict(params) if params else None,
            "headers": {"Accept": "application/json"},
            "timeout": timeout if timeout is not None else self.timeout,
        }
        if json is not None:
            kwargs["json"] = json
        if data is not None:
            kwargs["data"] = dict(data)
        if authenticated and self.auth is not None:
            if isinstance(self.auth, ClientCredentialsAuth):
                # refresh up front so a per-call timeout also bounds the token request
                self.auth.get_token(timeout)
            kwargs["auth"] = self.auth

        _LOG.debug("%s %s authenticated=%s", method, url, authenticated and self.auth is not None)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", method=method, url=url) from exc

        _LOG.debug("%s %s -> %s", method, url, resp.status_code)
        return RawResponse(body=resp.content or b"", status_code=resp.status_code)

    def close(self) -> None:
        self.session.close()


# --------------------------------------------------------------------------- #
# OIDC discovery                                                              #
# --------------------------------------------------------------------------- #
def discover_token_endpoint(
    issuer_url: str,
    *,
    session: requests.Session | None = None,
    timeout: Timeout = DEFAULT_TIMEOUT,
) -> str:
    """Return the ``token_endpoint`` advertised by *issuer_url*."""
    if not issuer_url:
        raise ValueError("issuer_url is required for discovery")
    url = issuer_url.rstrip("/") + _WELL_KNOWN
    http = session or requests.Session()
    try:
        resp = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise TransportError(f"Discovery request failed: {exc}", method="GET", url=url) from exc

    if not resp.ok:
        raise TransportError(
            f"Discovery endpoint returned {resp.status_code}", method="GET", url=url
        )
    try:
        metadata = resp.json()
    except ValueError as exc:
        raise TransportError("Discovery document is not valid JSON", url=url) from exc

    token_endpoint = metadata.get("token_endpoint") if isinstance(metadata, dict) else None
    if not token_endpoint:
        raise TransportError("Discovery document has no token_endpoint", url=url)
    _LOG.debug("Discovered token endpoint %s", token_endpoint)
    return token_endpoint
