"""Typed, immutable records exchanged with the Authorization Server.

Read-side records are built with ``from_dict`` from a decoded JSON object and
raise ``KeyError``/``TypeError``/``ValueError`` on a malformed payload (the
decoder turns those into :class:`~hydra_consent.errors.DecodeError`).
Write-side records render their exact JSON body with ``to_payload``.

There is exactly one schema per entity; it follows the admin API of Hydra
v1.x and is versioned by :data:`SCHEMA_VERSION`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Final, Iterable, Mapping

from hydra_consent.clock import Clock, default_clock

SCHEMA_VERSION: Final[str] = "hydra-admin/v1"


# --------------------------------------------------------------------------- #
# helpers                                                                     #
# --------------------------------------------------------------------------- #
def _as_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _str(payload: Mapping[str, Any], key: str, default: str = "") -> str:
    value = payload.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def _bool(payload: Mapping[str, Any], key: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean")
    return value


def _int(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number")
    return int(value)


def _str_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise TypeError(f"{key} must be a list of strings")
    return tuple(value)


def _str_map(payload: Mapping[str, Any], key: str) -> dict[str, str]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{key} must be an object")
    bad = sorted(str(k) for k, v in value.items() if not isinstance(v, str))
    if bad:
        raise TypeError(f"{key} values must be strings (offending keys: {', '.join(bad)})")
    return dict(value)


def _unique(values: Iterable[str]) -> list[str]:
    """Drop duplicates, keep first-seen order."""
    return list(dict.fromkeys(values))


# --------------------------------------------------------------------------- #
# read side: pending challenges                                               #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class OAuth2ClientRef:
    """The ``client`` object embedded in login and consent requests."""

    client_id: str = ""
    client_name: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, payload: Any) -> "OAuth2ClientRef":
        if payload is None:
            return cls()
        data = _as_object(payload)
        # never keep the secret around, even if an admin endpoint echoes it
        raw = {k: v for k, v in data.items() if k != "client_secret"}
        return cls(
            client_id=_str(data, "client_id"),
            client_name=_str(data, "client_name"),
            raw=raw,
        )


@dataclass(frozen=True, slots=True)
class LoginRequest:
    """A pending login decision."""

    challenge: str
    skip: bool
    subject: str
    redirect_to: str | None = None
    request_url: str = ""
    session_id: str = ""
    requested_scope: tuple[str, ...] = ()
    requested_access_token_audience: tuple[str, ...] = ()
    client: OAuth2ClientRef = field(default_factory=OAuth2ClientRef)
    context: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Any) -> "LoginRequest":
        data = _as_object(payload)
        return cls(
            challenge=_str(data, "challenge"),
            skip=_bool(data, "skip"),
            subject=_str(data, "subject"),
            redirect_to=_str(data, "redirect_to") or None,
            request_url=_str(data, "request_url"),
            session_id=_str(data, "session_id"),
            requested_scope=_str_list(data, "requested_scope"),
            requested_access_token_audience=_str_list(data, "requested_access_token_audience"),
            client=OAuth2ClientRef.from_dict(data.get("client")),
            context=_str_map(data, "context"),
        )


@dataclass(frozen=True, slots=True)
class ConsentRequest:
    """A pending consent decision."""

    challenge: str
    subject: str
    skip: bool
    redirect_to: str = ""
    request_url: str = ""
    login_challenge: str = ""
    login_session_id: str = ""
    acr: str = ""
    requested_scope: tuple[str, ...] = ()
    requested_access_token_audience: tuple[str, ...] = ()
    client: OAuth2ClientRef = field(default_factory=OAuth2ClientRef)
    context: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Any) -> "ConsentRequest":
        data = _as_object(payload)
        return cls(
            challenge=_str(data, "challenge"),
            subject=_str(data, "subject"),
            skip=_bool(data, "skip"),
            redirect_to=_str(data, "redirect_to"),
            request_url=_str(data, "request_url"),
            login_challenge=_str(data, "login_challenge"),
            login_session_id=_str(data, "login_session_id"),
            acr=_str(data, "acr"),
            requested_scope=_str_list(data, "requested_scope"),
            requested_access_token_audience=_str_list(data, "requested_access_token_audience"),
            client=OAuth2ClientRef.from_dict(data.get("client")),
            context=_str_map(data, "context"),
        )


@dataclass(frozen=True, slots=True)
class LogoutRequest:
    """A pending logout acknowledgement."""

    request_url: str = ""
    rp_initiated: bool = False
    sid: str = ""
    subject: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "LogoutRequest":
        data = _as_object(payload)
        return cls(
            request_url=_str(data, "request_url"),
            rp_initiated=_bool(data, "rp_initiated"),
            sid=_str(data, "sid"),
            subject=_str(data, "subject"),
        )


# --------------------------------------------------------------------------- #
# write side: decisions                                                       #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class LoginAccept:
    """Accept a login challenge on behalf of *subject*."""

    subject: str
    remember: bool = False
    remember_for: int = 0
    acr: str = ""
    context: Mapping[str, str] | None = None

    def to_payload(self) -> dict[str, Any]:
        if not self.subject:
            raise ValueError("subject is required to accept a login request")
        body: dict[str, Any] = {"subject": self.subject}
        if self.remember:
            body["remember"] = True
        if self.remember_for:
            body["remember_for"] = self.remember_for
        if self.acr:
            body["acr"] = self.acr
        if self.context:
            body["context"] = dict(self.context)
        return body


@dataclass(frozen=True, slots=True)
class ConsentSession:
    """Claims copied into the issued access token and ID token."""

    access_token: Mapping[str, Any] | None = None
    id_token: Mapping[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.access_token:
            body["access_token"] = dict(self.access_token)
        if self.id_token:
            body["id_token"] = dict(self.id_token)
        return body


@dataclass(frozen=True, slots=True)
class ConsentAccept:
    """Grant scopes and audiences for a consent challenge."""

    grant_scope: Iterable[str]
    subject: str = ""
    grant_access_token_audience: Iterable[str] = ()
    session: ConsentSession = field(default_factory=ConsentSession)
    remember: bool = False
    remember_for: int = 0

    @classmethod
    def from_request(
        cls,
        request: ConsentRequest,
        *,
        session: ConsentSession | None = None,
        remember: bool = False,
        remember_for: int = 0,
    ) -> "ConsentAccept":
        """Grant exactly what *request* asked for.

        This is the usual answer to a request with ``skip=True``, where the
        server already holds a remembered consent for the subject.
        """
        return cls(
            subject=request.subject,
            grant_scope=request.requested_scope,
            grant_access_token_audience=request.requested_access_token_audience,
            session=session or ConsentSession(),
            remember=remember,
            remember_for=remember_for,
        )

    def to_payload(self) -> dict[str, Any]:
        if isinstance(self.grant_scope, str):
            raise TypeError("grant_scope must be an iterable of scope names, not a string")
        body: dict[str, Any] = {}
        if self.subject:
            body["subject"] = self.subject
        body["grant_scope"] = _unique(self.grant_scope)
        audience = _unique(self.grant_access_token_audience)
        if audience:
            body["grant_access_token_audience"] = audience
        body["session"] = self.session.to_payload()
        body["remember"] = self.remember
        body["remember_for"] = self.remember_for
        return body


@dataclass(frozen=True, slots=True)
class LogoutAccept:
    """Logout is acknowledgement-only; the body is always ``{}``."""

    def to_payload(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True, slots=True)
class RejectDecision:
    """OAuth2 error tuple used to deny a login or consent request."""

    error: str = ""
    error_description: str = ""
    error_debug: str = ""
    error_hint: str = ""
    status_code: int = 0

    def to_payload(self, *, omit_empty: bool = True) -> dict[str, Any]:
        body: dict[str, Any] = {
            "error": self.error,
            "error_debug": self.error_debug,
            "error_description": self.error_description,
            "error_hint": self.error_hint,
            "status_code": self.status_code,
        }
        if omit_empty:
            body = {k: v for k, v in body.items() if v}
        return body


@dataclass(frozen=True, slots=True)
class RedirectOutcome:
    """Where the end-user's browser must be sent next."""

    redirect_to: str

    @classmethod
    def from_dict(cls, payload: Any) -> "RedirectOutcome":
        data = _as_object(payload)
        redirect_to = _str(data, "redirect_to")
        if not redirect_to:
            raise ValueError("response is missing redirect_to")
        return cls(redirect_to=redirect_to)


# --------------------------------------------------------------------------- #
# client registrations                                                        #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class ClientRegistration:
    """An OAuth2 client registration.

    ``client_id`` is assigned by the server on create and immutable afterwards.
    ``to_payload`` omits unset fields; since updates are full replacements, an
    omitted field is cleared on the server.
    """

    client_id: str | None = None
    client_name: str = ""
    client_secret: str | None = field(default=None, repr=False)
    scope: str = ""
    grant_types: tuple[str, ...] = ()
    audience: tuple[str, ...] = ()
    response_types: tuple[str, ...] = ()
    redirect_uris: tuple[str, ...] = ()
    token_endpoint_auth_method: str = ""
    post_logout_redirect_uris: tuple[str, ...] = ()

    _LIST_FIELDS = (
        "grant_types",
        "audience",
        "response_types",
        "redirect_uris",
        "post_logout_redirect_uris",
    )

    @classmethod
    def from_dict(cls, payload: Any) -> "ClientRegistration":
        data = _as_object(payload)
        return cls(
            client_id=data.get("client_id") or None,
            client_name=_str(data, "client_name"),
            client_secret=data.get("client_secret") or None,
            scope=_str(data, "scope"),
            grant_types=_str_list(data, "grant_types"),
            audience=_str_list(data, "audience"),
            response_types=_str_list(data, "response_types"),
            redirect_uris=_str_list(data, "redirect_uris"),
            token_endpoint_auth_method=_str(data, "token_endpoint_auth_method"),
            post_logout_redirect_uris=_str_list(data, "post_logout_redirect_uris"),
        )

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for name in ("client_id", "client_name", "client_secret", "scope", "token_endpoint_auth_method"):
            value = getattr(self, name)
            if value:
                body[name] = value
        for name in self._LIST_FIELDS:
            value = getattr(self, name)
            if isinstance(value, str):
                raise TypeError(f"{name} must be a sequence of strings, not a string")
            if value:
                body[name] = list(value)
        return body


# --------------------------------------------------------------------------- #
# introspection & sessions                                                    #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class IntrospectionResult:
    """Verdict for a token. ``active=False`` is a normal answer, not an error."""

    active: bool
    aud: tuple[str, ...] = ()
    client_id: str = ""
    exp: int = 0
    iat: int = 0
    iss: str = ""
    nbf: int = 0
    obfuscated_subject: str = ""
    scope: str = ""
    sub: str = ""
    token_type: str = ""
    username: str = ""
    ext: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Any) -> "IntrospectionResult":
        data = _as_object(payload)
        if "active" not in data:
            raise KeyError("active")
        ext = data.get("ext") or {}
        return cls(
            active=_bool(data, "active"),
            aud=_str_list(data, "aud"),
            client_id=_str(data, "client_id"),
            exp=_int(data, "exp"),
            iat=_int(data, "iat"),
            iss=_str(data, "iss"),
            nbf=_int(data, "nbf"),
            obfuscated_subject=_str(data, "obfuscated_subject"),
            scope=_str(data, "scope"),
            sub=_str(data, "sub"),
            token_type=_str(data, "token_type"),
            username=_str(data, "username"),
            ext=dict(_as_object(ext)),
        )

    @property
    def scopes(self) -> tuple[str, ...]:
        """Granted scopes as a tuple (the wire format is space separated)."""
        return tuple(self.scope.split())

    def is_expired(self, *, clock: Clock = default_clock) -> bool:
        """Return *True* if ``exp`` is set and lies in the past."""
        return bool(self.exp) and clock() >= self.exp


@dataclass(frozen=True, slots=True)
class UserInfo:
    """OIDC user info; only ``sub`` is guaranteed."""

    sub: str
    claims: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Any) -> "UserInfo":
        data = _as_object(payload)
        sub = _str(data, "sub")
        if not sub:
            raise ValueError("user info is missing sub")
        return cls(sub=sub, claims={k: v for k, v in data.items() if k != "sub"})


@dataclass(frozen=True, slots=True)
class SessionRevocationOutcome:
    """Body returned when revoking login sessions (often empty)."""

    debug: str = ""
    error: str = ""
    error_description: str = ""
    status_code: int = 0

    @classmethod
    def from_dict(cls, payload: Any) -> "SessionRevocationOutcome":
        data = _as_object(payload)
        return cls(
            debug=_str(data, "debug"),
            error=_str(data, "error"),
            error_description=_str(data, "error_description"),
            status_code=_int(data, "status_code"),
        )
