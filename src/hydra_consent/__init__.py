"""Client side of the Hydra login / consent / logout challenge protocol.

The Authorization Server suspends each authentication attempt and hands the
relying application an opaque *challenge*.  This package fetches the pending
request behind a challenge, resolves it (accept or reject), administers OAuth2
client registrations and introspects tokens.  It never decides policy and
never persists anything.

Sub-modules
-----------
transport
    ``Transport`` protocol, ``requests`` implementation, client-credentials auth.
decoder
    Status-code policy turning raw responses into records or ``ProtocolError``.
challenge
    Generic fetch/resolve shared by the three flows.
login, consent, logout
    Per-flow operations.
clients
    OAuth2 client registration CRUD.
oauth2
    Introspection, user info and login-session revocation.
models
    Immutable dataclasses for every request and response body.
errors
    Exception taxonomy.
config
    Environment configuration and endpoint layout.
client
    ``HydraClient`` façade.
log_utils
    Structured logging helpers (thin wrapper around :pymod:`logging`).

All public objects are re-exported here for convenience.
"""

from __future__ import annotations

from .clock import Clock, ManualClock, default_clock  # noqa: F401
from .errors import (  # noqa: F401
    BadRequestError,
    DecodeError,
    ErrorKind,
    ForbiddenError,
    HydraError,
    NotFoundError,
    ProtocolError,
    ServerError,
    TokenError,
    TransportError,
    UnauthorizedError,
    UnhandledStatusError,
)
from .models import (  # noqa: F401
    SCHEMA_VERSION,
    ClientRegistration,
    ConsentAccept,
    ConsentRequest,
    ConsentSession,
    IntrospectionResult,
    LoginAccept,
    LoginRequest,
    LogoutAccept,
    LogoutRequest,
    OAuth2ClientRef,
    RedirectOutcome,
    RejectDecision,
    SessionRevocationOutcome,
    UserInfo,
)
from .transport import (  # noqa: F401
    ClientCredentialsAuth,
    RawResponse,
    RequestsTransport,
    Transport,
    discover_token_endpoint,
)
from .decoder import decode_response  # noqa: F401
from .challenge import CONSENT, LOGIN, LOGOUT, Flow, fetch_challenge, resolve_challenge  # noqa: F401
from .login import accept_login, get_login_request, reject_login  # noqa: F401
from .consent import accept_consent, get_consent_request, reject_consent  # noqa: F401
from .logout import accept_logout, get_logout_request  # noqa: F401
from .clients import create_client, delete_client, get_client, list_clients, update_client  # noqa: F401
from .oauth2 import delete_login_sessions, get_user_info, introspect_token  # noqa: F401
from .config import HydraConfig, HydraEndpoints, build_transport  # noqa: F401
from .client import HydraClient  # noqa: F401
from .log_utils import get_hydra_logger, mask_sensitive  # noqa: F401

__all__ = [
    # clock
    "Clock",
    "ManualClock",
    "default_clock",
    # errors
    "HydraError",
    "TransportError",
    "TokenError",
    "DecodeError",
    "ProtocolError",
    "ErrorKind",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "UnhandledStatusError",
    # models
    "SCHEMA_VERSION",
    "OAuth2ClientRef",
    "LoginRequest",
    "ConsentRequest",
    "LogoutRequest",
    "LoginAccept",
    "ConsentAccept",
    "ConsentSession",
    "LogoutAccept",
    "RejectDecision",
    "RedirectOutcome",
    "ClientRegistration",
    "IntrospectionResult",
    "UserInfo",
    "SessionRevocationOutcome",
    # transport
    "Transport",
    "RawResponse",
    "RequestsTransport",
    "ClientCredentialsAuth",
    "discover_token_endpoint",
    # decoding
    "decode_response",
    # challenge flows
    "Flow",
    "LOGIN",
    "CONSENT",
    "LOGOUT",
    "fetch_challenge",
    "resolve_challenge",
    "get_login_request",
    "accept_login",
    "reject_login",
    "get_consent_request",
    "accept_consent",
    "reject_consent",
    "get_logout_request",
    "accept_logout",
    # client registry
    "create_client",
    "get_client",
    "list_clients",
    "update_client",
    "delete_client",
    # tokens & sessions
    "introspect_token",
    "get_user_info",
    "delete_login_sessions",
    # configuration
    "HydraConfig",
    "HydraEndpoints",
    "build_transport",
    "HydraClient",
    # logging helpers
    "get_hydra_logger",
    "mask_sensitive",
]
