"""HydraClient – façade binding a transport to an endpoint layout.

Relying applications usually hold one :class:`HydraClient` for the lifetime of
the process and call the thin methods below from their HTTP handlers.  Each
method delegates to the module-level operation of the same name, so tests can
exercise either layer.
"""

from __future__ import annotations

from hydra_consent import clients, consent, login, logout, oauth2
from hydra_consent.config import HydraConfig, HydraEndpoints, build_transport
from hydra_consent.models import (
    ClientRegistration,
    ConsentAccept,
    ConsentRequest,
    IntrospectionResult,
    LoginAccept,
    LoginRequest,
    LogoutAccept,
    LogoutRequest,
    RedirectOutcome,
    RejectDecision,
    SessionRevocationOutcome,
    UserInfo,
)
from hydra_consent.transport import Timeout, Transport


class HydraClient:
    """Application-facing entry point for every operation."""

    def __init__(
        self,
        transport: Transport,
        endpoints: HydraEndpoints,
        *,
        challenge_auth: bool = True,
    ) -> None:
        self.transport = transport
        self.endpoints = endpoints
        # Whether the challenge endpoints receive bearer credentials.
        self.challenge_auth = challenge_auth

    @classmethod
    def from_config(cls, config: HydraConfig) -> "HydraClient":
        return cls(
            build_transport(config),
            config.resolved_endpoints(),
            challenge_auth=config.challenge_auth,
        )

    # ------------------------------------------------------------------ #
    # Login                                                              #
    # ------------------------------------------------------------------ #
    def get_login_request(
        self, challenge: str, *, timeout: Timeout = None, correlation_id: str | None = None
    ) -> LoginRequest:
        return login.get_login_request(
            self.transport,
            self.endpoints.login_request,
            challenge,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    def accept_login(
        self,
        challenge: str,
        decision: LoginAccept,
        *,
        timeout: Timeout = None,
        correlation_id: str | None = None,
    ) -> RedirectOutcome:
        return login.accept_login(
            self.transport,
            self.endpoints.login_accept,
            challenge,
            decision,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    def reject_login(
        self,
        challenge: str,
        decision: RejectDecision,
        *,
        timeout: Timeout = None,
        correlation_id: str | None = None,
    ) -> RedirectOutcome:
        return login.reject_login(
            self.transport,
            self.endpoints.login_reject,
            challenge,
            decision,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------ #
    # Consent                                                            #
    # ------------------------------------------------------------------ #
    def get_consent_request(
        self, challenge: str, *, timeout: Timeout = None, correlation_id: str | None = None
    ) -> ConsentRequest:
        return consent.get_consent_request(
            self.transport,
            self.endpoints.consent_request,
            challenge,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    def accept_consent(
        self,
        challenge: str,
        decision: ConsentAccept,
        *,
        timeout: Timeout = None,
        correlation_id: str | None = None,
    ) -> RedirectOutcome:
        return consent.accept_consent(
            self.transport,
            self.endpoints.consent_accept,
            challenge,
            decision,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    def reject_consent(
        self,
        challenge: str,
        decision: RejectDecision,
        *,
        timeout: Timeout = None,
        correlation_id: str | None = None,
    ) -> RedirectOutcome:
        return consent.reject_consent(
            self.transport,
            self.endpoints.consent_reject,
            challenge,
            decision,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------ #
    # Logout                                                             #
    # ------------------------------------------------------------------ #
    def get_logout_request(
        self, challenge: str, *, timeout: Timeout = None, correlation_id: str | None = None
    ) -> LogoutRequest:
        return logout.get_logout_request(
            self.transport,
            self.endpoints.logout_request,
            challenge,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    def accept_logout(
        self,
        challenge: str,
        decision: LogoutAccept | None = None,
        *,
        timeout: Timeout = None,
        correlation_id: str | None = None,
    ) -> RedirectOutcome:
        return logout.accept_logout(
            self.transport,
            self.endpoints.logout_accept,
            challenge,
            decision,
            authenticated=self.challenge_auth,
            timeout=timeout,
            correlation_id=correlation_id,
        )

    # ------------------------------------------------------------------ #
    # Client registry                                                    #
    # ------------------------------------------------------------------ #
    def create_client(
        self, registration: ClientRegistration, *, timeout: Timeout = None
    ) -> ClientRegistration:
        return clients.create_client(self.transport, self.endpoints.clients, registration, timeout=timeout)

    def get_client(self, client_id: str, *, timeout: Timeout = None) -> ClientRegistration:
        return clients.get_client(self.transport, self.endpoints.clients, client_id, timeout=timeout)

    def list_clients(
        self, *, limit: int | None = None, offset: int | None = None, timeout: Timeout = None
    ) -> list[ClientRegistration]:
        return clients.list_clients(
            self.transport, self.endpoints.clients, limit=limit, offset=offset, timeout=timeout
        )

    def update_client(
        self, client_id: str, registration: ClientRegistration, *, timeout: Timeout = None
    ) -> ClientRegistration:
        return clients.update_client(
            self.transport, self.endpoints.clients, client_id, registration, timeout=timeout
        )

    def delete_client(self, client_id: str, *, timeout: Timeout = None) -> None:
        clients.delete_client(self.transport, self.endpoints.clients, client_id, timeout=timeout)

    # ------------------------------------------------------------------ #
    # Tokens & sessions                                                  #
    # ------------------------------------------------------------------ #
    def introspect_token(
        self, token: str, scope: str | None = None, *, timeout: Timeout = None
    ) -> IntrospectionResult:
        return oauth2.introspect_token(
            self.transport, self.endpoints.introspect, token, scope, timeout=timeout
        )

    def get_user_info(self, *, timeout: Timeout = None) -> UserInfo:
        return oauth2.get_user_info(self.transport, self.endpoints.userinfo, timeout=timeout)

    def delete_login_sessions(
        self, subject: str, *, timeout: Timeout = None
    ) -> SessionRevocationOutcome:
        return oauth2.delete_login_sessions(
            self.transport, self.endpoints.login_sessions, subject, timeout=timeout
        )
