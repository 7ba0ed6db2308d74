"""Shared fixtures: in-memory Authorization Server and scripted transports."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import unquote

import pytest

from hydra_consent.config import HydraEndpoints
from hydra_consent.transport import RawResponse

ADMIN_URL = "http://hydra.test:4445"
PUBLIC_URL = "http://hydra.test:4444"


def _json(status: int, payload: Any) -> RawResponse:
    return RawResponse(body=json.dumps(payload).encode("utf-8"), status_code=status)


def _error(status: int, error: str, description: str = "") -> RawResponse:
    return _json(status, {"error": error, "error_description": description, "status_code": status})


@dataclass
class SentRequest:
    """One call recorded by a fake transport."""

    method: str
    url: str
    params: dict[str, str] | None
    json: Any
    data: dict[str, str] | None
    authenticated: bool
    timeout: Any


# --------------------------------------------------------------------------- #
# Scripted transport                                                          #
# --------------------------------------------------------------------------- #
@dataclass
class ScriptedTransport:
    """Return queued responses in order and record every request."""

    responses: list[RawResponse] = field(default_factory=list)
    sent: list[SentRequest] = field(default_factory=list)

    def queue(self, status: int, body: bytes | str | Any = b"") -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.responses.append(RawResponse(body=body, status_code=status))

    def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        data: Mapping[str, str] | None = None,
        authenticated: bool = True,
        timeout: Any = None,
    ) -> RawResponse:
        self.sent.append(
            SentRequest(
                method,
                url,
                dict(params) if params else None,
                json,
                dict(data) if data else None,
                authenticated,
                timeout,
            )
        )
        if not self.responses:
            raise AssertionError(f"unexpected request {method} {url}")
        return self.responses.pop(0)


# --------------------------------------------------------------------------- #
# Fake Authorization Server                                                   #
# --------------------------------------------------------------------------- #
class FakeHydra:
    """Tiny stateful stand-in for the Hydra admin/public API.

    Challenges follow ``issued -> resolved``; any access after resolution
    yields 404, like the real server.
    """

    def __init__(self) -> None:
        self.endpoints = HydraEndpoints.from_urls(ADMIN_URL, PUBLIC_URL)
        self._routes = {
            getattr(self.endpoints, name): name for name in self.endpoints.__slots__
        }
        self.challenges: dict[str, dict[str, Any]] = {}
        self.decisions: dict[str, tuple[str, dict[str, Any]]] = {}
        self.clients: dict[str, dict[str, Any]] = {}
        self.tokens: dict[str, dict[str, Any]] = {}
        self.sessions: dict[str, int] = {}
        self.userinfo: dict[str, Any] = {"sub": "service-account"}
        self.sent: list[SentRequest] = []

    # ----- seeding helpers ------------------------------------------------- #
    def issue(self, flow: str, **fields: Any) -> str:
        challenge = uuid.uuid4().hex
        request = {"challenge": challenge, **fields}
        self.challenges[challenge] = {"flow": flow, "request": request, "resolved": False}
        return challenge

    def add_token(self, token: str, **claims: Any) -> None:
        self.tokens[token] = claims

    # ----- transport ------------------------------------------------------- #
    def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        data: Mapping[str, str] | None = None,
        authenticated: bool = True,
        timeout: Any = None,
    ) -> RawResponse:
        params = dict(params or {})
        self.sent.append(
            SentRequest(method, url, params or None, json, dict(data) if data else None, authenticated, timeout)
        )
        name = self._routes.get(url)
        if name is None and url.startswith(self.endpoints.clients + "/"):
            return self._client_item(method, unquote(url[len(self.endpoints.clients) + 1 :]), json)
        if name is None:
            return _error(404, "not_found", url)

        flow, _, action = name.partition("_")
        if flow in ("login", "consent", "logout") and action != "sessions":
            return self._challenge(flow, action, method, params, json)
        return getattr(self, f"_{name}")(method, params, json, data)

    # ----- challenge flows ------------------------------------------------- #
    def _challenge(
        self, flow: str, action: str, method: str, params: dict[str, str], body: Any
    ) -> RawResponse:
        challenge = params.get(f"{flow}_challenge", "")
        entry = self.challenges.get(challenge)
        if entry is None or entry["flow"] != flow or entry["resolved"]:
            return _error(404, "not_found", "challenge does not exist or was already resolved")
        if action == "request":
            if method != "GET":
                return _error(405, "method_not_allowed")
            return _json(200, entry["request"])
        if method != "PUT" or not isinstance(body, dict):
            return _error(400, "invalid_request", "expected a JSON object")
        if flow == "login" and action == "accept" and not body.get("subject"):
            return _error(400, "invalid_request", "subject is required")
        entry["resolved"] = True
        self.decisions[challenge] = (action, body)
        return _json(200, {"redirect_to": f"{PUBLIC_URL}/oauth2/auth?{flow}_verifier={challenge[:8]}"})

    # ----- client registry ------------------------------------------------- #
    def _clients(self, method: str, params: dict[str, str], body: Any, data: Any) -> RawResponse:
        if method == "GET":
            items = list(self.clients.values())
            offset = int(params.get("offset", 0))
            limit = int(params.get("limit", len(items) or 1))
            return _json(200, items[offset : offset + limit])
        if method != "POST":
            return _error(405, "method_not_allowed")
        record = dict(body)
        record.setdefault("client_id", uuid.uuid4().hex)
        record.setdefault("client_secret", uuid.uuid4().hex)
        if record["client_id"] in self.clients:
            return _error(409, "conflict")
        self.clients[record["client_id"]] = record
        return _json(201, record)

    def _client_item(self, method: str, client_id: str, body: Any) -> RawResponse:
        if client_id not in self.clients:
            return _error(404, "not_found", "unknown client")
        if method == "GET":
            stored = dict(self.clients[client_id])
            stored.pop("client_secret", None)
            return _json(200, stored)
        if method == "PUT":
            # full replacement: nothing of the old record survives except the id
            record = dict(body)
            record["client_id"] = client_id
            self.clients[client_id] = record
            return _json(200, record)
        if method == "DELETE":
            del self.clients[client_id]
            return RawResponse(body=b"", status_code=204)
        return _error(405, "method_not_allowed")

    # ----- tokens & sessions ----------------------------------------------- #
    def _introspect(self, method: str, params: dict[str, str], body: Any, data: Any) -> RawResponse:
        token = (data or {}).get("token", "")
        claims = self.tokens.get(token)
        if claims is None:
            return _json(200, {"active": False})
        return _json(200, {"active": True, **claims})

    def _userinfo(self, method: str, params: dict[str, str], body: Any, data: Any) -> RawResponse:
        return _json(200, self.userinfo)

    def _login_sessions(self, method: str, params: dict[str, str], body: Any, data: Any) -> RawResponse:
        subject = params.get("subject", "")
        if method != "DELETE" or not subject:
            return _error(400, "invalid_request", "subject is required")
        self.sessions.pop(subject, None)
        return RawResponse(body=b"", status_code=204)


@pytest.fixture()
def hydra() -> FakeHydra:
    return FakeHydra()


@pytest.fixture()
def scripted() -> ScriptedTransport:
    return ScriptedTransport()
