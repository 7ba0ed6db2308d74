"""Administrative CRUD for OAuth2 client registrations.

``update_client`` is a full replacement, never a merge: every field left unset
on the :class:`ClientRegistration` is cleared on the server.  Read the current
registration first and resend it with your changes to preserve fields.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from hydra_consent.decoder import decode
from hydra_consent.models import ClientRegistration
from hydra_consent.transport import Timeout, Transport

_LOG = logging.getLogger("hydra-consent.clients")


def _client_url(base_url: str, client_id: str) -> str:
    if not client_id:
        raise ValueError("client_id is required")
    return f"{base_url.rstrip('/')}/{quote(client_id, safe='')}"


def _registration_list(payload: Any) -> list[ClientRegistration]:
    if not isinstance(payload, list):
        raise TypeError("expected a JSON array of clients")
    return [ClientRegistration.from_dict(item) for item in payload]


def create_client(
    transport: Transport,
    url: str,
    registration: ClientRegistration,
    *,
    timeout: Timeout = None,
) -> ClientRegistration:
    """Register a client; the server assigns ``client_id``/``client_secret`` if unset.

    The returned record is the only place the generated secret is ever seen.
    """
    response = transport.send("POST", url.rstrip("/"), json=registration.to_payload(), timeout=timeout)
    created = decode(response, ClientRegistration.from_dict)
    _LOG.info("Created OAuth2 client client_id=%s", created.client_id)
    return created


def get_client(
    transport: Transport,
    url: str,
    client_id: str,
    *,
    timeout: Timeout = None,
) -> ClientRegistration:
    response = transport.send("GET", _client_url(url, client_id), timeout=timeout)
    return decode(response, ClientRegistration.from_dict)


def list_clients(
    transport: Transport,
    url: str,
    *,
    limit: int | None = None,
    offset: int | None = None,
    timeout: Timeout = None,
) -> list[ClientRegistration]:
    """Return one page of registered clients."""
    params: dict[str, str] = {}
    if limit is not None:
        params["limit"] = str(limit)
    if offset is not None:
        params["offset"] = str(offset)
    response = transport.send("GET", url.rstrip("/"), params=params or None, timeout=timeout)
    return decode(response, _registration_list)


def update_client(
    transport: Transport,
    url: str,
    client_id: str,
    registration: ClientRegistration,
    *,
    timeout: Timeout = None,
) -> ClientRegistration:
    """Replace the registration of *client_id* with *registration*."""
    if registration.client_id and registration.client_id != client_id:
        raise ValueError("client_id is immutable and must match the registration")
    response = transport.send(
        "PUT", _client_url(url, client_id), json=registration.to_payload(), timeout=timeout
    )
    updated = decode(response, ClientRegistration.from_dict)
    _LOG.info("Replaced OAuth2 client client_id=%s", client_id)
    return updated


def delete_client(
    transport: Transport,
    url: str,
    client_id: str,
    *,
    timeout: Timeout = None,
) -> None:
    """Delete *client_id*.

    Deleting an unknown client raises ``NotFoundError``; callers that want
    idempotent deletes should catch it.
    """
    response = transport.send("DELETE", _client_url(url, client_id), timeout=timeout)
    decode(response, None)
    _LOG.info("Deleted OAuth2 client client_id=%s", client_id)
