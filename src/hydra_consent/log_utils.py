"""Structured logging helpers for hydra-consent.

This module purposefully restricts **which** contextual attributes are attached
to log records in order to avoid accidentally leaking secrets.  The adapter
ONLY injects the following *non-sensitive* fields:

- ``flow``           – Challenge flow (``login``, ``consent``, ``logout``)
- ``challenge``      – The challenge identifier (first 6 chars kept)
- ``correlation_id`` – Request identifier supplied by the relying application

Usage
-----
>>> from hydra_consent.log_utils import get_hydra_logger
>>> log = get_hydra_logger(flow="consent", challenge="8c2f0e0b6a1d4f", correlation_id="req-1")
>>> log.info("Fetched consent request")
INFO hydra-consent.challenge flow=consent challenge=8c2f0e ...

The adapter is a thin wrapper around :class:`logging.LoggerAdapter`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping

_CHALLENGE_PREFIX_LEN = 6


def mask_sensitive(value: str | None, keep: int = 4) -> str:
    """Return *value* with everything but the first *keep* characters masked."""
    if not value:
        return "<empty>"
    if len(value) <= keep:
        return "*" * len(value)
    return f"{value[:keep]}{'*' * 4}"


class _HydraLoggerAdapter(logging.LoggerAdapter):
    """Inject whitelisted challenge context into log records."""

    extra_keys = ("flow", "challenge", "correlation_id")

    def __init__(self, logger: logging.Logger, extra: Mapping[str, Any] | None = None):
        extra_clean: MutableMapping[str, Any] = {}
        for k in self.extra_keys:
            if not extra or extra.get(k) is None:
                continue
            if k == "challenge":
                # challenges are bearer-like; never log them whole
                extra_clean[k] = str(extra[k])[:_CHALLENGE_PREFIX_LEN]
            else:
                extra_clean[k] = extra[k]
        super().__init__(logger, extra_clean)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]):
        if "extra" not in kwargs or kwargs["extra"] is None:
            kwargs["extra"] = {}
        # merge but do not overwrite call-site provided extras
        for k, v in self.extra.items():
            kwargs["extra"].setdefault(k, v)
        return msg, kwargs


def get_hydra_logger(
    *,
    base_logger_name: str = "hydra-consent.challenge",
    flow: str | None = None,
    challenge: str | None = None,
    correlation_id: str | None = None,
) -> logging.LoggerAdapter:
    """Return a LoggerAdapter pre-filled with challenge context."""
    logger = logging.getLogger(base_logger_name)
    return _HydraLoggerAdapter(
        logger,
        {"flow": flow, "challenge": challenge, "correlation_id": correlation_id},
    )
