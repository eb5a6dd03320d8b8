"""Sentry SDK integration for the plugin server.

Captures unhandled exceptions without leaking secrets.

Key decisions:
  - `send_default_pii=False`: no user data sent by default.
  - `before_send` hook redacts any event field whose key contains a
    sensitive keyword, and every value of an execute request's `env`
    overlay (hosts forward arbitrary environment variables, tokens included).
  - No-op when the DSN is empty.
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

logger = logging.getLogger(__name__)

# Keywords that indicate a value should be redacted from Sentry events
_SENSITIVE_KEYS = frozenset({"api_key", "secret", "password", "token", "dsn"})

# Request fields whose whole value is redacted
_REDACTED_FIELDS = frozenset({"env"})

REDACTED = "[REDACTED]"


def _scrub_secrets(event: dict[str, Any], hint: Any) -> dict[str, Any]:
    """Sentry before_send hook: redact sensitive values in extra and request data."""
    _scrub_dict(event.get("extra", {}))
    request_data = event.get("request", {}).get("data", {})
    if isinstance(request_data, dict):
        _scrub_dict(request_data)
    return event


def _scrub_dict(d: dict[str, Any]) -> None:
    """Recursively redact sensitive values in-place."""
    for key in list(d.keys()):
        lowered = key.lower()
        if lowered in _REDACTED_FIELDS and isinstance(d[key], dict):
            d[key] = {name: REDACTED for name in d[key]}
        elif any(sensitive in lowered for sensitive in _SENSITIVE_KEYS):
            d[key] = REDACTED
        elif isinstance(d[key], dict):
            _scrub_dict(d[key])


def init_sentry(dsn: str, environment: str = "development") -> bool:
    """Initialise the Sentry SDK. Returns False when `dsn` is empty."""
    if not dsn or not dsn.strip():
        logger.debug("Sentry DSN not configured; skipping initialisation")
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=[FastApiIntegration()],
        traces_sample_rate=0.0,
        send_default_pii=False,
        before_send=_scrub_secrets,
    )
    logger.info("Sentry initialised (environment=%s)", environment)
    return True
