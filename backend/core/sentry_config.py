"""
Sentry SDK configuration.

Disabled unless SENTRY_DSN is set. Events never carry the session cookie,
Cookie/Authorization headers or user email/username.
"""

import os
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.loguru import LoguruIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from sentry_sdk.types import Event, Hint

_FILTERED = "[Filtered]"
_SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie"}
_QUIET_PATHS = {"/health", "/api/health"}


def _before_send(event: Event, hint: Hint) -> Event | None:
    """
    Scrub credentials and PII before sending to Sentry.

    Args:
        event: Sentry event.
        hint: Additional context about the event.

    Returns:
        Modified event.
    """
    user = event.get("user")
    if user:
        user.pop("email", None)
        user.pop("username", None)
        if "ip_address" in user:
            user["ip_address"] = "{{auto}}"

    request = event.get("request")
    if request and isinstance(request, dict):
        request.pop("cookies", None)
        headers = request.get("headers")
        if isinstance(headers, dict):
            for name in list(headers):
                if name.lower() in _SENSITIVE_HEADERS:
                    headers[name] = _FILTERED
        # Login and register bodies contain passwords
        request.pop("data", None)

    return event


def _before_send_transaction(event: Event, hint: Hint) -> Event | None:
    transaction_name = event.get("transaction", "")
    if transaction_name in _QUIET_PATHS or transaction_name.endswith(" /health"):
        return None
    return event


def _traces_sampler(sampling_context: dict[str, Any]) -> float:
    """Trace auth traffic more often than the rest; never trace health checks."""
    if sampling_context.get("parent_sampled") is True:
        return 1.0

    path = sampling_context.get("asgi_scope", {}).get("path", "")
    if path in _QUIET_PATHS:
        return 0.0
    if path.startswith("/api/auth"):
        return 0.5
    return 0.2


def init_sentry() -> bool:
    """
    Initialize Sentry SDK with FastAPI integration.

    Call this BEFORE creating the FastAPI app instance.

    Returns:
        True if Sentry was initialized.
    """
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=os.getenv("SENTRY_RELEASE", "unknown"),
        send_default_pii=False,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoguruIntegration(),
        ],
        traces_sampler=_traces_sampler,
        sample_rate=1.0,
        before_send=_before_send,
        before_send_transaction=_before_send_transaction,
        attach_stacktrace=True,
        max_breadcrumbs=50,
        ignore_errors=[KeyboardInterrupt, SystemExit],
    )
    return True
