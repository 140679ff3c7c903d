"""
Correlation ID generation and context management.

Each request gets a short ID that appears in every log line and in error
responses, so a user-reported error can be matched to server logs.
"""

import uuid
from contextvars import ContextVar

CORRELATION_HEADER = "X-Correlation-ID"

# Context variable for request-scoped correlation ID
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Return 8 hex characters, e.g. "abc123de"."""
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the current request's correlation ID, or "" outside a request."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)
