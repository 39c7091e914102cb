"""Moderation backend client."""

from __future__ import annotations

from adreview.client.api import (
    ModerationAPIError,
    ModerationClient,
    ModerationClientError,
    ModerationDecodeError,
    ModerationTransportError,
)
from adreview.client.session import client_scope, create_client_from_env

__all__ = [
    "ModerationAPIError",
    "ModerationClient",
    "ModerationClientError",
    "ModerationDecodeError",
    "ModerationTransportError",
    "client_scope",
    "create_client_from_env",
]
