"""Client construction helpers."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from adreview.client.api import DEFAULT_BASE_URL, HTTP_TIMEOUT, ModerationClient


def create_client_from_env() -> ModerationClient:
    """Create a client using the MODERATION_API_URL environment variable."""
    url = os.environ.get("MODERATION_API_URL", DEFAULT_BASE_URL)
    timeout = float(os.environ.get("MODERATION_HTTP_TIMEOUT", HTTP_TIMEOUT))
    return ModerationClient(url, timeout=timeout)


@asynccontextmanager
async def client_scope(client: ModerationClient | None = None) -> AsyncIterator[ModerationClient]:
    """Provide a client that is closed once the block finishes."""
    client = client or create_client_from_env()
    try:
        yield client
    finally:
        await client.close()
