"""
HTTP Configuration - Shared settings for the content API client.

Centralizes connection pool settings and timeouts so the client and tests
build httpx clients the same way.
"""
import httpx
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# One remote file per process, so a small pool is plenty
POOL_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=30.0
)

# Fast connect timeout (fail fast), read timeout from settings
CONNECT_TIMEOUT = 5.0


def build_timeout(read_timeout: float) -> httpx.Timeout:
    return httpx.Timeout(read_timeout, connect=CONNECT_TIMEOUT)


def create_async_client(
    base_url: str,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create a configured async HTTP client with pooling.

    Args:
        base_url: API root, e.g. https://api.github.com
        timeout: Read timeout in seconds
        transport: Optional transport override (httpx.MockTransport in tests)

    Returns:
        Configured httpx.AsyncClient
    """
    client = httpx.AsyncClient(
        base_url=base_url,
        limits=POOL_LIMITS,
        timeout=build_timeout(timeout),
        transport=transport,
    )
    logger.info(f"Created HTTP client for {base_url}")
    return client
