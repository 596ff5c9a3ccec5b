"""Signing client factory.

Builds the co-signing service client from settings. The endpoint is always
passed in explicitly; there is no process-wide client instance.
"""

import logging
from typing import Optional

from cosign_wallet.config import Settings, get_settings
from cosign_wallet.signing.base import SigningServiceClient
from cosign_wallet.signing.http import HttpSigningClient

logger = logging.getLogger(__name__)


def get_signing_client(settings: Optional[Settings] = None) -> SigningServiceClient:
    """Create a co-signing service client.

    Args:
        settings: Settings to read the endpoint from (defaults to get_settings())

    Returns:
        SigningServiceClient instance

    Raises:
        ConfigurationError: If the endpoint or timeout is invalid
    """
    settings = settings or get_settings()
    logger.info(f"Initializing co-signing client for {settings.signing_service_url}")

    return HttpSigningClient(
        endpoint=settings.signing_service_url,
        timeout=settings.signing_timeout,
        api_token=settings.signing_api_token,
    )


async def get_signing_info(client: SigningServiceClient) -> dict:
    """Get information about a co-signing client.

    Returns:
        Dict with client class, endpoint and health status
    """
    healthy = await client.health_check()

    return {
        "class": client.__class__.__name__,
        "endpoint": getattr(client, "endpoint", None),
        "healthy": healthy,
    }
