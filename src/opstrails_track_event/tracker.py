"""
Event submission: build the CloudEvent, send it, return the receipt.
"""
import logging
from typing import Optional

from .client import EventReceipt, OpsTrailsClient
from .config import ActionConfig
from .event import build_event
from .workflow import set_secret

logger = logging.getLogger(__name__)


async def track_event(
    config: ActionConfig,
    client: Optional[OpsTrailsClient] = None
) -> EventReceipt:
    """
    Track one event with the OpsTrails API.

    The API key is registered as a secret before anything is logged.

    Args:
        config: Validated action configuration
        client: Client to send with; one is created (and closed) from the
            config when omitted

    Returns:
        Receipt with the event id and time

    Raises:
        OpsTrailsError: If the request fails or the API rejects the event
    """
    set_secret(config.api_key)

    event = build_event(config)
    logger.info(f'Tracking "{config.type}" event for source "{event["source"]}"')

    if client is None:
        async with OpsTrailsClient(config.api_key, base_url=config.api_url) as owned:
            receipt = await owned.create_event(event)
    else:
        receipt = await client.create_event(event)

    logger.info(f"Event tracked successfully (id: {receipt.id})")
    return receipt
