"""
Catalog event publisher.

Services call `publish()` after their transaction commits. Publishing is
fire-and-forget: a Redis failure is logged and never fails the command.

Usage:
    events = CatalogEventPublisher()
    events.publish(CatalogEvents.PRODUCT_CREATED, product.id)
"""

from __future__ import annotations

from typing import Callable

import redis

from shared.config.constants import CatalogEvents
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.events import Event, get_redis_sync_client, publish_event

logger = get_logger(__name__)


class CatalogEventPublisher:
    """
    Publishes product events on the Redis channel named after the event.

    The Redis client factory is injectable so tests can swap in a fake.
    """

    def __init__(
        self,
        client_factory: Callable[[], redis.Redis] = get_redis_sync_client,
        *,
        enabled: bool | None = None,
    ):
        self._client_factory = client_factory
        self._enabled = settings.events_enabled if enabled is None else enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def publish(self, event_type: str, product_id: str) -> bool:
        """
        Publish `{type, data: {product_id}, ts, v}` on channel `event_type`.

        Returns:
            True if the event reached Redis, False if it was skipped or failed.
        """
        if not self._enabled:
            logger.debug("Events disabled, skipping", event_type=event_type)
            return False

        if event_type not in CatalogEvents.ALL:
            logger.warning("Unknown catalog event type", event_type=event_type)

        try:
            event = Event.for_product(event_type, product_id)
            receivers = publish_event(self._client_factory(), event_type, event)
        except (redis.RedisError, ValueError) as e:
            logger.error(
                "Failed to publish catalog event",
                event_type=event_type,
                product_id=product_id,
                error=str(e),
            )
            return False

        logger.debug(
            "Catalog event published",
            event_type=event_type,
            product_id=product_id,
            receivers=receivers,
        )
        return True
