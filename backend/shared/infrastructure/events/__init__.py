"""
Event System for catalog notifications via Redis pub/sub.

- event_schema.py: Event dataclass with validation
- circuit_breaker.py: Circuit breaker and retry jitter
- redis_pool.py: Async and sync connection pools
- publisher.py: publish_event with retry
"""

from .circuit_breaker import (
    CircuitState,
    EventCircuitBreaker,
    get_event_circuit_breaker,
    calculate_retry_delay_with_jitter,
)
from .event_schema import Event, MAX_EVENT_SIZE
from .redis_pool import (
    get_redis_pool,
    get_redis_sync_client,
    close_redis_pool,
    close_redis_sync_client,
)
from .publisher import publish_event

__all__ = [
    "CircuitState",
    "EventCircuitBreaker",
    "get_event_circuit_breaker",
    "calculate_retry_delay_with_jitter",
    "Event",
    "MAX_EVENT_SIZE",
    "get_redis_pool",
    "get_redis_sync_client",
    "close_redis_pool",
    "close_redis_sync_client",
    "publish_event",
]
