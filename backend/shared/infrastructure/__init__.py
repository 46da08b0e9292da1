"""
Infrastructure module: Database, Redis and the command bus.

Provides:
- Database sessions and transactions (db.py)
- Command id propagation for logging (correlation.py)
- Redis pools and event publishing (events/)
- Redis Streams command consumer and client (messaging/)
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db_context,
    safe_commit,
)

__all__ = [
    "engine",
    "SessionLocal",
    "get_db_context",
    "safe_commit",
]
