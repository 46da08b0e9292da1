"""
Health probe for the catalog service.

The service has no business HTTP API; this app only answers liveness and
readiness checks for the orchestrator:

    GET /health        process is up
    GET /health/ready  database and Redis reachable (503 otherwise)
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from shared.config.settings import settings
from shared.infrastructure.db import SessionLocal
from shared.infrastructure.events import get_event_circuit_breaker, get_redis_pool
from shared.utils.health import HealthStatus, aggregate_health_checks, health_check_with_timeout

RedisFactory = Callable[[], Awaitable[aioredis.Redis]]


def create_health_app(
    session_factory: sessionmaker = SessionLocal,
    redis_factory: RedisFactory = get_redis_pool,
) -> FastAPI:
    app = FastAPI(title=f"{settings.service_name} health", docs_url=None, redoc_url=None)

    def _select_one() -> None:
        with session_factory() as db:
            db.execute(text("SELECT 1"))

    @health_check_with_timeout(timeout=3.0, component="database")
    async def check_database_health():
        await asyncio.to_thread(_select_one)

    @health_check_with_timeout(timeout=3.0, component="redis")
    async def check_redis_health():
        redis = await redis_factory()
        await redis.ping()

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Basic liveness check."""
        return {
            "status": HealthStatus.HEALTHY.value,
            "service": settings.service_name,
            "environment": settings.environment,
        }

    @app.get("/health/ready")
    async def ready():
        """Readiness: every dependency must answer."""
        result = await aggregate_health_checks([check_database_health(), check_redis_health()])
        result["service"] = settings.service_name
        result["event_circuit_breaker"] = get_event_circuit_breaker().get_stats()
        if result["status"] != HealthStatus.HEALTHY.value:
            return JSONResponse(content=result, status_code=503)
        return result

    return app
