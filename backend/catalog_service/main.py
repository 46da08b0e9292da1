"""
Catalog service entry point.

Runs the command consumer and, when health_port > 0, the health probe in
the same event loop. SIGINT/SIGTERM stop the consumer after its current
batch.

Usage:
    python -m catalog_service.main
    catalog serve
"""

from __future__ import annotations

import asyncio
import signal

import uvicorn

from catalog_service.handlers import build_dispatcher
from catalog_service.health import create_health_app
from shared.config.logging import catalog_logger as logger, setup_logging
from shared.config.settings import settings
from shared.infrastructure.events import close_redis_pool, close_redis_sync_client
from shared.infrastructure.messaging import run_command_consumer


def check_configuration() -> None:
    """Refuse to start in production with an unsafe configuration."""
    errors = settings.validate_production_config()
    for error in errors:
        logger.error("Configuration error", error=error)
    if errors and settings.environment == "production":
        raise RuntimeError(f"Production configuration errors: {'; '.join(errors)}")
    if errors:
        logger.warning("Running with development defaults")


async def serve() -> None:
    setup_logging()
    check_configuration()

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # add_signal_handler is unavailable on Windows event loops
            pass

    dispatcher = build_dispatcher()
    tasks = [asyncio.create_task(run_command_consumer(dispatcher.dispatch, stop_event=stop_event))]

    health_server = None
    if settings.health_port > 0:
        health_server = uvicorn.Server(uvicorn.Config(
            create_health_app(),
            host="0.0.0.0",
            port=settings.health_port,
            log_level="warning",
        ))
        # The consumer owns the signal handlers
        health_server.install_signal_handlers = lambda: None
        tasks.append(asyncio.create_task(health_server.serve()))

    logger.info(
        "Catalog service started",
        env=settings.environment,
        stream=settings.command_stream,
        health_port=settings.health_port,
    )

    stop_waiter = asyncio.create_task(stop_event.wait())
    try:
        # Either a stop signal or a task exiting on its own ends the service
        await asyncio.wait([stop_waiter, *tasks], return_when=asyncio.FIRST_COMPLETED)
    finally:
        logger.info("Shutting down catalog service")
        stop_event.set()
        if health_server is not None:
            health_server.should_exit = True
        results = await asyncio.gather(stop_waiter, *tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                logger.error("Service task failed", error=str(result))
        await close_redis_pool()
        close_redis_sync_client()


def main() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    main()
