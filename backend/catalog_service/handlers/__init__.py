"""
Command handlers and the router that dispatches to them.

Usage:
    from catalog_service.handlers import build_dispatcher

    dispatcher = build_dispatcher()
    reply = dispatcher.dispatch("product.find-one", product_id, command_id)
"""

from sqlalchemy.orm import sessionmaker

from catalog_service.services.events import CatalogEventPublisher
from shared.infrastructure.db import SessionLocal
from .router import CommandContext, CommandDispatcher, MessageRouter, parse, parse_id, parse_ids
from .catalog import catalog_router
from .product_resources import product_resources_router


def build_router() -> MessageRouter:
    """Router with every catalog command registered."""
    router = MessageRouter()
    router.include(catalog_router)
    router.include(product_resources_router)
    return router


def build_dispatcher(
    session_factory: sessionmaker = SessionLocal,
    events: CatalogEventPublisher | None = None,
) -> CommandDispatcher:
    return CommandDispatcher(
        build_router(),
        session_factory=session_factory,
        events=events if events is not None else CatalogEventPublisher(),
    )


__all__ = [
    "CommandContext",
    "CommandDispatcher",
    "MessageRouter",
    "build_dispatcher",
    "build_router",
    "parse",
    "parse_id",
    "parse_ids",
]
