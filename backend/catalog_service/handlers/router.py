"""
Message router: maps command patterns to handler functions.

Handlers are plain functions `handler(ctx, data)` registered per pattern.
The dispatcher gives every command its own database session, binds the
command id for logging, and turns every failure into the error shape
returned on the bus:

    {"response": <json>}                       on success
    {"err": {"status": int, "message": str}}   on failure

Usage:
    catalog_router = MessageRouter()

    @catalog_router.register(ProductCommands.FIND_ONE)
    def find_product(ctx: CommandContext, data):
        return ProductService(ctx.db, events=ctx.events).find_one(parse_id(data))

    dispatcher = CommandDispatcher(catalog_router)
    reply = dispatcher.dispatch("product.find-one", product_id, command_id)
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from catalog_service.services.events import CatalogEventPublisher
from shared.config.logging import get_logger
from shared.infrastructure.correlation import bind_request_id
from shared.infrastructure.db import SessionLocal, get_db_context
from shared.utils.exceptions import (
    AppException,
    ConflictError,
    HandlerNotFoundError,
    InternalError,
    ValidationError,
)

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class CommandContext:
    """Per-command collaborators handed to every handler."""

    db: Session
    events: CatalogEventPublisher | None = None


Handler = Callable[[CommandContext, Any], Any]


class MessageRouter:
    """Registry of command handlers keyed by pattern."""

    def __init__(self):
        self._handlers: dict[str, Handler] = {}

    def register(self, pattern: str) -> Callable[[Handler], Handler]:
        """Decorator registering a handler for `pattern`."""
        def decorator(func: Handler) -> Handler:
            if pattern in self._handlers:
                raise ValueError(f"Handler already registered for pattern {pattern}")
            self._handlers[pattern] = func
            return func
        return decorator

    def include(self, other: "MessageRouter") -> None:
        """Merge another router's handlers into this one."""
        for pattern, handler in other._handlers.items():
            self.register(pattern)(handler)

    def get(self, pattern: str) -> Handler | None:
        return self._handlers.get(pattern)

    @property
    def patterns(self) -> list[str]:
        return sorted(self._handlers)


# =============================================================================
# Payload helpers
# =============================================================================


def parse(schema: type[SchemaT], data: Any) -> SchemaT:
    """Validate a payload; a pydantic error is mapped to 400 by the dispatcher."""
    return schema.model_validate(data if data is not None else {})


def parse_id(data: Any, key: str = "id") -> str:
    """
    Accept a bare id string or an object carrying it.

    Raises:
        ValidationError: If no non-empty id is present.
    """
    value = data.get(key) if isinstance(data, dict) else data
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be a non-empty string", field=key)
    return value


def parse_ids(data: Any) -> list[str]:
    """Accept a list of ids or `{"ids": [...]}`."""
    values = data.get("ids") if isinstance(data, dict) else data
    if not isinstance(values, list) or not values:
        raise ValidationError("ids must be a non-empty list", field="ids")
    if not all(isinstance(v, str) and v for v in values):
        raise ValidationError("ids must be non-empty strings", field="ids")
    return values


def _format_validation_error(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "payload"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


# =============================================================================
# Dispatcher
# =============================================================================


class CommandDispatcher:
    """
    Runs one command synchronously (called from a worker thread).

    Never raises: every outcome is a reply dict.
    """

    def __init__(
        self,
        router: MessageRouter,
        session_factory: sessionmaker = SessionLocal,
        events: CatalogEventPublisher | None = None,
    ):
        self._router = router
        self._session_factory = session_factory
        self._events = events

    def dispatch(self, pattern: str, data: Any, command_id: str | None = None) -> dict[str, Any]:
        with bind_request_id(command_id):
            start = time.perf_counter()
            reply = self._run(pattern, data)
            logger.info(
                "Command handled",
                pattern=pattern,
                ok="err" not in reply,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return reply

    __call__ = dispatch

    def _run(self, pattern: str, data: Any) -> dict[str, Any]:
        handler = self._router.get(pattern)
        if handler is None:
            return {"err": HandlerNotFoundError(pattern).to_rpc_error()}

        with get_db_context(self._session_factory) as db:
            try:
                result = handler(CommandContext(db=db, events=self._events), data)
                return {"response": to_jsonable_python(result)}
            except AppException as e:
                db.rollback()
                return {"err": e.to_rpc_error()}
            except PydanticValidationError as e:
                db.rollback()
                return {"err": ValidationError(_format_validation_error(e), pattern=pattern).to_rpc_error()}
            except IntegrityError as e:
                db.rollback()
                return {"err": ConflictError(str(e.orig), pattern=pattern).to_rpc_error()}
            except Exception as e:
                db.rollback()
                logger.error("Unhandled error in command handler", pattern=pattern, exc_info=True)
                return {"err": InternalError(str(e) or type(e).__name__, pattern=pattern).to_rpc_error()}
