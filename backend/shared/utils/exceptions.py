"""
Centralized application exceptions for consistent error replies.

Every exception carries an HTTP-style status code and a message, and
converts to the `{status, message}` error shape sent back on the bus.

Usage:
    from shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Product", product_id)
    raise ValidationError("Some products were not found: a, b")
"""

from http import HTTPStatus
from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and reply format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        **log_context: Any,
    ):
        # Log the error with context
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(detail)
        self.status_code = int(status_code)
        self.detail = detail

    def to_rpc_error(self) -> dict[str, Any]:
        """Error payload sent back to the caller."""
        return {"status": self.status_code, "message": self.detail}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status_code={self.status_code}, detail={self.detail!r})"


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Product", product_id)
        raise NotFoundError("Product image", image_id, product_id=product_id)
    """

    def __init__(self, entity: str, entity_id: Any = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with id {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=HTTPStatus.NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class HandlerNotFoundError(AppException):
    """No handler registered for a command pattern (404)."""

    def __init__(self, pattern: str, **log_context: Any):
        super().__init__(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"No handler for pattern {pattern}",
            log_level="warning",
            pattern=pattern,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("entity_type must be one of: category_id, product_id, question_id")
        raise ValidationError("Invalid time", field="time", value="25:00")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class MissingEntitiesError(AppException):
    """
    Some ids of a batch do not resolve to live entities (400 by default).

    Usage:
        raise MissingEntitiesError("products", ["a", "b"])
        raise MissingEntitiesError("ingredients", ids, status_code=HTTPStatus.NOT_FOUND)
    """

    def __init__(
        self,
        entity_plural: str,
        missing_ids: list[str],
        status_code: int = HTTPStatus.BAD_REQUEST,
        **log_context: Any,
    ):
        detail = f"Some {entity_plural} were not found: {', '.join(missing_ids)}"
        super().__init__(
            status_code=status_code,
            detail=detail,
            log_level="warning",
            missing_ids=missing_ids,
            **log_context,
        )
        self.missing_ids = missing_ids


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Tag with name 'vegan' already exists")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=HTTPStatus.CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class DuplicateEntityError(ConflictError):
    """Entity violates a uniqueness constraint."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} '{identifier}' already exists"
        else:
            detail = f"{entity} already exists or references a missing record"

        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Unable to expand question tree", product_id=product_id)
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}"
        super().__init__(detail, operation=operation, **log_context)


class RpcError(Exception):
    """
    Error reply received by a command client.

    Raised on the caller side when the service answers with `{status, message}`.
    """

    def __init__(self, status: int, message: str):
        super().__init__(f"[{status}] {message}")
        self.status = status
        self.message = message
