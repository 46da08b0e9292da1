"""
Command correlation ids.

The message router binds the id of the command it is handling to a
context variable; CorrelationIdFilter copies it onto every log record.
asyncio.to_thread copies the current context, so the id follows the
command into its worker thread.
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

# Context variable for the current command id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get the current command id."""
    return request_id_var.get()


def new_request_id() -> str:
    return str(uuid.uuid4())


@contextmanager
def bind_request_id(request_id: str | None) -> Iterator[str]:
    """
    Bind a command id for the duration of the block.

    Usage:
        with bind_request_id(envelope_id):
            router.dispatch(pattern, data)
    """
    value = request_id or new_request_id()
    token = request_id_var.set(value)
    try:
        yield value
    finally:
        request_id_var.reset(token)


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter that adds request_id to log records.

    Usage:
        handler = logging.StreamHandler()
        handler.addFilter(CorrelationIdFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True
