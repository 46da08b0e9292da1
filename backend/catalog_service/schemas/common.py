"""
Payload schemas shared by every resource.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from shared.config.constants import Limits
from shared.utils.pagination import PaginationInput


class CommandInput(BaseModel):
    """Base for command payloads; enums are stored by value."""

    class Config:
        use_enum_values = True


class RemoveInput(CommandInput):
    """Soft delete request: the id and the actor performing it."""

    id: str = Field(min_length=1)
    deleted_by: str | None = None


class SearchByNameInput(PaginationInput):
    """Case-insensitive substring search; an empty name matches everything."""

    name: str = ""


class IdList(CommandInput):
    """Batch of ids for validate commands."""

    ids: list[str] = Field(min_length=1, max_length=Limits.MAX_BULK_ITEMS)


class AuditOutput(BaseModel):
    """Audit fields exposed on soft-deletable entities."""

    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
    deleted_by: str | None = None
