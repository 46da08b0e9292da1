"""
Chain and restaurant schemas.
"""

from pydantic import Field

from shared.config.constants import Currency, Limits
from .common import AuditOutput, CommandInput


class ChainCreate(CommandInput):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    currency: Currency = Currency.PEN
    tax_percent: float = Field(default=0.0, ge=0, le=100)
    created_by: str | None = None


class ChainUpdate(CommandInput):
    id: str
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    currency: Currency | None = None
    tax_percent: float | None = Field(default=None, ge=0, le=100)
    updated_by: str | None = None


class ChainOutput(AuditOutput):
    id: str
    name: str
    currency: str
    tax_percent: float

    class Config:
        from_attributes = True


class RestaurantCreate(CommandInput):
    chain_id: str
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=40)
    timezone: str | None = Field(default=None, max_length=64)
    status: bool = True
    created_by: str | None = None


class RestaurantUpdate(CommandInput):
    id: str
    chain_id: str | None = None
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=40)
    timezone: str | None = Field(default=None, max_length=64)
    status: bool | None = None
    updated_by: str | None = None


class RestaurantOutput(AuditOutput):
    id: str
    chain_id: str
    name: str
    address: str | None = None
    phone: str | None = None
    timezone: str | None = None
    status: bool

    class Config:
        from_attributes = True
