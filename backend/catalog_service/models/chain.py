"""
Chain and Restaurant models.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import Currency
from .base import Base, SoftDeleteMixin, UUIDPrimaryKeyMixin


class Chain(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    """
    Restaurant chain. No active flag: a chain is live until soft-deleted.
    """

    __tablename__ = "chain"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default=Currency.PEN.value, nullable=False)
    tax_percent: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    restaurants: Mapped[list["Restaurant"]] = relationship(back_populates="chain")


class Restaurant(UUIDPrimaryKeyMixin, SoftDeleteMixin, Base):
    """A restaurant belonging to a chain."""

    __tablename__ = "restaurant"

    chain_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("chain.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(String(40))
    timezone: Mapped[Optional[str]] = mapped_column(String(64))
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    chain: Mapped["Chain"] = relationship(back_populates="restaurants")

    @classmethod
    def active_clause(cls):
        return cls.status.is_(True)

    def deactivate(self) -> None:
        self.status = False
