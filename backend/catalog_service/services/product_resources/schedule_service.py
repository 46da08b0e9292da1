"""
Product schedule service.

Times are stored as zero-padded "HH:MM" strings, so availability checks
compare them directly.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import exists, select

from catalog_service.models import ProductSchedule
from catalog_service.schemas import ProductScheduleOutput
from shared.utils.exceptions import ValidationError
from .base import ProductResourceService


class ProductScheduleService(ProductResourceService[ProductSchedule, ProductScheduleOutput]):
    model = ProductSchedule
    output_schema = ProductScheduleOutput
    entity_name = "Product schedule"
    entity_plural = "product schedules"
    response_key = "schedule"

    def _listing_order(self):
        return (ProductSchedule.day_of_week, ProductSchedule.start_time)

    def is_available_at_time(self, product_id: str, day_of_week: int, time: str) -> dict[str, bool]:
        """True if some window of that day satisfies start_time <= time <= end_time."""
        available = self._db.scalar(
            select(
                exists().where(
                    ProductSchedule.product_id == product_id,
                    ProductSchedule.day_of_week == day_of_week,
                    ProductSchedule.start_time <= time,
                    ProductSchedule.end_time >= time,
                )
            )
        )
        return {"is_available": bool(available)}

    def _validate_update(self, row: ProductSchedule, data: dict[str, Any]) -> None:
        start = data.get("start_time") or row.start_time
        end = data.get("end_time") or row.end_time
        if start >= end:
            raise ValidationError("start_time must be before end_time", field="start_time")
