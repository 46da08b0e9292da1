"""
Product size service.
"""

from catalog_service.models import ProductSize
from catalog_service.schemas import ProductSizeOutput
from shared.config.constants import CatalogEvents
from .base import ProductResourceService


class ProductSizeService(ProductResourceService[ProductSize, ProductSizeOutput]):
    """Only status=true sizes are listed, by name."""

    model = ProductSize
    output_schema = ProductSizeOutput
    entity_name = "Product size"
    entity_plural = "product sizes"
    response_key = "size"
    created_event = CatalogEvents.PRODUCT_SIZE_CREATED

    def _listing_filter(self):
        return [ProductSize.status.is_(True)]

    def _listing_order(self):
        return ProductSize.name

    def _after_bulk_create(self, product_id: str, count: int) -> None:
        # Size events are only published for single creates
        pass
