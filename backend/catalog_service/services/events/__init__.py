"""
Catalog event publishing.
"""

from .catalog_events import CatalogEventPublisher

__all__ = ["CatalogEventPublisher"]
