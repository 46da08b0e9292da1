"""
Catalog services.

Import concrete services from their subpackages:
    from catalog_service.services.domain import ProductService
    from catalog_service.services.product_resources import ProductSizeService
"""
