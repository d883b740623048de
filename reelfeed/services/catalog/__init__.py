from reelfeed.services.catalog.provider import CatalogProvider
from reelfeed.services.catalog.service import CatalogService, get_catalog_service

__all__ = ["CatalogProvider", "CatalogService", "get_catalog_service"]
