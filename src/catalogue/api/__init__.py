"""Catalogue API package."""

from catalogue.api.routes import get_catalog_client, product_router

__all__ = ["product_router", "get_catalog_client"]
