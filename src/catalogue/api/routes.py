"""FastAPI endpoints for the product catalogue."""

from fastapi import APIRouter, Depends

from catalogue.api.schemas import ProductResponse
from catalogue.client import CatalogClient

product_router = APIRouter(prefix="/products", tags=["products"])


def get_catalog_client() -> CatalogClient:
    return CatalogClient()


@product_router.get("", response_model=list[ProductResponse])
async def list_products(client: CatalogClient = Depends(get_catalog_client)) -> list[ProductResponse]:
    """Every product in the catalogue. Empty when the catalogue cannot be read."""
    products = await client.fetch_products()
    return [ProductResponse.from_product(product) for product in products]
