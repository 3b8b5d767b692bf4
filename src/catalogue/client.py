"""Read-only client for the Strapi product catalogue.

A catalogue that cannot be read is not an error for the storefront: every
failure (no API token, transport error, non-2xx, unexpected payload) is logged
and the storefront shows an empty product list.
"""

from dataclasses import replace

import httpx
import structlog

from catalogue.products import Product
from shared.config import Settings, load_settings
from shared.errors import CatalogFetchError

logger = structlog.get_logger(__name__)


class CatalogClient:
    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings or load_settings()
        self._client = client

    async def fetch_products(self) -> list[Product]:
        """Return the catalogue's products, or an empty list if it cannot be read."""
        try:
            products = await self._fetch()
        except CatalogFetchError as exc:
            logger.error("Failed to fetch products", error=str(exc))
            return []

        logger.debug("Fetched products", count=len(products))
        return products

    async def _fetch(self) -> list[Product]:
        token = self.settings.strapi_api_token
        if not token:
            raise CatalogFetchError("Strapi API token is missing. Set STRAPI_API_TOKEN.")

        try:
            response = await self._get(
                f"{self.settings.strapi_api_url}/api/products",
                params={"populate": "*"},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise CatalogFetchError(f"Catalogue request failed: {exc}") from exc

        if response.is_error:
            raise CatalogFetchError(f"API returned an error: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise CatalogFetchError("API returned a malformed response") from exc

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise CatalogFetchError("API response did not contain a product list")

        products = []
        for item in data:
            try:
                product = Product.from_payload(item)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed product", product=item, error=str(exc))
                continue
            products.append(self._absolute(product))
        return products

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, **kwargs)
        async with httpx.AsyncClient(timeout=self.settings.strapi_timeout_seconds) as client:
            return await client.get(url, **kwargs)

    def _absolute(self, product: Product) -> Product:
        """Resolve media paths that Strapi returns relative to its own host."""
        if product.image_url and product.image_url.startswith("/"):
            return replace(product, image_url=f"{self.settings.strapi_api_url}{product.image_url}")
        return product
