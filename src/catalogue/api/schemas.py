"""Pydantic response schemas for the catalogue API."""

from pydantic import BaseModel

from catalogue.products import Product


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: str
    image_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 7,
                    "name": "Ceramic Mug",
                    "description": "Stoneware mug, 350 ml.",
                    "price": "12.50",
                    "image_url": "http://localhost:1337/uploads/mug.png",
                }
            ]
        }
    }

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=f"{product.price:.2f}",
            image_url=product.image_url,
        )
