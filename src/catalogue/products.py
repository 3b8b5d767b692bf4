"""Product model for the storefront catalogue.

Strapi returns products in two shapes: v4 nests the fields under
`attributes` (with media under `image.data[].attributes`), v5 returns them
flat (with media as `image[]`). Descriptions are either plain strings or
rich-text blocks. Product.from_payload() accepts all of these.
"""

from dataclasses import dataclass


def flatten_description(description) -> str:
    """Render a rich-text block list as plain text.

    Text children of a block are joined without separators; blocks are
    joined with a single space.
    """
    if isinstance(description, list):
        return " ".join(
            "".join(child.get("text", "") for child in block.get("children", []) if isinstance(child, dict))
            for block in description
            if isinstance(block, dict)
        )
    return description or ""


def _image_url(attributes: dict, payload: dict) -> str | None:
    nested = attributes.get("image")
    if isinstance(nested, dict):
        for media in nested.get("data") or []:
            url = ((media or {}).get("attributes") or {}).get("url")
            if url:
                return url

    flat = payload.get("image")
    if isinstance(flat, list) and flat and isinstance(flat[0], dict):
        return flat[0].get("url")
    if isinstance(flat, dict):
        return flat.get("url")
    return None


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    description: str
    price: float
    image_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict) -> "Product":
        attributes = payload.get("attributes") or {}

        return cls(
            id=int(payload["id"]),
            name=attributes.get("name") or payload.get("name") or "",
            description=flatten_description(attributes.get("description") or payload.get("description")),
            price=float(attributes.get("price") or payload.get("price") or 0),
            image_url=_image_url(attributes, payload),
        )
