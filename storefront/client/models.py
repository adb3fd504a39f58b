# storefront/client/models.py
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

# Fields persisted in a guest cart line's product snapshot
SNAPSHOT_FIELDS = {"id", "name", "price", "image_url", "category"}


class ProductRef(BaseModel):
    """
    Product as the cart sees it, whatever shape the API handed over.
    """

    id: str
    name: str = ""
    price: float = 0
    discount_percent: float = 0
    image_url: str | None = None
    category: str | None = None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "ProductRef":
        """
        Normalize a product payload.

        Accepts a flat product, or a cart row carrying the product under
        `product` / `products`.

        Raises:
            ValueError: if no product id can be found.
        """
        data = payload.get("product") or payload.get("products") or payload
        if not isinstance(data, Mapping) or not data.get("id"):
            raise ValueError("Product ID is required")

        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            price=float(data.get("price") or 0),
            discount_percent=float(data.get("discount_percent") or 0),
            image_url=data.get("image_url") or data.get("image"),
            category=data.get("category"),
        )

    def snapshot(self) -> dict[str, Any]:
        return self.model_dump(include=SNAPSHOT_FIELDS)


class CartLine(BaseModel):
    """
    One cart line as displayed.

    Guest lines use the product id as line id; server lines use the
    cart row id.
    """

    id: str
    product_id: str
    quantity: int
    product: ProductRef

    @classmethod
    def from_server(cls, item: Mapping[str, Any]) -> "CartLine":
        return cls(
            id=str(item["id"]),
            product_id=str(item["product_id"]),
            quantity=int(item["quantity"]),
            product=ProductRef.from_api(item),
        )
