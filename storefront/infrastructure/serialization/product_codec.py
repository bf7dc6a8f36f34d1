"""
Product JSON codec.

Reads and writes products in the camelCase wire format used by external
catalog feeds:

    {"name": "Laptop", "description": "...", "price": 1200.00,
     "category": "Electronics", "stock": 10, "imageUrl": "...",
     "sellerId": "...", "rating": 4.5, "reviewsCount": 3}

``id``, ``createdAt`` and ``updatedAt`` are written on encode and ignored on
decode; decoded products are always drafts. ``rating`` and ``reviewsCount``
are likewise ignored on decode because they are derived from reviews.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Any

from storefront.domain.entities import Product, ProductCategory
from storefront.domain.exceptions import MalformedDataError
from storefront.domain.value_objects import parse_decimal

_STRING_FIELDS = {
    "description": "description",
    "imageUrl": "image_url",
    "sellerId": "seller_id",
}


class ProductJSONCodec:
    """Converts between products and their JSON representation."""

    def decode(self, payload: str | bytes) -> list[Product]:
        """
        Decode one product object or a list of them.

        Raises:
            MalformedDataError: If the payload is not valid JSON or an entry
                is missing a field or has one of the wrong type
        """
        try:
            data = json.loads(payload, parse_float=Decimal)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedDataError(f"Invalid product JSON: {e}") from e

        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise MalformedDataError("Expected a product object or a list of products")

        return [self._decode_product(entry, index) for index, entry in enumerate(data)]

    def _decode_product(self, entry: Any, index: int) -> Product:
        if not isinstance(entry, dict):
            raise MalformedDataError("Product entry must be an object", index=index)

        name = entry.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedDataError("Product name is required", field="name", index=index)

        price = parse_decimal(entry.get("price"))
        if price is None:
            raise MalformedDataError("Product price must be a number", field="price", index=index)

        try:
            category = ProductCategory(entry.get("category"))
        except ValueError as e:
            raise MalformedDataError(
                f"Unknown product category: {entry.get('category')!r}",
                field="category",
                index=index,
            ) from e

        stock = entry.get("stock", 0)
        if isinstance(stock, bool) or not isinstance(stock, int):
            raise MalformedDataError("Product stock must be an integer", field="stock", index=index)

        optional: dict[str, str] = {}
        for wire_name, attribute in _STRING_FIELDS.items():
            value = entry.get(wire_name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise MalformedDataError(
                    f"Product {wire_name} must be a string", field=wire_name, index=index
                )
            optional[attribute] = value

        return Product(name=name, price=price, category=category, stock=stock, **optional)

    def encode(self, product: Product) -> dict[str, Any]:
        """Wire representation of one product."""
        return {
            "id": str(product.id) if product.id else None,
            "name": product.name,
            "description": product.description,
            "price": str(product.price),
            "category": product.category.value,
            "stock": product.stock,
            "imageUrl": product.image_url,
            "sellerId": str(product.seller_id),
            "rating": str(product.rating) if product.rating is not None else None,
            "reviewsCount": product.reviews_count,
            "createdAt": self._format_datetime(product.created_at),
            "updatedAt": self._format_datetime(product.updated_at),
        }

    def dumps(self, products: list[Product]) -> str:
        """Serialize products to a JSON array."""
        return json.dumps([self.encode(product) for product in products])

    @staticmethod
    def _format_datetime(value: datetime | None) -> str | None:
        return value.isoformat() if value else None
