"""
Product Entity - catalog items with stock and derived rating
"""

from __future__ import annotations

# Standard library imports
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ..value_objects import parse_decimal
from .base import BaseEntity


class ProductCategory(Enum):
    """Product category enumeration"""

    ELECTRONICS = "Electronics"
    BOOKS = "Books"
    HOME_APPLIANCES = "Home Appliances"
    CLOTHING = "Clothing"
    FOOD = "Food"
    SPORTS = "Sports"


@dataclass(kw_only=True)
class Product(BaseEntity):
    """
    Product entity.

    ``rating`` and ``reviews_count`` are derived from the product's reviews
    and are only written by the review aggregator.
    """

    name: str
    description: str = ""
    price: Decimal
    category: ProductCategory
    stock: int = 0
    image_url: str = ""
    seller_id: UUID | str = ""
    rating: Decimal | None = None
    reviews_count: int | None = None

    def __post_init__(self) -> None:
        """Normalise numeric inputs to Decimal."""
        if not isinstance(self.price, Decimal):
            parsed = parse_decimal(self.price)
            if parsed is not None:
                self.price = parsed
        if self.rating is not None and not isinstance(self.rating, Decimal):
            self.rating = parse_decimal(self.rating)

    def has_stock_for(self, quantity: int) -> bool:
        """Check whether the requested quantity can be reserved."""
        return self.stock >= quantity
