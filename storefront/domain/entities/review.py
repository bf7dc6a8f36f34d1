"""
Review Entity - a user's rating of a product
"""

# Standard library imports
from dataclasses import dataclass
from uuid import UUID

from .base import BaseEntity

MIN_RATING = 1
MAX_RATING = 5


@dataclass(kw_only=True)
class Review(BaseEntity):
    """Review entity. ``rating`` is an integer from 1 to 5."""

    product_id: UUID
    user_id: UUID
    rating: int
    comment: str = ""

    def has_valid_rating(self) -> bool:
        """Check the rating is an integer within the allowed range."""
        if isinstance(self.rating, bool) or not isinstance(self.rating, int):
            return False
        return MIN_RATING <= self.rating <= MAX_RATING
