"""Derived product rating from the reviews that reference the product."""

# Standard library imports
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from ..value_objects import round_half_up


@dataclass(frozen=True)
class RatingSummary:
    """Average rating (one decimal place) and number of reviews."""

    average: Decimal | None
    count: int


class ProductRatingCalculator:
    """Computes a product's rating as the arithmetic mean of its review ratings."""

    def summarize(self, ratings: Iterable[int]) -> RatingSummary:
        values = list(ratings)
        if not values:
            return RatingSummary(average=None, count=0)

        mean = Decimal(sum(values)) / Decimal(len(values))
        return RatingSummary(average=round_half_up(mean), count=len(values))
