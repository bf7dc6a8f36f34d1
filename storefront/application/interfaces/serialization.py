"""Decoder interface for product data supplied from outside the system."""

# Standard library imports
from abc import abstractmethod
from typing import Protocol

# Local imports
from storefront.domain.entities import Product


class IProductDecoder(Protocol):
    """Turns an external payload into draft products."""

    @abstractmethod
    def decode(self, payload: str | bytes) -> list[Product]:
        """
        Decode a payload into draft products.

        Raises:
            MalformedDataError: If the payload cannot be interpreted
        """
        ...
