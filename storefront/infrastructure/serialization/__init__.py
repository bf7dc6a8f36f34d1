"""Wire formats for data exchanged with external systems."""

from .product_codec import ProductJSONCodec

__all__ = ["ProductJSONCodec"]
