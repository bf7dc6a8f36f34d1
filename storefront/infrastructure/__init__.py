"""
Infrastructure layer for the storefront.

In-memory persistence, credential hashing, payment gateways, the product
wire format, structured logging and the dependency container.
"""
