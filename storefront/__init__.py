"""
Storefront - in-process backend for a small online store.

Accounts, catalog, orders, payments and reviews held in process memory,
organised as domain, application and infrastructure layers.
"""

__version__ = "0.1.0"
