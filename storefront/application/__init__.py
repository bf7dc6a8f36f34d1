"""
Application layer for the storefront.

Services coordinating the domain entities through repository and unit of
work interfaces, plus the store configuration.
"""
