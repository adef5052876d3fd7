"""Shopify App Proxy endpoint serving customer quotes (draft orders)."""

__version__ = "1.0.0"
