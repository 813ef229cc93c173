"""
Catalog Service - product catalog and order fulfillment over MongoDB.

This package exposes CRUD operations for product records and an order
submission workflow that reconciles requested quantities against inventory.
"""

__version__ = "0.1.0"
