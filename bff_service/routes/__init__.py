"""
API routes for the BFF gateway
"""

from . import categories, health, inventory, orders, products

__all__ = ["categories", "health", "inventory", "orders", "products"]
