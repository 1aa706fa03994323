"""
API module initialization
"""

from . import categories, health, home, products, search

__all__ = ["categories", "health", "home", "products", "search"]
