"""
Repositories module initialization
"""

from .base import BaseRepository, classify_mongo_error
from .category import CategoryRepository
from .product import ProductRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "ProductRepository",
    "classify_mongo_error",
]
