"""
Models module initialization
"""

from .category import CategoryBase
from .product import Gender, ProductBase
from .user import User

__all__ = [
    "CategoryBase",
    "Gender",
    "ProductBase",
    "User",
]
