"""
Services module initialization
"""

from .category import CategoryService
from .container import ServiceContainer, build_container
from .product import ProductService
from .search import SearchService

__all__ = [
    "CategoryService",
    "ProductService",
    "SearchService",
    "ServiceContainer",
    "build_container",
]
