"""
API schemas
"""

from .category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    PopulatedCategoryResponse,
    ProductSummary,
)
from .pagination import PaginatedResponse, PaginationParams
from .product import (
    CategorySummary,
    PopulatedProductResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)

__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategorySummary",
    "PaginatedResponse",
    "PaginationParams",
    "PopulatedCategoryResponse",
    "PopulatedProductResponse",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductSummary",
]
