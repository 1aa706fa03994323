"""
Dependencies module initialization
"""

from .auth import get_current_user, require_admin
from .services import get_category_service, get_product_service, get_search_service
from .validation import pagination_params, valid_object_id

__all__ = [
    "get_current_user",
    "require_admin",
    "get_category_service",
    "get_product_service",
    "get_search_service",
    "pagination_params",
    "valid_object_id",
]
