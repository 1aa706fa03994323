"""
Service layer dependency injection for FastAPI.

The container is built at startup and stored on the application state.
"""

from fastapi import Request

from app.services.category import CategoryService
from app.services.container import ServiceContainer
from app.services.product import ProductService
from app.services.search import SearchService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_category_service(request: Request) -> CategoryService:
    """Get category service instance"""
    return get_container(request).category_service


def get_product_service(request: Request) -> ProductService:
    """Get product service instance"""
    return get_container(request).product_service


def get_search_service(request: Request) -> SearchService:
    """Get search service instance"""
    return get_container(request).search_service
