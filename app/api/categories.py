"""
Category API endpoints
All routes require an admin bearer token
"""

from fastapi import APIRouter, Depends, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import require_admin
from app.dependencies.services import get_category_service
from app.dependencies.validation import ObjectIdParam, PaginationParam
from app.models.user import User
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate, PopulatedCategoryResponse
from app.schemas.pagination import PaginatedResponse, PaginationParams
from app.services.category import CategoryService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponseModel},
    401: {"model": ErrorResponseModel},
    404: {"model": ErrorResponseModel},
    500: {"model": ErrorResponseModel},
}


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_category(
    category: CategoryCreate,
    user: User = Depends(require_admin),
    service: CategoryService = Depends(get_category_service),
):
    """
    Insert a new category. The creator is taken from the token.
    Duplicate names are rejected with 400.
    """
    return await service.create_category(category, user_id=user.id)


@router.get(
    "",
    response_model=PaginatedResponse[PopulatedCategoryResponse],
    responses=ERROR_RESPONSES,
)
async def list_categories(
    user: User = Depends(require_admin),
    pagination: PaginationParams = PaginationParam,
    service: CategoryService = Depends(get_category_service),
):
    """Retrieve a list of categories with optional pagination"""
    return await service.get_categories(pagination)


@router.get("/{id}", response_model=CategoryResponse, responses=ERROR_RESPONSES)
async def get_category(
    user: User = Depends(require_admin),
    category_id: str = ObjectIdParam,
    service: CategoryService = Depends(get_category_service),
):
    """Find a category by id"""
    return await service.get_category(category_id)


@router.patch("/{id}", response_model=CategoryResponse, responses=ERROR_RESPONSES)
async def update_category(
    category: CategoryUpdate,
    user: User = Depends(require_admin),
    category_id: str = ObjectIdParam,
    service: CategoryService = Depends(get_category_service),
):
    """Update a category. Only the provided fields change."""
    return await service.update_category(category_id, category)


@router.delete("/{id}", responses=ERROR_RESPONSES)
async def delete_category(
    user: User = Depends(require_admin),
    category_id: str = ObjectIdParam,
    service: CategoryService = Depends(get_category_service),
):
    """
    Delete a category. Products referencing it become uncategorized
    shortly after the response is sent.
    """
    await service.delete_category(category_id)
    return {"id": category_id, "deleted": True}
