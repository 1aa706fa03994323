"""
Product API endpoints
All routes require an admin bearer token
"""

from fastapi import APIRouter, Depends, status

from app.core.errors import ErrorResponseModel
from app.dependencies.auth import require_admin
from app.dependencies.services import get_product_service
from app.dependencies.validation import ObjectIdParam, PaginationParam
from app.models.user import User
from app.schemas.pagination import PaginatedResponse, PaginationParams
from app.schemas.product import PopulatedProductResponse, ProductCreate, ProductResponse, ProductUpdate
from app.services.product import ProductService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponseModel},
    401: {"model": ErrorResponseModel},
    404: {"model": ErrorResponseModel},
    500: {"model": ErrorResponseModel},
}


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_product(
    product: ProductCreate,
    user: User = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    """
    Create a new product in an existing category.
    Malformed categoryId -> 400, unknown categoryId -> 404, duplicate name -> 400.
    """
    return await service.create_product(product, user_id=user.id)


@router.get(
    "",
    response_model=PaginatedResponse[PopulatedProductResponse],
    responses=ERROR_RESPONSES,
)
async def list_products(
    user: User = Depends(require_admin),
    pagination: PaginationParams = PaginationParam,
    service: ProductService = Depends(get_product_service),
):
    """Retrieve a list of products with optional pagination"""
    return await service.get_products(pagination)


@router.get("/{id}", response_model=ProductResponse, responses=ERROR_RESPONSES)
async def get_product(
    user: User = Depends(require_admin),
    product_id: str = ObjectIdParam,
    service: ProductService = Depends(get_product_service),
):
    """Get a product by its ID"""
    return await service.get_product(product_id)


@router.patch("/{id}", response_model=ProductResponse, responses=ERROR_RESPONSES)
async def update_product(
    product: ProductUpdate,
    user: User = Depends(require_admin),
    product_id: str = ObjectIdParam,
    service: ProductService = Depends(get_product_service),
):
    """Update a product. Only the provided fields change."""
    return await service.update_product(product_id, product)


@router.delete("/{id}", responses=ERROR_RESPONSES)
async def delete_product(
    user: User = Depends(require_admin),
    product_id: str = ObjectIdParam,
    service: ProductService = Depends(get_product_service),
):
    """Delete a product and unlink it from its category"""
    await service.delete_product(product_id)
    return {"id": product_id, "deleted": True}
