"""
Search API endpoint (public)
"""

from fastapi import APIRouter, Depends

from app.core.errors import ErrorResponseModel
from app.dependencies.services import get_search_service
from app.services.search import SearchService

router = APIRouter()


@router.get("/{collection}/{term}", responses={400: {"model": ErrorResponseModel}})
async def search(
    collection: str,
    term: str,
    service: SearchService = Depends(get_search_service),
):
    """
    Find products or categories.

    - collection: `product` or `categories`
    - term: an id, or a plain name fragment (case-insensitive)
    """
    results = await service.search(collection, term)
    return [item.model_dump(mode="json", by_alias=True) for item in results]
