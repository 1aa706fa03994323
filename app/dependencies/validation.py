"""
Request parameter validation dependencies
"""

from fastapi import Depends, Path, Query

from app.core.config import config
from app.core.errors import ErrorKind, ErrorResponse
from app.schemas.pagination import PaginationParams
from app.utils.validators import is_object_id


def valid_object_id(id: str = Path(..., description="MongoDB ObjectId")) -> str:
    """Reject path ids that are not valid ObjectIds before reaching the service"""
    if not is_object_id(id):
        raise ErrorResponse("Invalid MongoDB Id", status_code=400, kind=ErrorKind.VALIDATION)
    return id


def pagination_params(
    limit: int = Query(config.default_page_limit, ge=1, description="Max items to return"),
    offset: int = Query(0, ge=0, description="Number of items to skip"),
) -> PaginationParams:
    return PaginationParams(limit=limit, offset=offset)


ObjectIdParam = Depends(valid_object_id)
PaginationParam = Depends(pagination_params)
