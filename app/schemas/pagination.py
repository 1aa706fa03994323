"""
Pagination query parameters and paginated response envelope
"""

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationParams(BaseModel):
    limit: int = Field(10, ge=1)
    offset: int = Field(0, ge=0)

    @property
    def current_page(self) -> int:
        return self.offset // self.limit + 1

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list envelope: {items, total, currentPage, totalPages}"""

    model_config = ConfigDict(populate_by_name=True)

    items: List[T]
    total: int
    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")

    @classmethod
    def build(cls, items: List[T], total: int, pagination: PaginationParams) -> "PaginatedResponse[T]":
        return cls(
            items=items,
            total=total,
            current_page=pagination.current_page,
            total_pages=pagination.total_pages(total),
        )
