"""
API schemas for Category endpoints
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.category import CategoryBase


class CategoryCreate(BaseModel):
    """Schema for creating a new category. userId comes from the token."""
    name: str = Field(..., min_length=3)


class CategoryUpdate(BaseModel):
    """Schema for updating an existing category"""
    name: Optional[str] = Field(None, min_length=3)


class CategoryResponse(CategoryBase):
    """Schema for category responses including all fields"""
    id: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProductSummary(BaseModel):
    """Product fields embedded in a category listing"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    user_id: Optional[str] = Field(None, alias="userId")


class PopulatedCategoryResponse(CategoryResponse):
    """Category whose product ids are expanded to product summaries"""
    product_ids: List[ProductSummary] = Field(default_factory=list, alias="productId")

