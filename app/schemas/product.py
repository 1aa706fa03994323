"""
API schemas for Product endpoints
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.models.product import Gender, ProductBase


class ProductCreate(BaseModel):
    """Schema for creating a new product. userId comes from the token."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    sizes: List[str] = Field(..., min_length=1)
    gender: Gender
    tags: Optional[List[str]] = None
    category_id: str = Field(..., alias="categoryId")


class ProductUpdate(BaseModel):
    """Schema for updating an existing product"""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    sizes: Optional[List[str]] = Field(None, min_length=1)
    gender: Optional[Gender] = None
    tags: Optional[List[str]] = None
    category_id: Optional[str] = Field(None, alias="categoryId")


class ProductResponse(ProductBase):
    """Schema for product responses including all fields"""
    id: str

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CategorySummary(BaseModel):
    """Category fields embedded in a product listing"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    user_id: Optional[str] = Field(None, alias="userId")


class PopulatedProductResponse(ProductResponse):
    """Product whose category id is expanded to a category summary"""
    category_id: Optional[CategorySummary] = Field(None, alias="categoryId")
