"""
Product document model
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Store-level defaults applied when the client omits the field
DEFAULT_PRICE = 10
DEFAULT_STOCK = 0


class Gender(str, Enum):
    MEN = "men"
    WOMEN = "women"
    KID = "kid"
    UNISEX = "unisex"


class ProductBase(BaseModel):
    """Base Product model with all common fields"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    price: float = DEFAULT_PRICE
    description: Optional[str] = None
    stock: int = DEFAULT_STOCK
    sizes: List[str] = []
    gender: Optional[Gender] = None
    tags: List[str] = []
    user_id: Optional[str] = Field(None, alias="userId")

    # Cleared when the referenced category is deleted
    category_id: Optional[str] = Field(None, alias="categoryId")
