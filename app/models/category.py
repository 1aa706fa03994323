"""
Category document model
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryBase(BaseModel):
    """Fields stored on every category document"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    user_id: Optional[str] = Field(None, alias="userId")

    # Denormalized back-reference, maintained by product lifecycle events only
    product_ids: List[str] = Field(default_factory=list, alias="productId")
