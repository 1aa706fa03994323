"""
Typed catalog events carried by the in-process bus.

Each event serializes to the camelCase payload other subscribers rely on:
- PRODUCT_CREATED  -> {productId, categoryId}
- PRODUCT_DELETED  -> {productId}
- CATEGORY_DELETED -> {categoryId}
"""

from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    PRODUCT_CREATED = "PRODUCT_CREATED"
    PRODUCT_DELETED = "PRODUCT_DELETED"
    CATEGORY_DELETED = "CATEGORY_DELETED"


class CatalogEvent(BaseModel):
    """Base class for bus events; subclasses pin `event_type`"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    event_type: ClassVar[EventType]

    def payload(self) -> dict:
        """Wire representation of the event"""
        return self.model_dump(by_alias=True)


class ProductCreated(CatalogEvent):
    event_type: ClassVar[EventType] = EventType.PRODUCT_CREATED

    product_id: str = Field(..., alias="productId")
    category_id: Optional[str] = Field(None, alias="categoryId")


class ProductDeleted(CatalogEvent):
    event_type: ClassVar[EventType] = EventType.PRODUCT_DELETED

    product_id: str = Field(..., alias="productId")


class CategoryDeleted(CatalogEvent):
    event_type: ClassVar[EventType] = EventType.CATEGORY_DELETED

    category_id: str = Field(..., alias="categoryId")


AnyCatalogEvent = Union[ProductCreated, ProductDeleted, CategoryDeleted]
