"""
Event publishing and consumption utilities
"""

from .bus import EventBus, EventHandler
from .schemas import (
    AnyCatalogEvent,
    CatalogEvent,
    CategoryDeleted,
    EventType,
    ProductCreated,
    ProductDeleted,
)

__all__ = [
    "EventBus",
    "EventHandler",
    "EventType",
    "CatalogEvent",
    "AnyCatalogEvent",
    "ProductCreated",
    "ProductDeleted",
    "CategoryDeleted",
]
