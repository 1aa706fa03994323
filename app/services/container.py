"""
Application service container.

Services are built once per process so that each one registers its event
handlers exactly once on the shared bus.
"""

from dataclasses import dataclass

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongodb import get_category_collection, get_product_collection
from app.events import EventBus
from app.repositories.category import CategoryRepository
from app.repositories.product import ProductRepository
from app.services.category import CategoryService
from app.services.product import ProductService
from app.services.search import SearchService


@dataclass
class ServiceContainer:
    event_bus: EventBus
    category_service: CategoryService
    product_service: ProductService
    search_service: SearchService


def build_container(database: AsyncIOMotorDatabase, event_bus: EventBus = None) -> ServiceContainer:
    """Wire repositories, services and the event bus for one database"""
    event_bus = event_bus or EventBus()

    categories = get_category_collection(database)
    products = get_product_collection(database)

    # Each repository populates its references from the other collection
    category_repository = CategoryRepository(categories, related=products)
    product_repository = ProductRepository(products, related=categories)

    return ServiceContainer(
        event_bus=event_bus,
        category_service=CategoryService(category_repository, event_bus),
        product_service=ProductService(product_repository, category_repository, event_bus),
        search_service=SearchService(product_repository, category_repository),
    )
