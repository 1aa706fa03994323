"""
Category service containing business logic layer

Besides the category lifecycle, this service keeps each category's
`productId` list in step with product lifecycle events.
"""

from typing import Optional

from app.core.errors import ErrorResponse, StoreError, handle_store_error
from app.core.logger import logger
from app.events import CategoryDeleted, EventBus, EventType, ProductCreated, ProductDeleted
from app.repositories.category import CategoryRepository
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate, PopulatedCategoryResponse
from app.schemas.pagination import PaginatedResponse, PaginationParams
from app.utils.locks import KeyedLock
from app.utils.validators import normalize_name


class CategoryService:
    """Service layer for category business logic"""

    def __init__(self, repository: CategoryRepository, event_bus: EventBus):
        self.repository = repository
        self.event_bus = event_bus
        # Reconciliation for one product runs one event at a time
        self._product_locks = KeyedLock()

        event_bus.subscribe(EventType.PRODUCT_CREATED, self.handle_product_created)
        event_bus.subscribe(EventType.PRODUCT_DELETED, self.handle_product_deleted)

    def _handle_store_error(self, error: StoreError) -> ErrorResponse:
        return handle_store_error(error, "category")

    async def create_category(self, category_data: CategoryCreate, user_id: Optional[str]) -> CategoryResponse:
        """Create a category; name uniqueness is left to the store"""
        category_data = category_data.model_copy(update={"name": normalize_name(category_data.name)})

        try:
            category = await self.repository.create(category_data, user_id)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Created category {category.id}",
            user_id=user_id,
            metadata={"event": "create_category", "category_id": category.id, "name": category.name}
        )
        return category

    async def get_categories(self, pagination: PaginationParams) -> PaginatedResponse[PopulatedCategoryResponse]:
        try:
            categories, total = await self.repository.list_categories(pagination.offset, pagination.limit)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Fetched {len(categories)} categories",
            metadata={"event": "list_categories", "count": len(categories), "total": total}
        )
        return PaginatedResponse[PopulatedCategoryResponse].build(categories, total, pagination)

    async def get_category(self, category_id: str) -> CategoryResponse:
        try:
            return await self.repository.get_by_id(category_id)
        except StoreError as e:
            raise self._handle_store_error(e)

    async def update_category(self, category_id: str, category_data: CategoryUpdate) -> CategoryResponse:
        if category_data.name:
            category_data = category_data.model_copy(update={"name": normalize_name(category_data.name)})

        try:
            category = await self.repository.update(category_id, category_data)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Updated category {category_id}",
            metadata={"event": "update_category", "category_id": category_id}
        )
        return category

    async def delete_category(self, category_id: str) -> CategoryResponse:
        """Delete a category, then let products drop their reference to it"""
        try:
            category = await self.repository.delete(category_id)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Deleted category {category_id}",
            metadata={"event": "delete_category", "category_id": category_id}
        )

        self.event_bus.publish(CategoryDeleted(category_id=category_id))
        return category

    async def handle_product_created(self, event: ProductCreated) -> None:
        """
        Record the product under its category and drop it from any other one.

        Both steps are idempotent. Events for the same product are applied
        one after the other, so a later move never races an earlier one.
        Failures are logged and swallowed: the request that created the
        product has already succeeded.
        """
        if event.category_id is None:
            logger.debug(
                "PRODUCT_CREATED without category, nothing to link",
                metadata={"event": "product_created_no_category", "product_id": event.product_id}
            )
            return

        try:
            async with self._product_locks.hold(event.product_id):
                await self.repository.add_product(event.category_id, event.product_id)
                moved_from = await self.repository.pull_product(event.product_id, keep_category_id=event.category_id)

            logger.info(
                f"Linked product {event.product_id} to category {event.category_id}",
                metadata={
                    "event": "category_product_linked",
                    "payload": event.payload(),
                    "unlinked_from": moved_from,
                }
            )
        except Exception as e:
            logger.error(
                "Error updating category with product ID",
                error=e,
                metadata={"event": "category_product_link_failed", "payload": event.payload()}
            )

    async def handle_product_deleted(self, event: ProductDeleted) -> None:
        """Remove the deleted product from every category that lists it"""
        try:
            async with self._product_locks.hold(event.product_id):
                modified = await self.repository.pull_product(event.product_id)

            logger.info(
                f"Unlinked product {event.product_id} from {modified} categories",
                metadata={"event": "category_product_unlinked", "payload": event.payload(), "modified": modified}
            )
        except Exception as e:
            logger.error(
                "Error updating categories after product deletion",
                error=e,
                metadata={"event": "category_product_unlink_failed", "payload": event.payload()}
            )
