"""
Product service containing business logic layer

Publishes product lifecycle events once the store has acknowledged the
mutation, and clears dangling category references when a category goes away.
"""

from typing import Optional

from app.core.errors import ErrorKind, ErrorResponse, StoreError, handle_store_error
from app.core.logger import logger
from app.events import CategoryDeleted, EventBus, EventType, ProductCreated, ProductDeleted
from app.repositories.category import CategoryRepository
from app.repositories.product import ProductRepository
from app.schemas.pagination import PaginatedResponse, PaginationParams
from app.schemas.product import PopulatedProductResponse, ProductCreate, ProductResponse, ProductUpdate
from app.utils.validators import is_object_id, normalize_name


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, repository: ProductRepository, category_repository: CategoryRepository, event_bus: EventBus):
        self.repository = repository
        self.category_repository = category_repository
        self.event_bus = event_bus

        event_bus.subscribe(EventType.CATEGORY_DELETED, self.handle_category_deleted)

    def _handle_store_error(self, error: StoreError) -> ErrorResponse:
        return handle_store_error(error, "product")

    async def _ensure_category(self, category_id: str) -> None:
        """Reject references to malformed or missing categories"""
        if not is_object_id(category_id):
            raise ErrorResponse("Invalid category ID format", status_code=400, kind=ErrorKind.VALIDATION)

        try:
            found = await self.category_repository.exists(category_id)
        except StoreError as e:
            raise self._handle_store_error(e)

        if not found:
            raise ErrorResponse(
                f"Category with ID {category_id} not found",
                status_code=404,
                kind=ErrorKind.NOT_FOUND,
            )

    async def create_product(self, product_data: ProductCreate, user_id: Optional[str]) -> ProductResponse:
        """Create a product, then announce it so its category can list it"""
        product_data = product_data.model_copy(update={"name": normalize_name(product_data.name)})
        await self._ensure_category(product_data.category_id)

        try:
            product = await self.repository.create(product_data, user_id)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Created product {product.id}",
            user_id=user_id,
            metadata={"event": "create_product", "product_id": product.id, "category_id": product.category_id}
        )

        self.event_bus.publish(ProductCreated(product_id=product.id, category_id=product_data.category_id))
        return product

    async def get_products(self, pagination: PaginationParams) -> PaginatedResponse[PopulatedProductResponse]:
        try:
            products, total = await self.repository.list_products(pagination.offset, pagination.limit)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Fetched {len(products)} products",
            metadata={"event": "list_products", "count": len(products), "total": total}
        )
        return PaginatedResponse[PopulatedProductResponse].build(products, total, pagination)

    async def get_product(self, product_id: str) -> ProductResponse:
        try:
            return await self.repository.get_by_id(product_id)
        except StoreError as e:
            raise self._handle_store_error(e)

    async def update_product(self, product_id: str, product_data: ProductUpdate) -> ProductResponse:
        """
        Partially update a product.

        When the request moves the product to a category, PRODUCT_CREATED is
        published again so the category lists follow the move.
        """
        if product_data.name:
            product_data = product_data.model_copy(update={"name": normalize_name(product_data.name)})
        if product_data.category_id is not None:
            await self._ensure_category(product_data.category_id)

        try:
            product = await self.repository.update(product_id, product_data)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Updated product {product_id}",
            metadata={"event": "update_product", "product_id": product_id}
        )

        if product_data.category_id is not None:
            self.event_bus.publish(ProductCreated(product_id=product.id, category_id=product_data.category_id))
        return product

    async def delete_product(self, product_id: str) -> ProductResponse:
        """Delete a product, then let categories drop it from their lists"""
        try:
            product = await self.repository.delete(product_id)
        except StoreError as e:
            raise self._handle_store_error(e)

        logger.info(
            f"Deleted product {product_id}",
            metadata={"event": "delete_product", "product_id": product_id}
        )

        self.event_bus.publish(ProductDeleted(product_id=product_id))
        return product

    async def handle_category_deleted(self, event: CategoryDeleted) -> None:
        """Leave products of a deleted category uncategorized"""
        try:
            modified = await self.repository.clear_category(event.category_id)

            logger.info(
                f"Cleared category {event.category_id} from {modified} products",
                metadata={"event": "product_category_cleared", "payload": event.payload(), "modified": modified}
            )
        except Exception as e:
            logger.error(
                "Error updating products after category deletion",
                error=e,
                metadata={"event": "product_category_clear_failed", "payload": event.payload()}
            )
