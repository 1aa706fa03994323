"""
Unit tests for ProductService
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.errors import ErrorKind, ErrorResponse, StoreError
from app.events import CategoryDeleted, EventBus, EventType
from app.schemas.category import CategoryCreate
from app.schemas.pagination import PaginationParams
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.product import ProductService


def product_payload(category_id, **overrides):
    data = {
        "name": "shirt",
        "sizes": ["M", "L"],
        "gender": "men",
        "categoryId": category_id,
    }
    data.update(overrides)
    return ProductCreate(**data)


@pytest.fixture
def bus():
    return MagicMock(spec=EventBus)


@pytest.fixture
def product_service(product_store, category_store, bus):
    return ProductService(product_store, category_store, bus)


class TestProductService:
    def test_subscribes_to_category_deleted(self, event_bus):
        service = ProductService(MagicMock(), MagicMock(), event_bus)

        assert event_bus.subscribers(EventType.CATEGORY_DELETED) == [service.handle_category_deleted]
        assert event_bus.subscribers(EventType.PRODUCT_CREATED) == []

    @pytest.mark.asyncio
    async def test_create_product(self, product_service, category_store, bus):
        category = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)

        product = await product_service.create_product(product_payload(category.id), user_id="admin-1")

        assert product.name == "Shirt"
        assert product.price == 10
        assert product.stock == 0
        assert product.tags == []
        assert product.user_id == "admin-1"
        assert product.category_id == category.id

        event = bus.publish.call_args.args[0]
        assert event.event_type == EventType.PRODUCT_CREATED
        assert event.payload() == {"productId": product.id, "categoryId": category.id}

    @pytest.mark.asyncio
    async def test_create_product_with_malformed_category(self, product_service, bus):
        with pytest.raises(ErrorResponse) as exc_info:
            await product_service.create_product(product_payload("not-an-id"), user_id=None)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid category ID format"
        bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_product_with_unknown_category(self, product_service, product_store, category_id, bus):
        with pytest.raises(ErrorResponse) as exc_info:
            await product_service.create_product(product_payload(category_id), user_id=None)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == f"Category with ID {category_id} not found"
        assert product_store.docs == {}
        bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_duplicate_product(self, product_service, category_store, bus):
        category = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        await product_service.create_product(product_payload(category.id), user_id=None)
        bus.publish.reset_mock()

        with pytest.raises(ErrorResponse) as exc_info:
            await product_service.create_product(product_payload(category.id), user_id=None)

        assert exc_info.value.status_code == 400
        assert exc_info.value.kind == ErrorKind.DUPLICATE_KEY
        bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_products_pagination(self, product_service, category_store):
        category = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        for i in range(5):
            await product_service.create_product(product_payload(category.id, name=f"Item {i}"), user_id=None)

        page = await product_service.get_products(PaginationParams(limit=2, offset=4))

        assert page.total == 5
        assert page.total_pages == 3
        assert page.current_page == 3
        assert [p.name for p in page.items] == ["Item 4"]

    @pytest.mark.asyncio
    async def test_get_product_not_found(self, product_service, product_id):
        with pytest.raises(ErrorResponse) as exc_info:
            await product_service.get_product(product_id)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_without_category_does_not_publish(self, product_service, category_store, bus):
        category = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        product = await product_service.create_product(product_payload(category.id), user_id=None)
        bus.publish.reset_mock()

        updated = await product_service.update_product(product.id, ProductUpdate(price=25, name="tee"))

        assert updated.price == 25
        assert updated.name == "Tee"
        assert updated.category_id == category.id
        bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_with_category_republishes_product_created(self, product_service, category_store, bus):
        clothes = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        shoes = await category_store.create(CategoryCreate(name="Shoes"), user_id=None)
        product = await product_service.create_product(product_payload(clothes.id), user_id=None)
        bus.publish.reset_mock()

        updated = await product_service.update_product(product.id, ProductUpdate(categoryId=shoes.id))

        assert updated.category_id == shoes.id
        event = bus.publish.call_args.args[0]
        assert event.event_type == EventType.PRODUCT_CREATED
        assert event.payload() == {"productId": product.id, "categoryId": shoes.id}

    @pytest.mark.asyncio
    async def test_update_with_unknown_category(self, product_service, category_store, category_id, bus):
        clothes = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        product = await product_service.create_product(product_payload(clothes.id), user_id=None)
        bus.publish.reset_mock()

        with pytest.raises(ErrorResponse) as exc_info:
            await product_service.update_product(product.id, ProductUpdate(categoryId=category_id))

        assert exc_info.value.status_code == 404
        bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_product_publishes_event(self, product_service, category_store, product_store, bus):
        category = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        product = await product_service.create_product(product_payload(category.id), user_id=None)

        await product_service.delete_product(product.id)

        assert product.id not in product_store.docs
        event = bus.publish.call_args.args[0]
        assert event.event_type == EventType.PRODUCT_DELETED
        assert event.payload() == {"productId": product.id}

    @pytest.mark.asyncio
    async def test_delete_missing_product(self, product_service, product_id, bus):
        with pytest.raises(ErrorResponse) as exc_info:
            await product_service.delete_product(product_id)

        assert exc_info.value.status_code == 404
        bus.publish.assert_not_called()


class TestCategoryDeletedHandler:
    @pytest.mark.asyncio
    async def test_clears_category_reference(self, product_service, category_store, product_store):
        clothes = await category_store.create(CategoryCreate(name="Clothes"), user_id=None)
        shoes = await category_store.create(CategoryCreate(name="Shoes"), user_id=None)
        shirt = await product_service.create_product(product_payload(clothes.id), user_id=None)
        boot = await product_service.create_product(product_payload(shoes.id, name="boot"), user_id=None)

        await product_service.handle_category_deleted(CategoryDeleted(category_id=clothes.id))

        assert "categoryId" not in product_store.docs[shirt.id]
        assert product_store.docs[boot.id]["categoryId"] == shoes.id

    @pytest.mark.asyncio
    async def test_store_failure_is_swallowed(self, event_bus, category_id):
        repository = MagicMock()
        repository.clear_category = AsyncMock(side_effect=StoreError(ErrorKind.UNCLASSIFIED, "down"))
        service = ProductService(repository, MagicMock(), event_bus)

        await service.handle_category_deleted(CategoryDeleted(category_id=category_id))

        repository.clear_category.assert_awaited_once_with(category_id)
