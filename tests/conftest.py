"""Shared test fixtures"""
import os

# Configure the service before any app module reads its settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("JWT_SECRET", "catalog-service-test-secret-0123456789")

import re
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.core.config import config
from app.core.errors import ErrorKind, StoreError
from app.events import EventBus
from app.models.product import DEFAULT_PRICE, DEFAULT_STOCK
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate, PopulatedCategoryResponse
from app.schemas.product import PopulatedProductResponse, ProductCreate, ProductResponse, ProductUpdate
from app.services.category import CategoryService
from app.services.container import ServiceContainer
from app.services.product import ProductService
from app.services.search import SearchService
from main import create_app


class InMemoryCategoryRepository:
    """Dict-backed stand-in for CategoryRepository with the same store semantics"""

    def __init__(self):
        self.docs: Dict[str, dict] = {}
        # Product store used to populate listings, linked by the fixtures
        self.products: Optional["InMemoryProductRepository"] = None

    def _check_id(self, category_id: str):
        if not ObjectId.is_valid(category_id):
            raise StoreError(ErrorKind.VALIDATION, "Invalid MongoDB Id")

    def _get(self, category_id: str) -> dict:
        self._check_id(category_id)
        if category_id not in self.docs:
            raise StoreError(ErrorKind.NOT_FOUND, f"The category with the id {category_id} not exists in database")
        return self.docs[category_id]

    def _response(self, category_id: str) -> CategoryResponse:
        doc = self.docs[category_id]
        return CategoryResponse(
            id=category_id,
            name=doc["name"],
            user_id=doc["userId"],
            product_ids=list(doc["productId"]),
        )

    def _ensure_unique(self, name: str, exclude: Optional[str] = None):
        for category_id, doc in self.docs.items():
            if doc["name"] == name and category_id != exclude:
                raise StoreError(ErrorKind.DUPLICATE_KEY, "E11000 duplicate key error", {"keyValue": {"name": name}})

    async def create(self, category_data: CategoryCreate, user_id: Optional[str]) -> CategoryResponse:
        self._ensure_unique(category_data.name)
        category_id = str(ObjectId())
        self.docs[category_id] = {"name": category_data.name, "userId": user_id, "productId": []}
        return self._response(category_id)

    async def get_by_id(self, category_id: str) -> CategoryResponse:
        self._get(category_id)
        return self._response(category_id)

    def _populated(self, category_id: str) -> PopulatedCategoryResponse:
        products = self.products.docs if self.products else {}
        summaries = [
            {"id": pid, "name": products[pid]["name"], "userId": products[pid]["userId"]}
            for pid in self.docs[category_id]["productId"] if pid in products
        ]
        doc = self.docs[category_id]
        return PopulatedCategoryResponse(id=category_id, name=doc["name"], user_id=doc["userId"], product_ids=summaries)

    async def list_categories(self, skip: int = 0, limit: int = 10) -> Tuple[List[PopulatedCategoryResponse], int]:
        ids = list(self.docs)
        return [self._populated(i) for i in ids[skip:skip + limit]], len(ids)

    async def update(self, category_id: str, category_data: CategoryUpdate) -> CategoryResponse:
        doc = self._get(category_id)
        changes = category_data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            self._ensure_unique(changes["name"], exclude=category_id)
        doc.update(changes)
        return self._response(category_id)

    async def delete(self, category_id: str) -> CategoryResponse:
        self._get(category_id)
        response = self._response(category_id)
        del self.docs[category_id]
        return response

    async def exists(self, category_id: str) -> bool:
        return ObjectId.is_valid(category_id) and category_id in self.docs

    async def search_by_name(self, term: str) -> List[CategoryResponse]:
        return [self._response(i) for i, doc in self.docs.items() if re.search(term, doc["name"], re.IGNORECASE)]

    async def add_product(self, category_id: str, product_id: str) -> CategoryResponse:
        doc = self._get(category_id)
        if product_id not in doc["productId"]:
            doc["productId"].append(product_id)
        return self._response(category_id)

    async def pull_product(self, product_id: str, keep_category_id: Optional[str] = None) -> int:
        modified = 0
        for category_id, doc in self.docs.items():
            if category_id != keep_category_id and product_id in doc["productId"]:
                doc["productId"] = [p for p in doc["productId"] if p != product_id]
                modified += 1
        return modified


class InMemoryProductRepository:
    """Dict-backed stand-in for ProductRepository with the same store semantics"""

    def __init__(self, categories: Optional[InMemoryCategoryRepository] = None):
        self.docs: Dict[str, dict] = {}
        self.categories = categories

    def _get(self, product_id: str) -> dict:
        if not ObjectId.is_valid(product_id):
            raise StoreError(ErrorKind.VALIDATION, "Invalid MongoDB Id")
        if product_id not in self.docs:
            raise StoreError(ErrorKind.NOT_FOUND, f"The product with the id {product_id} not exists in database")
        return self.docs[product_id]

    def _response(self, product_id: str) -> ProductResponse:
        return ProductResponse.model_validate({"id": product_id, **self.docs[product_id]})

    def _ensure_unique(self, name: str, exclude: Optional[str] = None):
        for product_id, doc in self.docs.items():
            if doc["name"] == name and product_id != exclude:
                raise StoreError(ErrorKind.DUPLICATE_KEY, "E11000 duplicate key error", {"keyValue": {"name": name}})

    async def create(self, product_data: ProductCreate, user_id: Optional[str]) -> ProductResponse:
        self._ensure_unique(product_data.name)
        product_id = str(ObjectId())
        self.docs[product_id] = {
            "name": product_data.name,
            "price": product_data.price if product_data.price is not None else DEFAULT_PRICE,
            "stock": product_data.stock if product_data.stock is not None else DEFAULT_STOCK,
            "description": product_data.description,
            "sizes": product_data.sizes,
            "gender": product_data.gender.value,
            "tags": product_data.tags or [],
            "userId": user_id,
            "categoryId": product_data.category_id,
        }
        return self._response(product_id)

    async def get_by_id(self, product_id: str) -> ProductResponse:
        self._get(product_id)
        return self._response(product_id)

    def _populated(self, product_id: str, fields=("name", "userId")) -> PopulatedProductResponse:
        doc = self.docs[product_id]
        categories = self.categories.docs if self.categories else {}
        category_id = doc.get("categoryId")
        summary = None
        if category_id in categories:
            summary = {"id": category_id, **{f: categories[category_id][f] for f in fields}}
        return PopulatedProductResponse.model_validate({"id": product_id, **doc, "categoryId": summary})

    async def get_populated(self, product_id: str) -> PopulatedProductResponse:
        self._get(product_id)
        return self._populated(product_id)

    async def list_products(self, skip: int = 0, limit: int = 10) -> Tuple[List[PopulatedProductResponse], int]:
        ids = list(self.docs)
        return [self._populated(i) for i in ids[skip:skip + limit]], len(ids)

    async def update(self, product_id: str, product_data: ProductUpdate) -> ProductResponse:
        doc = self._get(product_id)
        changes = product_data.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)
        if "name" in changes:
            self._ensure_unique(changes["name"], exclude=product_id)
        doc.update(changes)
        return self._response(product_id)

    async def delete(self, product_id: str) -> ProductResponse:
        self._get(product_id)
        response = self._response(product_id)
        del self.docs[product_id]
        return response

    async def exists(self, product_id: str) -> bool:
        return ObjectId.is_valid(product_id) and product_id in self.docs

    async def search_by_name(self, term: str) -> List[PopulatedProductResponse]:
        return [
            self._populated(i, fields=("name",))
            for i, doc in self.docs.items() if re.search(term, doc["name"], re.IGNORECASE)
        ]

    async def clear_category(self, category_id: str) -> int:
        modified = 0
        for doc in self.docs.values():
            if doc.get("categoryId") == category_id:
                doc.pop("categoryId")
                modified += 1
        return modified


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def category_store():
    return InMemoryCategoryRepository()


@pytest.fixture
def product_store(category_store):
    """Product store cross-linked with the category store for population"""
    store = InMemoryProductRepository(categories=category_store)
    category_store.products = store
    return store


def make_collection(name="test"):
    """Mock motor collection: query methods are awaitable, find() returns a cursor"""
    collection = MagicMock()
    collection.name = name
    for method in (
        "insert_one", "find_one", "find_one_and_update", "find_one_and_delete",
        "update_many", "count_documents",
    ):
        setattr(collection, method, AsyncMock())

    cursor = MagicMock()
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find.return_value = cursor
    collection.cursor = cursor
    return collection


@pytest.fixture
def mock_collection():
    return make_collection()


@pytest.fixture
def related_collection():
    """Collection that populated references are read from"""
    return make_collection("related")


@pytest.fixture
def category_id():
    return "507f1f77bcf86cd799439011"


@pytest.fixture
def product_id():
    return "507f191e810c19729de860ea"


def make_token(roles, user_id="user-123", secret=None):
    return jwt.encode(
        {"id": user_id, "roles": roles},
        secret or config.jwt_secret,
        algorithm=config.jwt_algorithm,
    )


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(['admin'], user_id='admin-123')}"}


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {make_token(['user'])}"}


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def container(category_store, product_store, event_bus):
    return ServiceContainer(
        event_bus=event_bus,
        category_service=CategoryService(category_store, event_bus),
        product_service=ProductService(product_store, category_store, event_bus),
        search_service=SearchService(product_store, category_store),
    )


@pytest.fixture
def client(container):
    """TestClient over the real routers, backed by the in-memory stores"""

    @asynccontextmanager
    async def lifespan(application):
        application.state.container = container
        yield
        await container.event_bus.drain()

    with TestClient(create_app(lifespan_handler=lifespan)) as test_client:
        yield test_client


@pytest.fixture
def drain(client):
    """Block until the event handlers scheduled by previous requests have run"""
    def _drain():
        client.portal.call(client.app.state.container.event_bus.drain)
    return _drain
