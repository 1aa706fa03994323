"""
Category repository for data access layer following Repository pattern
"""

from typing import List, Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument

from app.repositories.base import BaseRepository
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate, PopulatedCategoryResponse

# Product fields embedded when a category listing is populated
PRODUCT_SUMMARY_FIELDS = ("name", "userId")


class CategoryRepository(BaseRepository):
    """Repository for category data access operations"""

    entity = "category"

    def _doc_to_response(self, doc: dict) -> CategoryResponse:
        return CategoryResponse.model_validate(self._to_plain(doc))

    async def create(self, category_data: CategoryCreate, user_id: Optional[str]) -> CategoryResponse:
        """Insert a category with an empty product list"""
        doc = {
            "name": category_data.name,
            "userId": user_id,
            "productId": [],
        }
        with self._translate_errors("create", name=category_data.name):
            result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._doc_to_response(doc)

    async def get_by_id(self, category_id: str) -> CategoryResponse:
        doc = await self._find_one(category_id)
        if doc is None:
            raise self._not_found(category_id)
        return self._doc_to_response(doc)

    async def list_categories(self, skip: int = 0, limit: int = 10) -> Tuple[List[PopulatedCategoryResponse], int]:
        """One page of categories with their products expanded to summaries"""
        docs, total = await self._find_page({}, skip, limit)
        products = await self._lookup_related(
            (pid for doc in docs for pid in doc.get("productId", [])),
            PRODUCT_SUMMARY_FIELDS,
        )
        return [self._populate(doc, products) for doc in docs], total

    def _populate(self, doc: dict, products: dict) -> PopulatedCategoryResponse:
        plain = self._to_plain(doc)
        # References to products that no longer exist are dropped
        plain["productId"] = [products[pid] for pid in plain.get("productId", []) if pid in products]
        return PopulatedCategoryResponse.model_validate(plain)

    async def update(self, category_id: str, category_data: CategoryUpdate) -> CategoryResponse:
        """Apply only the fields that were set on the request"""
        oid = self._to_object_id(category_id)
        update_data = category_data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            return await self.get_by_id(category_id)

        with self._translate_errors("update", id=category_id):
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise self._not_found(category_id)
        return self._doc_to_response(doc)

    async def delete(self, category_id: str) -> CategoryResponse:
        """Physically delete a category and return what was removed"""
        oid = self._to_object_id(category_id)
        with self._translate_errors("delete", id=category_id):
            doc = await self.collection.find_one_and_delete({"_id": oid})
        if doc is None:
            raise self._not_found(category_id)
        return self._doc_to_response(doc)

    async def search_by_name(self, term: str) -> List[CategoryResponse]:
        return [self._doc_to_response(doc) for doc in await self._find_by_name(term)]

    async def add_product(self, category_id: str, product_id: str) -> CategoryResponse:
        """Add a product id to the category's set of products"""
        oid = self._to_object_id(category_id)
        pid = self._to_object_id(product_id)
        with self._translate_errors("add_product", id=category_id, product_id=product_id):
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$addToSet": {"productId": pid}},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise self._not_found(category_id)
        return self._doc_to_response(doc)

    async def pull_product(self, product_id: str, keep_category_id: Optional[str] = None) -> int:
        """
        Remove a product id from every category listing it, optionally sparing one.

        Returns the number of categories modified.
        """
        pid = self._to_object_id(product_id)
        query = {"productId": pid}
        if keep_category_id is not None and ObjectId.is_valid(keep_category_id):
            query["_id"] = {"$ne": ObjectId(keep_category_id)}

        with self._translate_errors("pull_product", product_id=product_id):
            result = await self.collection.update_many(query, {"$pull": {"productId": pid}})
        return result.modified_count
