"""
Product repository for data access layer following Repository pattern
"""

from typing import List, Optional, Tuple

from pymongo import ReturnDocument

from app.models.product import DEFAULT_PRICE, DEFAULT_STOCK
from app.repositories.base import BaseRepository
from app.schemas.product import PopulatedProductResponse, ProductCreate, ProductResponse, ProductUpdate

# Category fields embedded when products are populated
CATEGORY_SUMMARY_FIELDS = ("name", "userId")
CATEGORY_NAME_FIELDS = ("name",)


class ProductRepository(BaseRepository):
    """Repository for product data access operations"""

    entity = "product"

    def _doc_to_response(self, doc: dict) -> ProductResponse:
        return ProductResponse.model_validate(self._to_plain(doc))

    async def create(self, product_data: ProductCreate, user_id: Optional[str]) -> ProductResponse:
        """Insert a product, applying store defaults for price and stock"""
        doc = {
            "name": product_data.name,
            "price": product_data.price if product_data.price is not None else DEFAULT_PRICE,
            "stock": product_data.stock if product_data.stock is not None else DEFAULT_STOCK,
            "sizes": product_data.sizes,
            "gender": product_data.gender.value,
            "tags": product_data.tags or [],
            "userId": user_id,
            "categoryId": self._to_object_id(product_data.category_id),
        }
        if product_data.description is not None:
            doc["description"] = product_data.description

        with self._translate_errors("create", name=product_data.name):
            result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._doc_to_response(doc)

    async def get_by_id(self, product_id: str) -> ProductResponse:
        doc = await self._find_one(product_id)
        if doc is None:
            raise self._not_found(product_id)
        return self._doc_to_response(doc)

    async def get_populated(self, product_id: str) -> PopulatedProductResponse:
        """Fetch one product with its category expanded"""
        doc = await self._find_one(product_id)
        if doc is None:
            raise self._not_found(product_id)
        populated = await self._populate([doc], CATEGORY_SUMMARY_FIELDS)
        return populated[0]

    async def list_products(self, skip: int = 0, limit: int = 10) -> Tuple[List[PopulatedProductResponse], int]:
        """One page of products with their category expanded"""
        docs, total = await self._find_page({}, skip, limit)
        return await self._populate(docs, CATEGORY_SUMMARY_FIELDS), total

    async def _populate(self, docs: List[dict], fields) -> List[PopulatedProductResponse]:
        categories = await self._lookup_related(
            (doc["categoryId"] for doc in docs if doc.get("categoryId") is not None),
            fields,
        )
        results = []
        for doc in docs:
            plain = self._to_plain(doc)
            # A reference to a missing category is rendered as no category
            plain["categoryId"] = categories.get(plain.get("categoryId"))
            results.append(PopulatedProductResponse.model_validate(plain))
        return results

    async def update(self, product_id: str, product_data: ProductUpdate) -> ProductResponse:
        """Apply only the fields that were set on the request"""
        oid = self._to_object_id(product_id)
        update_data = product_data.model_dump(
            mode="json", by_alias=True, exclude_unset=True, exclude_none=True
        )
        if "categoryId" in update_data:
            update_data["categoryId"] = self._to_object_id(update_data["categoryId"])
        if not update_data:
            return await self.get_by_id(product_id)

        with self._translate_errors("update", id=product_id):
            doc = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise self._not_found(product_id)
        return self._doc_to_response(doc)

    async def delete(self, product_id: str) -> ProductResponse:
        """Physically delete a product and return what was removed"""
        oid = self._to_object_id(product_id)
        with self._translate_errors("delete", id=product_id):
            doc = await self.collection.find_one_and_delete({"_id": oid})
        if doc is None:
            raise self._not_found(product_id)
        return self._doc_to_response(doc)

    async def search_by_name(self, term: str) -> List[PopulatedProductResponse]:
        """Name search results carry only the category name"""
        return await self._populate(await self._find_by_name(term), CATEGORY_NAME_FIELDS)

    async def clear_category(self, category_id: str) -> int:
        """
        Unset categoryId on every product pointing at the category.

        Returns the number of products modified.
        """
        cid = self._to_object_id(category_id)
        with self._translate_errors("clear_category", category_id=category_id):
            result = await self.collection.update_many(
                {"categoryId": cid},
                {"$unset": {"categoryId": ""}},
            )
        return result.modified_count
