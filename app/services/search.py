"""
Search across the catalog collections by id or by name
"""

from typing import List, Union

from app.core.errors import ErrorKind, ErrorResponse, StoreError, handle_store_error
from app.core.logger import logger
from app.repositories.category import CategoryRepository
from app.repositories.product import ProductRepository
from app.schemas.category import CategoryResponse
from app.schemas.product import PopulatedProductResponse
from app.utils.validators import contains_pattern_metacharacters, is_object_id

PRODUCT_COLLECTION = "product"
CATEGORY_COLLECTION = "categories"
ALLOWED_COLLECTIONS = (PRODUCT_COLLECTION, CATEGORY_COLLECTION)

SearchResult = Union[PopulatedProductResponse, CategoryResponse]


class SearchService:
    """Stateless dispatcher over the product and category repositories"""

    def __init__(self, product_repository: ProductRepository, category_repository: CategoryRepository):
        # collection -> (lookup by id, search by name). Products come back with
        # their category expanded, categories as stored.
        self._finders = {
            PRODUCT_COLLECTION: (product_repository.get_populated, product_repository.search_by_name),
            CATEGORY_COLLECTION: (category_repository.get_by_id, category_repository.search_by_name),
        }

    async def search(self, collection: str, term: str) -> List[SearchResult]:
        """
        Look up `term` in `collection`.

        A valid ObjectId is matched exactly against the id; anything else is a
        case-insensitive substring match on name. Terms containing pattern
        characters are rejected rather than escaped.
        """
        if collection not in ALLOWED_COLLECTIONS:
            raise ErrorResponse(
                f"Allowed collections are {','.join(ALLOWED_COLLECTIONS)}",
                status_code=400,
                kind=ErrorKind.VALIDATION,
            )

        find_by_id, find_by_name = self._finders[collection]

        try:
            if is_object_id(term):
                results = await self._search_by_id(find_by_id, term)
            else:
                if contains_pattern_metacharacters(term):
                    raise ErrorResponse(
                        f"Syntax error: character {term} not allowed",
                        status_code=400,
                        kind=ErrorKind.VALIDATION,
                    )
                results = await find_by_name(term)
        except StoreError as e:
            raise handle_store_error(e, collection)

        logger.info(
            f"Search in {collection} returned {len(results)} results",
            metadata={"event": "search", "collection": collection, "term": term, "count": len(results)}
        )
        return results

    async def _search_by_id(self, find_by_id, term: str) -> List[SearchResult]:
        try:
            return [await find_by_id(term)]
        except StoreError as e:
            if e.kind == ErrorKind.NOT_FOUND:
                return []
            raise
