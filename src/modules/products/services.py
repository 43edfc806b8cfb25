"""Product service layer (Use Cases).

Orchestrates the Product use-cases over two injected collaborators: an
``IProductRepository`` (source of truth) and an ``ICache`` (TTL-bounded
accelerator, never authoritative).

Rules enforced here:
- Stock consumption requires ``0 < quantity <= stock``; stock never goes
  negative.
- The collection entry is refreshed on create and deleted on update and
  delete.  Per-product entries are deleted on update and delete.
- Cache writes and deletions happen only after the store call returned,
  i.e. after the repository's own atomic block committed.  Service methods
  are deliberately not wrapped in ``transaction.atomic`` for that reason.
- Every operation returns a ``ServiceResult``.  Domain failures are
  returned as-is; unexpected store errors are wrapped into the
  operation-specific ``*Failure`` kind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Tuple

import structlog
from pydantic import ValidationError

from modules.core.results import Failure, ServiceResult, Success
from modules.products.dtos import DeleteResponse, ProductOutputDTO, ProductResponse
from modules.products.exceptions import (
    InsufficientStock,
    InvalidQuantity,
    ProductCreationFailure,
    ProductDeletionFailure,
    ProductNotFound,
    ProductRetrievalFailure,
    ProductUpdateFailure,
)

if TYPE_CHECKING:
    from modules.core.cache import ICache
    from modules.products.dtos import CreateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

COLLECTION_CACHE_KEY = "allProductsCache"
DEFAULT_CACHE_TTL_MS = 300_000

MSG_CREATED = "Product created successfully"
MSG_LISTED = "Products retrieved successfully"
MSG_LISTED_FROM_CACHE = "Products retrieved successfully (from cache)"
MSG_RETRIEVED = "Product retrieved successfully"
MSG_RETRIEVED_FROM_CACHE = "Product retrieved successfully (from cache)"
MSG_UPDATED = "Product updated successfully"
MSG_DELETED = "Product deleted successfully"


def product_cache_key(product_id: int) -> str:
    return f"product_{product_id}"


class ProductService:
    """Application service for Product use-cases.

    Receives the repository and cache via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        cache: ICache,
        cache_ttl_ms: int = DEFAULT_CACHE_TTL_MS,
        cache_product_entries: bool = True,
    ) -> None:
        self._repo = repository
        self._cache = cache
        self._ttl_ms = cache_ttl_ms
        self._cache_product_entries = cache_product_entries

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> ServiceResult[ProductResponse]:
        """Persist a new product and append it to the cached collection."""
        log = logger.bind(name=dto.name)

        try:
            draft = self._repo.create(dto.to_fields())
            product = self._repo.save(draft)
            output = ProductOutputDTO.from_entity(product)
        except Exception:
            log.error("product.create_failed", exc_info=True)
            return Failure(ProductCreationFailure())

        self._append_to_collection(output)
        log.info("product.created", product_id=output.id)
        return Success(ProductResponse.single(MSG_CREATED, output))

    def update_product(self, id: int, quantity: int) -> ServiceResult[ProductResponse]:
        """Consume ``quantity`` units of stock from product ``id``.

        Failures:
            InvalidQuantity: ``quantity`` is not a positive integer.
            ProductNotFound: no product with ``id``.
            InsufficientStock: ``quantity`` exceeds current stock.
            ProductUpdateFailure: the store failed unexpectedly.
        """
        log = logger.bind(product_id=id, quantity=quantity)

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            log.warning("product.invalid_quantity")
            return Failure(InvalidQuantity(quantity))

        try:
            product = self._repo.get_by_id(id)
        except Exception:
            log.error("product.update_failed", stage="fetch", exc_info=True)
            return Failure(ProductUpdateFailure())

        if product is None:
            return Failure(ProductNotFound(id))

        if quantity > product.stock:
            log.warning("product.insufficient_stock", available=product.stock)
            return Failure(InsufficientStock(requested=quantity, available=product.stock))

        previous_stock = product.stock
        product.stock = previous_stock - quantity
        try:
            product = self._repo.save(product)
            output = ProductOutputDTO.from_entity(product)
        except Exception:
            log.error("product.update_failed", stage="save", exc_info=True)
            return Failure(ProductUpdateFailure())

        self._invalidate(id)
        log.info("product.stock_consumed", previous_stock=previous_stock, stock=output.stock)
        return Success(ProductResponse.single(MSG_UPDATED, output))

    def delete_product(self, id: int) -> ServiceResult[DeleteResponse]:
        """Physically delete product ``id`` and drop its cache entries."""
        log = logger.bind(product_id=id)

        try:
            product = self._repo.get_by_id(id)
            if product is not None:
                self._repo.remove(product)
        except Exception:
            log.error("product.delete_failed", exc_info=True)
            return Failure(ProductDeletionFailure())

        if product is None:
            return Failure(ProductNotFound(id))

        self._invalidate(id)
        log.info("product.deleted")
        return Success(DeleteResponse(message=MSG_DELETED))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_products(self) -> ServiceResult[ProductResponse]:
        """Read-through listing of every product with its count."""
        cached = self._read_collection()
        if cached is not None:
            products, count = cached
            logger.info("product.cache_hit", key=COLLECTION_CACHE_KEY, count=count)
            return Success(ProductResponse.many(MSG_LISTED_FROM_CACHE, products, count))

        logger.info("product.cache_miss", key=COLLECTION_CACHE_KEY)
        try:
            entities, count = self._repo.list_with_count()
            products = tuple(ProductOutputDTO.from_entity(p) for p in entities)
        except Exception:
            logger.error("product.list_failed", exc_info=True)
            return Failure(ProductRetrievalFailure())

        self._cache_set(
            COLLECTION_CACHE_KEY,
            {"data": [p.model_dump() for p in products], "count": count},
        )
        return Success(ProductResponse.many(MSG_LISTED, products, count))

    def get_product_by_id(self, id: int) -> ServiceResult[ProductResponse]:
        """Read-through lookup of a single product."""
        key = product_cache_key(id)

        if self._cache_product_entries:
            cached = self._read_product(key)
            if cached is not None:
                logger.info("product.cache_hit", key=key)
                return Success(ProductResponse.single(MSG_RETRIEVED_FROM_CACHE, cached))

        try:
            product = self._repo.get_by_id(id)
            output = ProductOutputDTO.from_entity(product) if product is not None else None
        except Exception:
            logger.error("product.retrieve_failed", product_id=id, exc_info=True)
            return Failure(ProductRetrievalFailure("Failed to retrieve product"))

        if output is None:
            return Failure(ProductNotFound(id))

        if self._cache_product_entries:
            self._cache_set(key, output.model_dump())
        logger.info("product.retrieved", product_id=id)
        return Success(ProductResponse.single(MSG_RETRIEVED, output))

    # ------------------------------------------------------------------
    # Cache helpers
    # ------------------------------------------------------------------

    def _read_collection(self) -> Optional[Tuple[Tuple[ProductOutputDTO, ...], int]]:
        payload = self._cache_get(COLLECTION_CACHE_KEY)
        if payload is None:
            return None
        try:
            products = tuple(ProductOutputDTO.model_validate(item) for item in payload["data"])
            count = int(payload["count"])
        except (KeyError, TypeError, ValueError, ValidationError):
            logger.warning("product.cache_corrupt", key=COLLECTION_CACHE_KEY)
            self._cache_delete(COLLECTION_CACHE_KEY)
            return None
        return products, count

    def _read_product(self, key: str) -> Optional[ProductOutputDTO]:
        payload = self._cache_get(key)
        if payload is None:
            return None
        try:
            return ProductOutputDTO.model_validate(payload)
        except ValidationError:
            logger.warning("product.cache_corrupt", key=key)
            self._cache_delete(key)
            return None

    def _append_to_collection(self, output: ProductOutputDTO) -> None:
        cached = self._read_collection()
        if cached is None:
            return
        products, count = cached
        self._cache_set(
            COLLECTION_CACHE_KEY,
            {
                "data": [p.model_dump() for p in products] + [output.model_dump()],
                "count": count + 1,
            },
        )

    def _invalidate(self, product_id: int) -> None:
        self._cache_delete(COLLECTION_CACHE_KEY)
        self._cache_delete(product_cache_key(product_id))
        logger.info("product.cache_invalidated", product_id=product_id)

    # Cache failures degrade to a miss; they never fail a committed store
    # operation.

    def _cache_get(self, key: str) -> Optional[Any]:
        try:
            return self._cache.get(key)
        except Exception:
            logger.error("product.cache_get_failed", key=key, exc_info=True)
            return None

    def _cache_set(self, key: str, value: Any) -> None:
        try:
            self._cache.set(key, value, self._ttl_ms)
        except Exception:
            logger.error("product.cache_set_failed", key=key, exc_info=True)

    def _cache_delete(self, key: str) -> None:
        try:
            self._cache.delete(key)
        except Exception:
            logger.error("product.cache_delete_failed", key=key, exc_info=True)
