"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.  Lookups
return ``None`` for missing rows; the service layer decides how to
classify a missing entity.  Database errors propagate unchanged so the
service can wrap them into its operation-specific failure kinds.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import structlog

from django.db import transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def create(self, fields: Dict[str, Any]) -> Product:
        """Build an unsaved ``Product``; no query is issued."""
        return Product(**fields)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Insert or update a product; ``full_clean`` guards the invariants."""
        entity.full_clean()
        entity.save()
        logger.info("product.saved", product_id=entity.id, stock=entity.stock)
        return entity

    def get_by_id(self, id: int) -> Optional[Product]:
        return Product.objects.filter(id=id).first()

    def list_with_count(self) -> Tuple[List[Product], int]:
        products = list(Product.objects.all())
        return products, len(products)

    @transaction.atomic
    def remove(self, entity: Product) -> None:
        product_id = entity.id
        entity.delete()
        logger.info("product.removed", product_id=product_id)
