"""Product repository interface.

The store contract the ``ProductService`` depends on: draft creation,
insert-or-update, lookup by id, full listing with count and removal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product entity."""
