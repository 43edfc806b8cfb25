"""Product failure kinds.

The service layer returns these inside a ``Failure`` result rather than
raising them; the API layer renders them with their ``status_code``.

Domain kinds (``ProductNotFound``, ``InsufficientStock``,
``InvalidQuantity``) always reach the caller unchanged.  The ``*Failure``
kinds wrap unexpected infrastructure errors for one operation each.
"""

from __future__ import annotations

from typing import Optional

from rest_framework import status

from modules.core.exceptions import DomainError


class ProductError(DomainError):
    """Base class of every product failure kind."""

    code = "product_error"


class ProductNotFound(ProductError):
    """No product exists with the requested id."""

    code = "product_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id: int) -> None:
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class InsufficientStock(ProductError):
    """Requested consumption exceeds the product's current stock."""

    code = "insufficient_stock"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, requested: Optional[int] = None, available: Optional[int] = None) -> None:
        self.requested = requested
        self.available = available
        super().__init__("Insufficient stock")


class InvalidQuantity(ProductError):
    """Consumption quantity is not a positive integer."""

    code = "invalid_quantity"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, quantity: object = None) -> None:
        self.quantity = quantity
        super().__init__("Quantity must be a positive integer")


class ProductCreationFailure(ProductError):
    code = "product_creation_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to create product"


class ProductUpdateFailure(ProductError):
    code = "product_update_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to update product"


class ProductRetrievalFailure(ProductError):
    code = "product_retrieval_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to retrieve products"


class ProductDeletionFailure(ProductError):
    code = "product_deletion_failed"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to delete product"
