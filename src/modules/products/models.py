"""Product model: the single, flat catalogue entity.

Business rules implemented at the storage level:
- ``price`` is a whole-unit integer strictly greater than zero.
- ``stock`` is a non-negative integer (current available quantity).
- ``name`` must not be blank.
- Deletion is physical; there is no soft delete.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """Product row.  ``id`` is assigned by the database on first save."""

    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    price = models.PositiveIntegerField()
    stock = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
            models.CheckConstraint(
                condition=~models.Q(name=""),
                name="products_name_not_empty",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.name is not None:
            self.name = self.name.strip()
        if not self.name:
            raise ValidationError({"name": "Name must not be empty."})
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"#{self.id} - {self.name}"
