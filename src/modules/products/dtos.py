"""Product DTOs and response envelopes for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  These are
the contracts between the API layer (DRF views) and the service.  All
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``ConsumeStockDTO``: input for stock consumption.
- ``ProductOutputDTO``: a product as returned to callers and cached.
- ``ProductResponse`` / ``DeleteResponse``: the uniform envelope.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from modules.products.models import Product

# Mirrors ``Product.name`` max_length.
NAME_MAX_LENGTH = 255


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is non-empty and at most 255 characters after stripping.
    - ``price`` is a whole number greater than zero.
    - ``stock`` is non-negative.

    Strict mode: numbers must arrive as JSON integers (no booleans, no
    numeric strings).
    """

    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    price: int
    stock: int = 0

    @field_validator("name")
    @classmethod
    def name_must_be_present_and_bounded(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("Name must not be empty.")
        if len(name) > NAME_MAX_LENGTH:
            raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters.")
        return name

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("stock")
    @classmethod
    def stock_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock cannot be negative.")
        return v

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump()


class ConsumeStockDTO(BaseModel):
    """Immutable DTO for stock consumption requests.

    Only the shape (a JSON integer, booleans excluded) is checked here;
    positivity is a business rule owned by ``ProductService.update_product``.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    quantity: int


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for a product in responses and cache payloads."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: int
    stock: int

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
        )


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


class SingleProduct(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["single"] = "single"
    product: ProductOutputDTO


class ProductList(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["many"] = "many"
    products: Tuple[ProductOutputDTO, ...] = ()


ProductData = Annotated[Union[SingleProduct, ProductList], Field(discriminator="kind")]


class ProductResponse(BaseModel):
    """Envelope returned by every read/create/update operation.

    ``data`` is a tagged variant: a single product, a list, or nothing.
    ``count`` is only set for list responses.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    count: Optional[int] = None
    data: Optional[ProductData] = None

    @classmethod
    def single(cls, message: str, product: ProductOutputDTO) -> ProductResponse:
        return cls(message=message, data=SingleProduct(product=product))

    @classmethod
    def many(cls, message: str, products: Tuple[ProductOutputDTO, ...], count: int) -> ProductResponse:
        return cls(message=message, count=count, data=ProductList(products=products))

    def to_payload(self) -> Dict[str, Any]:
        """Render the wire shape ``{success, message, count?, data?}``."""
        payload: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.count is not None:
            payload["count"] = self.count
        if isinstance(self.data, SingleProduct):
            payload["data"] = self.data.product.model_dump()
        elif isinstance(self.data, ProductList):
            payload["data"] = [p.model_dump() for p in self.data.products]
        return payload


class DeleteResponse(BaseModel):
    """Reduced envelope for deletions: no ``data`` field."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str

    def to_payload(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}
