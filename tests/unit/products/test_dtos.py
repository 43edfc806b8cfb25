"""Unit tests for Product DTOs and response envelopes.

Covers:
- CreateProductDTO: strict validation, name normalisation and length, immutability.
- ConsumeStockDTO: strict integer parsing.
- ProductResponse / DeleteResponse: tagged data variant and wire shape.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.products.dtos import (
    ConsumeStockDTO,
    CreateProductDTO,
    DeleteResponse,
    ProductList,
    ProductOutputDTO,
    ProductResponse,
    SingleProduct,
)
from modules.products.models import Product

pytestmark = pytest.mark.unit


# ===========================================================================
# CreateProductDTO
# ===========================================================================


class TestCreateProductDTO:
    def test_valid_data(self):
        dto = CreateProductDTO(name="Widget", price=10, stock=20)
        assert dto.to_fields() == {"name": "Widget", "price": 10, "stock": 20}

    def test_stock_defaults_to_zero(self):
        dto = CreateProductDTO(name="Widget", price=10)
        assert dto.stock == 0

    def test_name_is_stripped(self):
        dto = CreateProductDTO(name="  Widget  ", price=10)
        assert dto.name == "Widget"

    def test_numeric_strings_rejected(self):
        with pytest.raises(ValidationError):
            CreateProductDTO(name="Widget", price="10", stock="3")

    @pytest.mark.parametrize("field", ["price", "stock"])
    def test_boolean_numbers_rejected(self, field):
        data = {"name": "Widget", "price": 10, "stock": 3, field: True}
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO.model_validate(data)
        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_name_at_max_length_accepted(self):
        dto = CreateProductDTO(name="  " + "x" * 255 + "  ", price=10)
        assert len(dto.name) == 255

    def test_name_over_max_length_rejected(self):
        with pytest.raises(ValidationError, match="at most 255 characters"):
            CreateProductDTO(name="x" * 256, price=10)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, name):
        with pytest.raises(ValidationError, match="Name must not be empty"):
            CreateProductDTO(name=name, price=10)

    @pytest.mark.parametrize("price", [0, -5])
    def test_non_positive_price_rejected(self, price):
        with pytest.raises(ValidationError, match="Price must be greater than zero"):
            CreateProductDTO(name="Widget", price=price)

    def test_fractional_price_rejected(self):
        with pytest.raises(ValidationError):
            CreateProductDTO(name="Widget", price=9.99)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="Stock cannot be negative"):
            CreateProductDTO(name="Widget", price=10, stock=-1)

    def test_missing_fields_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            CreateProductDTO.model_validate({})
        missing = {err["loc"][0] for err in exc_info.value.errors()}
        assert missing == {"name", "price"}

    def test_is_frozen(self):
        dto = CreateProductDTO(name="Widget", price=10)
        with pytest.raises(ValidationError):
            dto.price = 20


# ===========================================================================
# ConsumeStockDTO
# ===========================================================================


class TestConsumeStockDTO:
    def test_parses_integer(self):
        assert ConsumeStockDTO.model_validate({"quantity": 5}).quantity == 5

    @pytest.mark.parametrize("quantity", [True, False, "5", 2.0])
    def test_rejects_non_integer_json_values(self, quantity):
        with pytest.raises(ValidationError):
            ConsumeStockDTO.model_validate({"quantity": quantity})

    def test_does_not_enforce_positivity(self):
        assert ConsumeStockDTO(quantity=0).quantity == 0

    def test_rejects_non_numeric(self):
        with pytest.raises(ValidationError):
            ConsumeStockDTO(quantity="many")

    def test_rejects_missing(self):
        with pytest.raises(ValidationError):
            ConsumeStockDTO.model_validate({})


# ===========================================================================
# Envelopes
# ===========================================================================


def _output(**overrides) -> ProductOutputDTO:
    defaults = {"id": 1, "name": "Widget", "price": 10, "stock": 20}
    defaults.update(overrides)
    return ProductOutputDTO(**defaults)


class TestProductOutputDTO:
    def test_from_entity(self):
        product = Product(id=3, name="Widget", price=10, stock=4)
        dto = ProductOutputDTO.from_entity(product)
        assert dto.model_dump() == {"id": 3, "name": "Widget", "price": 10, "stock": 4}


class TestProductResponse:
    def test_single_payload(self):
        response = ProductResponse.single("ok", _output())

        assert isinstance(response.data, SingleProduct)
        assert response.to_payload() == {
            "success": True,
            "message": "ok",
            "data": {"id": 1, "name": "Widget", "price": 10, "stock": 20},
        }

    def test_many_payload_includes_count(self):
        products = (_output(id=1), _output(id=2, name="Gadget"))
        response = ProductResponse.many("ok", products, 2)

        assert isinstance(response.data, ProductList)
        payload = response.to_payload()
        assert payload["count"] == 2
        assert [p["id"] for p in payload["data"]] == [1, 2]

    def test_without_data_omits_field(self):
        response = ProductResponse(message="nothing")
        assert response.to_payload() == {"success": True, "message": "nothing"}

    def test_data_variant_is_discriminated(self):
        response = ProductResponse.model_validate(
            {"message": "ok", "data": {"kind": "many", "products": []}}
        )
        assert isinstance(response.data, ProductList)


class TestDeleteResponse:
    def test_payload_has_no_data(self):
        payload = DeleteResponse(message="gone").to_payload()
        assert payload == {"success": True, "message": "gone"}
        assert "data" not in payload
