"""Product API views.

Exposes the ``ProductService`` over HTTP with a DRF ViewSet.  The view
only parses input into DTOs, calls the service and renders the returned
``ServiceResult``; failures carry their own status code.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.cache import DjangoCacheAdapter
from modules.core.exceptions import error_response
from modules.core.results import Failure, ServiceResult
from modules.products.dtos import ConsumeStockDTO, CreateProductDTO
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

logger = structlog.get_logger(__name__)


def build_product_service() -> ProductService:
    """Wire the service with the ORM repository and the configured cache."""
    return ProductService(
        repository=ProductDjangoRepository(),
        cache=DjangoCacheAdapter(settings.PRODUCT_CACHE_ALIAS),
        cache_ttl_ms=settings.PRODUCT_CACHE_TTL_MS,
        cache_product_entries=settings.PRODUCT_CACHE_PER_ID,
    )


def _parse_id(pk: Optional[str]) -> Optional[int]:
    """Parse a path id made of ASCII digits only; anything else is ``None``."""
    if not pk or not (pk.isascii() and pk.isdecimal()):
        return None
    return int(pk)


def _invalid_id_response() -> Response:
    return Response(
        {
            "success": False,
            "message": "Validation failed (numeric string is expected)",
            "code": "invalid_id",
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def _validation_error_response(exc: PydanticValidationError) -> Response:
    return Response(
        {
            "success": False,
            "message": "Invalid request payload",
            "code": "validation_error",
            "errors": [
                {
                    "attr": ".".join(str(part) for part in err["loc"]) or None,
                    "detail": err["msg"],
                }
                for err in exc.errors(include_url=False)
            ],
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


def _render(result: ServiceResult[Any], success_status: int = status.HTTP_200_OK) -> Response:
    if isinstance(result, Failure):
        return error_response(result.error)
    return Response(result.value.to_payload(), status=success_status)


def _body(request: Request, fields: tuple) -> Dict[str, Any]:
    data = request.data
    if not hasattr(data, "get"):
        return {}
    return {name: data.get(name) for name in fields if name in data}


class ProductViewSet(ViewSet):
    """HTTP surface for the Product resource.

    POST   /products        -> create_product
    GET    /products        -> get_products
    GET    /products/{id}   -> get_product_by_id
    PATCH  /products/{id}   -> update_product (stock consumption)
    DELETE /products/{id}   -> delete_product
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_product_service()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        return _render(self._service.get_products())

    def retrieve(self, request: Request, pk: Optional[str] = None) -> Response:
        product_id = _parse_id(pk)
        if product_id is None:
            return _invalid_id_response()
        return _render(self._service.get_product_by_id(product_id))

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        try:
            dto = CreateProductDTO.model_validate(_body(request, ("name", "price", "stock")))
        except PydanticValidationError as exc:
            logger.info("product.create_rejected", error_count=exc.error_count())
            return _validation_error_response(exc)
        return _render(self._service.create_product(dto), status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: Optional[str] = None) -> Response:
        product_id = _parse_id(pk)
        if product_id is None:
            return _invalid_id_response()
        try:
            dto = ConsumeStockDTO.model_validate(_body(request, ("quantity",)))
        except PydanticValidationError as exc:
            return _validation_error_response(exc)
        return _render(self._service.update_product(product_id, dto.quantity))

    def destroy(self, request: Request, pk: Optional[str] = None) -> Response:
        product_id = _parse_id(pk)
        if product_id is None:
            return _invalid_id_response()
        return _render(self._service.delete_product(product_id))
