"""Product API views.

Exposes ``ProductService`` (writes) and ``ProductEnrichmentService``
(reads enriched with stock) via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django.conf import settings
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.enrichment import ProductEnrichmentService
from modules.products.exceptions import ProductNotFound, ProductStoreError
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer, ProductViewSerializer
from modules.products.services import ProductService
from modules.stock.client import HttpStockGateway

_NOT_FOUND = {"detail": "Product not found."}
_NOT_AN_OBJECT = {"detail": "Request body must be a JSON object."}


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD operations.

    Reads go through ``ProductEnrichmentService`` and always succeed
    when the product exists, whatever state the stock service is in.
    Writes go through ``ProductService``.  Both share one
    ``ProductDjangoRepository`` and one ``HttpStockGateway`` (DIP).
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        repository = ProductDjangoRepository()
        gateway = HttpStockGateway.from_settings()
        self._service = ProductService(repository=repository, stock_gateway=gateway)
        self._enrichment = ProductEnrichmentService(
            repository=repository,
            stock_gateway=gateway,
            max_workers=settings.STOCK_LOOKUP_MAX_WORKERS,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        try:
            views = self._enrichment.list_product_views()
        except ProductStoreError as exc:
            return self._store_failure(exc)
        return Response(ProductViewSerializer(views, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        if pk is None:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        try:
            view = self._enrichment.get_product_view(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except ProductStoreError as exc:
            return self._store_failure(exc)
        return Response(ProductViewSerializer(view).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/

        ``quantity`` (and optionally ``reorder_level``) provisions the
        product's stock record in the stock service.
        """
        data = request.data
        if not isinstance(data, dict):
            return Response(_NOT_AN_OBJECT, status=status.HTTP_400_BAD_REQUEST)

        try:
            dto = CreateProductDTO(
                name=data.get("name", ""),
                price=data.get("price", 0),
                description=data.get("description", ""),
                image_url=data.get("image_url", ""),
                quantity=data.get("quantity"),
                reorder_level=data.get("reorder_level", 0),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.create_product(dto)
        except ProductStoreError as exc:
            return self._store_failure(exc)

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        data = request.data
        if not isinstance(data, dict):
            return Response(_NOT_AN_OBJECT, status=status.HTTP_400_BAD_REQUEST)

        try:
            dto = UpdateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                description=data.get("description"),
                image_url=data.get("image_url"),
                quantity=data.get("quantity"),
                reorder_level=data.get("reorder_level"),
            )
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if pk is None:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except ProductStoreError as exc:
            return self._store_failure(exc)

        out = ProductSerializer(product)
        return Response(out.data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        if pk is None:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except ProductStoreError as exc:
            return self._store_failure(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _store_failure(exc: ProductStoreError) -> Response:
        return Response(
            {"detail": str(exc)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
