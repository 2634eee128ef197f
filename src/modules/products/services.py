"""Product service layer (Use Cases).

Orchestrates writes to the product store and the remote stock service.
The product record is the system of record; every stock call is a
best-effort side effect that runs only after the product write has
succeeded and whose failure is logged and absorbed:

- create: stock is provisioned only when an initial quantity is given.
- update: a stock update that finds no record falls back to creating
  one (self-healing).
- delete: the stock record is removed only if the stock service still
  holds one.  A product deletion is never reverted.

A product store failure (``ProductStoreError``) aborts the operation
before any stock call is made.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List
from uuid import UUID

import structlog

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product
from modules.stock.dtos import StockLevelsDTO
from modules.stock.exceptions import StockGatewayError, StockNotFound
from modules.stock.gateway import LookupOutcome

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository
    from modules.stock.gateway import IStockGateway

logger = structlog.get_logger(__name__)

_PRODUCT_FIELDS = ("name", "price", "description", "image_url")


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` and an ``IStockGateway`` via
    constructor injection (DIP).
    """

    def __init__(
        self, repository: IProductRepository, stock_gateway: IStockGateway
    ) -> None:
        self._repo = repository
        self._stock = stock_gateway

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a product and, if requested, its stock record.

        Raises:
            ProductStoreError: the product could not be saved.
        """
        product = Product(
            name=dto.name,
            price=dto.price,
            description=dto.description,
            image_url=dto.image_url,
        )
        product = self._repo.save(product)
        log = logger.bind(product_id=str(product.id))
        log.info("product.created")

        if dto.quantity is not None:
            levels = StockLevelsDTO(
                product_id=product.id,
                quantity=dto.quantity,
                reorder_level=dto.reorder_level,
            )
            self._create_stock(levels)
        return product

    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductStoreError: the product could not be saved.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        for field in _PRODUCT_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        log = logger.bind(product_id=str(product.id))
        log.info("product.updated")

        if dto.touches_stock:
            levels = StockLevelsDTO(
                product_id=product.id,
                quantity=dto.quantity,
                reorder_level=dto.reorder_level,
            )
            self._update_stock(levels)
        return product

    def delete_product(self, id: str) -> None:
        """Delete a product, then its stock record if one exists.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductStoreError: the product could not be deleted.
        """
        if not self._repo.exists(id):
            logger.warning("product.delete_missing", product_id=str(id))
            raise ProductNotFound(f"Product {id} not found.")

        self._repo.delete(id)
        logger.info("product.deleted", product_id=str(id))
        self._delete_stock(UUID(str(id)))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        """Return every product, without stock information."""
        return self._repo.list()

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    # ------------------------------------------------------------------
    # Best-effort stock side effects
    # ------------------------------------------------------------------

    def _create_stock(self, levels: StockLevelsDTO) -> None:
        log = logger.bind(product_id=str(levels.product_id))
        try:
            self._stock.create_stock(levels.for_creation())
        except StockGatewayError as exc:
            log.warning(
                "stock.create_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return
        log.info("stock.created", quantity=levels.quantity)

    def _update_stock(self, levels: StockLevelsDTO) -> None:
        log = logger.bind(product_id=str(levels.product_id))
        try:
            self._stock.update_stock(levels.product_id, levels)
        except StockNotFound:
            log.info("stock.update_missing_record")
            self._create_stock(levels)
            return
        except StockGatewayError as exc:
            log.warning(
                "stock.update_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return
        log.info("stock.updated")

    def _delete_stock(self, product_id: UUID) -> None:
        log = logger.bind(product_id=str(product_id))
        lookup = self._stock.get_stock(product_id)
        if lookup.outcome is LookupOutcome.MISSING:
            log.debug("stock.delete_skipped_no_record")
            return
        if not lookup.record_exists:
            log.warning("stock.delete_skipped_unavailable", error=lookup.error)
            return
        try:
            self._stock.delete_stock(product_id)
        except StockNotFound:
            log.info("stock.delete_missing_record")
            return
        except StockGatewayError as exc:
            log.warning(
                "stock.delete_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return
        log.info("stock.deleted")
