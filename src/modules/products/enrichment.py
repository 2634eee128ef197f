"""Product enrichment (read side).

Joins products from the product store with what the stock service
reports for them.  The stock service may be slow, inconsistent or down;
enrichment never fails because of it.  Each product gets its own lookup
and its own status, so one bad lookup only degrades that product's view.
"""

from __future__ import annotations

import contextvars
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, List

import structlog

from modules.products.dtos import ProductViewDTO
from modules.products.exceptions import ProductNotFound
from modules.products.status import SNAPSHOT_STATUSES, classify_stock
from modules.stock.gateway import LookupOutcome

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository
    from modules.stock.gateway import IStockGateway

logger = structlog.get_logger(__name__)


class ProductEnrichmentService:
    """Builds ``ProductViewDTO`` objects for single and bulk reads.

    ``max_workers`` bounds the thread pool used for bulk lookups; with
    ``1`` the lookups run one after another on the calling thread.
    """

    def __init__(
        self,
        repository: IProductRepository,
        stock_gateway: IStockGateway,
        max_workers: int = 1,
    ) -> None:
        self._repo = repository
        self._stock = stock_gateway
        self._max_workers = max(1, max_workers)

    def get_product_view(self, id: str) -> ProductViewDTO:
        """Return one product joined with its stock status.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=str(id))
        return self.enrich(product)

    def list_product_views(self) -> List[ProductViewDTO]:
        """Return every product joined with its stock status, in store order."""
        products = self._repo.list()
        logger.info("product.enrich_batch", count=len(products))
        if self._max_workers == 1 or len(products) < 2:
            return [self.enrich(product) for product in products]

        # One context copy per task keeps the correlation id bound in workers.
        contexts = [contextvars.copy_context() for _ in products]
        workers = min(self._max_workers, len(products))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(
                executor.map(
                    lambda ctx, product: ctx.run(self.enrich, product),
                    contexts,
                    products,
                )
            )

    def enrich(self, product: Product) -> ProductViewDTO:
        lookup = self._stock.get_stock(product.id)
        status = classify_stock(lookup)
        log = logger.bind(product_id=str(product.id), stock_status=status.value)

        if lookup.outcome is LookupOutcome.UNAVAILABLE:
            log.error("stock.lookup_failed", error=lookup.error)
        elif lookup.outcome is LookupOutcome.INVALID:
            log.warning("stock.lookup_invalid", error=lookup.error)
        elif lookup.outcome is LookupOutcome.MISSING:
            log.warning("stock.lookup_missing")
        else:
            log.debug(
                "stock.lookup_found",
                quantity=lookup.snapshot.quantity,
                low_stock=lookup.snapshot.low_stock,
            )

        details = lookup.snapshot if status in SNAPSHOT_STATUSES else None
        return ProductViewDTO.from_entity(product, status, details)
