"""Stock status classification.

``classify_stock`` turns the outcome of one stock lookup into the label
shown next to a product.  It is a pure function of the lookup.
Precedence:

1. stock service unavailable          -> Stock Service Error
2. no stock record                     -> No Stock Record
3. record present but unreadable       -> Stock Info Unavailable
4. quantity <= 0                       -> Out of Stock
5. low-stock flag set                  -> Low Stock
6. otherwise                           -> In Stock

An empty shelf is reported as Out of Stock even when the stock service
also flags it as low.
"""

from __future__ import annotations

from typing import FrozenSet

from django.db import models

from modules.stock.gateway import LookupOutcome, StockLookup


class StockStatus(models.TextChoices):
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"
    NO_STOCK_RECORD = "No Stock Record"
    STOCK_SERVICE_ERROR = "Stock Service Error"
    STOCK_INFO_UNAVAILABLE = "Stock Info Unavailable"


# Statuses that can only come from a successfully read snapshot.
SNAPSHOT_STATUSES: FrozenSet[StockStatus] = frozenset(
    {StockStatus.IN_STOCK, StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK}
)

_FAILURE_STATUSES = {
    LookupOutcome.UNAVAILABLE: StockStatus.STOCK_SERVICE_ERROR,
    LookupOutcome.MISSING: StockStatus.NO_STOCK_RECORD,
    LookupOutcome.INVALID: StockStatus.STOCK_INFO_UNAVAILABLE,
}


def classify_stock(lookup: StockLookup) -> StockStatus:
    """Return the status label for a stock lookup."""
    if lookup.outcome in _FAILURE_STATUSES:
        return _FAILURE_STATUSES[lookup.outcome]

    snapshot = lookup.snapshot
    if snapshot.quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if snapshot.low_stock:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK
