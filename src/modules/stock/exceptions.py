"""Stock gateway exceptions.

Raised by ``IStockGateway`` write operations.  None of them ever
reaches an API client: the product service consumes them and carries
on, because the product record is the system of record and stock
writes are best-effort side effects.
"""

from __future__ import annotations


class StockGatewayError(Exception):
    """Base class for failures reported by the stock gateway."""


class StockNotFound(StockGatewayError):
    """No stock snapshot exists for the product (remote 404)."""


class StockConflict(StockGatewayError):
    """A stock snapshot already exists for the product (remote 409)."""


class StockServiceUnavailable(StockGatewayError):
    """The stock service could not be reached or answered with an error.

    Covers timeouts, refused connections, 5xx and any unexpected status.
    """
