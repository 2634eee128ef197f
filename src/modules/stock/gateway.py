"""Stock gateway interface.

The product service talks to the remote stock service only through
``IStockGateway``.  Writes raise the exceptions in
``modules.stock.exceptions``; the read path never raises and returns a
``StockLookup`` instead, so callers classify the outcome without
exception-driven control flow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID

if TYPE_CHECKING:
    from modules.stock.dtos import StockLevelsDTO, StockSnapshot


class LookupOutcome(Enum):
    FOUND = "found"
    # The stock service answered that no record exists.
    MISSING = "missing"
    # The stock service could not be reached, timed out or failed.
    UNAVAILABLE = "unavailable"
    # A response arrived but could not be read as a snapshot.
    INVALID = "invalid"


@dataclass(frozen=True)
class StockLookup:
    """Result of a single ``get_stock`` call."""

    outcome: LookupOutcome
    snapshot: Optional[StockSnapshot] = None
    error: str = ""

    def __post_init__(self) -> None:
        if (self.outcome is LookupOutcome.FOUND) != (self.snapshot is not None):
            raise ValueError("A snapshot is carried only by a FOUND lookup.")

    @classmethod
    def found(cls, snapshot: StockSnapshot) -> StockLookup:
        return cls(LookupOutcome.FOUND, snapshot=snapshot)

    @classmethod
    def missing(cls) -> StockLookup:
        return cls(LookupOutcome.MISSING)

    @classmethod
    def unavailable(cls, error: str) -> StockLookup:
        return cls(LookupOutcome.UNAVAILABLE, error=error)

    @classmethod
    def invalid(cls, error: str) -> StockLookup:
        return cls(LookupOutcome.INVALID, error=error)

    @property
    def record_exists(self) -> bool:
        """``True`` when the stock service holds a record for the product."""
        return self.outcome in (LookupOutcome.FOUND, LookupOutcome.INVALID)


class IStockGateway(ABC):
    """Contract for the remote stock service."""

    @abstractmethod
    def create_stock(self, levels: StockLevelsDTO) -> None:
        """Create the stock record for ``levels.product_id``.

        Raises:
            StockConflict: a record already exists for the product.
            StockServiceUnavailable: the call failed for any other reason.
        """

    @abstractmethod
    def update_stock(self, product_id: UUID, levels: StockLevelsDTO) -> None:
        """Update the stock record of a product.

        Raises:
            StockNotFound: no record exists for the product.
            StockServiceUnavailable: the call failed for any other reason.
        """

    @abstractmethod
    def delete_stock(self, product_id: UUID) -> None:
        """Delete the stock record of a product.

        Raises:
            StockNotFound: no record exists for the product.
            StockServiceUnavailable: the call failed for any other reason.
        """

    @abstractmethod
    def get_stock(self, product_id: UUID) -> StockLookup:
        """Read the stock record of a product.  Never raises."""

    @abstractmethod
    def ping(self) -> bool:
        """Return ``True`` when the stock service reports itself healthy."""
