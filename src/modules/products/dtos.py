"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation, with optional
  initial stock levels.
- ``UpdateProductDTO``: input for partial product updates.
- ``ProductOutputDTO``: output with the stored product fields.
- ``ProductViewDTO``: output enriched with stock details and status.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.products.status import SNAPSHOT_STATUSES, StockStatus
from modules.stock.dtos import StockSnapshot

if TYPE_CHECKING:
    from modules.products.models import Product

# Matches Product.price (max_digits=10, decimal_places=2).
Price = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` is a non-empty string.
    - ``price`` is a Decimal greater than zero that fits the stored
      column (10 digits, 2 decimal places).
    - ``quantity`` and ``reorder_level`` are non-negative.

    ``quantity`` left as ``None`` means "do not provision stock".
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Price
    description: str = ""
    image_url: str = ""
    quantity: Optional[int] = None
    reorder_level: int = 0

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("quantity", "reorder_level")
    @classmethod
    def levels_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock levels cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    Supplying ``quantity`` or ``reorder_level`` also updates the stock
    record in the stock service.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    price: Optional[Price] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    quantity: Optional[int] = None
    reorder_level: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("quantity", "reorder_level")
    @classmethod
    def levels_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock levels cannot be negative.")
        return v

    @property
    def touches_stock(self) -> bool:
        return self.quantity is not None or self.reorder_level is not None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str
    price: Decimal
    image_url: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> ProductOutputDTO:
        """Build an output DTO from a Product model instance."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            image_url=product.image_url,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductViewDTO(BaseModel):
    """A product joined with what the stock service reported for it.

    Built on demand for every read and never stored.  ``stock_details``
    is present exactly when ``stock_status`` was derived from a
    snapshot (In Stock, Low Stock, Out of Stock).
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str
    price: Decimal
    image_url: str
    stock_details: Optional[StockSnapshot] = None
    stock_status: StockStatus

    @model_validator(mode="after")
    def details_match_status(self) -> ProductViewDTO:
        has_details = self.stock_details is not None
        if has_details != (self.stock_status in SNAPSHOT_STATUSES):
            raise ValueError(
                f"stock_details must be present only for {sorted(SNAPSHOT_STATUSES)}."
            )
        return self

    @classmethod
    def from_entity(
        cls,
        product: Product,
        stock_status: StockStatus,
        stock_details: Optional[StockSnapshot] = None,
    ) -> ProductViewDTO:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            image_url=product.image_url,
            stock_details=stock_details,
            stock_status=stock_status,
        )
