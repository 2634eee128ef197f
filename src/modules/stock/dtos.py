"""Stock DTOs exchanged with the remote stock service.

The stock service speaks camelCase JSON (``productId``, ``reorderLevel``,
``lowStock``); the models accept either spelling on input and dump
camelCase with ``by_alias=True``.

- ``StockSnapshot``: a point-in-time stock record read from the service.
- ``StockLevelsDTO``: the levels sent when creating or updating a record.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class StockSnapshot(BaseModel):
    """Immutable stock record owned by the stock service.

    ``low_stock`` is computed by the remote service.  Older stock
    deployments omit it; in that case it is derived from
    ``quantity <= reorder_level``.
    """

    model_config = _WIRE_CONFIG

    product_id: UUID
    quantity: int = Field(ge=0)
    reorder_level: int = Field(default=0, ge=0)
    low_stock: bool = False

    @model_validator(mode="before")
    @classmethod
    def derive_low_stock(cls, data: Any) -> Any:
        if isinstance(data, dict) and "lowStock" not in data and "low_stock" not in data:
            quantity = data.get("quantity")
            reorder_level = data.get("reorderLevel", data.get("reorder_level", 0))
            if isinstance(quantity, int) and isinstance(reorder_level, int):
                data = {**data, "low_stock": quantity <= reorder_level}
        return data


class StockLevelsDTO(BaseModel):
    """Stock levels requested for a product.

    On update only the supplied fields are sent; the stock service keeps
    whatever it already holds for the others.  ``for_creation`` fills the
    gaps with zero, since a new record needs both values.
    """

    model_config = _WIRE_CONFIG

    product_id: UUID
    quantity: Optional[int] = Field(default=None, ge=0)
    reorder_level: Optional[int] = Field(default=None, ge=0)

    def for_creation(self) -> StockLevelsDTO:
        return self.model_copy(
            update={
                "quantity": self.quantity or 0,
                "reorder_level": self.reorder_level or 0,
            }
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the stock service, omitting unsupplied levels."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
