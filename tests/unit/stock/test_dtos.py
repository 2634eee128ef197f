"""Unit tests for stock DTOs and the StockLookup result type."""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from modules.stock.dtos import StockLevelsDTO, StockSnapshot
from modules.stock.gateway import LookupOutcome, StockLookup

pytestmark = pytest.mark.unit


class TestStockSnapshot:
    def test_reads_camel_case_payload(self):
        product_id = uuid.uuid4()
        snapshot = StockSnapshot.model_validate(
            {
                "productId": str(product_id),
                "quantity": 5,
                "reorderLevel": 10,
                "lowStock": True,
            }
        )
        assert snapshot.product_id == product_id
        assert snapshot.quantity == 5
        assert snapshot.reorder_level == 10
        assert snapshot.low_stock is True

    def test_low_stock_derived_when_absent(self):
        payload = {"productId": str(uuid.uuid4()), "quantity": 3, "reorderLevel": 3}
        assert StockSnapshot.model_validate(payload).low_stock is True

    def test_low_stock_not_derived_when_above_reorder_level(self):
        payload = {"productId": str(uuid.uuid4()), "quantity": 4, "reorderLevel": 3}
        assert StockSnapshot.model_validate(payload).low_stock is False

    def test_reported_flag_wins_over_derivation(self):
        payload = {
            "productId": str(uuid.uuid4()),
            "quantity": 1,
            "reorderLevel": 10,
            "lowStock": False,
        }
        assert StockSnapshot.model_validate(payload).low_stock is False

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            StockSnapshot.model_validate({"productId": str(uuid.uuid4()), "quantity": -1})

    def test_missing_product_id_rejected(self):
        with pytest.raises(ValidationError):
            StockSnapshot.model_validate({"quantity": 1})


class TestStockLevelsDTO:
    def test_payload_is_camel_case_without_unsupplied_levels(self):
        product_id = uuid.uuid4()
        levels = StockLevelsDTO(product_id=product_id, quantity=7)
        assert levels.to_payload() == {"productId": str(product_id), "quantity": 7}

    def test_for_creation_fills_missing_levels_with_zero(self):
        levels = StockLevelsDTO(product_id=uuid.uuid4(), reorder_level=4).for_creation()
        assert levels.quantity == 0
        assert levels.reorder_level == 4

    def test_for_creation_keeps_supplied_levels(self):
        levels = StockLevelsDTO(
            product_id=uuid.uuid4(), quantity=90, reorder_level=5
        ).for_creation()
        assert (levels.quantity, levels.reorder_level) == (90, 5)

    def test_negative_levels_rejected(self):
        with pytest.raises(ValidationError):
            StockLevelsDTO(product_id=uuid.uuid4(), reorder_level=-2)


class TestStockLookup:
    def test_found_carries_snapshot(self):
        snapshot = StockSnapshot(product_id=uuid.uuid4(), quantity=1)
        lookup = StockLookup.found(snapshot)
        assert lookup.outcome is LookupOutcome.FOUND
        assert lookup.snapshot is snapshot
        assert lookup.record_exists is True

    def test_found_without_snapshot_rejected(self):
        with pytest.raises(ValueError):
            StockLookup(LookupOutcome.FOUND)

    def test_failure_with_snapshot_rejected(self):
        snapshot = StockSnapshot(product_id=uuid.uuid4(), quantity=1)
        with pytest.raises(ValueError):
            StockLookup(LookupOutcome.MISSING, snapshot=snapshot)

    @pytest.mark.parametrize(
        ("lookup", "exists"),
        [
            (StockLookup.missing(), False),
            (StockLookup.unavailable("down"), False),
            (StockLookup.invalid("garbled"), True),
        ],
    )
    def test_record_exists(self, lookup, exists):
        assert lookup.record_exists is exists
