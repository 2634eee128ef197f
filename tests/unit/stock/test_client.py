"""Unit tests for HttpStockGateway.

The stock service is replaced by ``httpx.MockTransport`` handlers.

Covers:
- get_stock: every response shape maps to one lookup outcome, never raises.
- create/update/delete: request shape and failure classification.
- ping: health probe.
- Correlation ID forwarding.
"""

from __future__ import annotations

import json
import uuid

import httpx
import pytest

from modules.core.middleware import correlation_id_var
from modules.stock.client import HttpStockGateway
from modules.stock.dtos import StockLevelsDTO
from modules.stock.exceptions import (
    StockConflict,
    StockNotFound,
    StockServiceUnavailable,
)
from modules.stock.gateway import LookupOutcome

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _gateway(handler) -> HttpStockGateway:
    return HttpStockGateway(
        base_url="http://stock.test/",
        timeout=0.5,
        transport=httpx.MockTransport(handler),
    )


def _respond(status_code: int, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, **kwargs)

    return handler


def _raise(exc_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    return handler


@pytest.fixture()
def product_id():
    return uuid.uuid4()


# ===========================================================================
# get_stock
# ===========================================================================


class TestGetStock:
    def test_found(self, product_id):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "productId": str(product_id),
                    "quantity": 5,
                    "reorderLevel": 10,
                    "lowStock": True,
                },
            )

        lookup = _gateway(handler).get_stock(product_id)

        assert lookup.outcome is LookupOutcome.FOUND
        assert lookup.snapshot.quantity == 5
        assert lookup.snapshot.low_stock is True
        assert seen[0].method == "GET"
        assert seen[0].url.path == f"/api/stocks/{product_id}"

    def test_404_is_missing(self, product_id):
        lookup = _gateway(_respond(404)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.MISSING

    def test_empty_body_is_missing(self, product_id):
        lookup = _gateway(_respond(200)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.MISSING

    def test_null_body_is_missing(self, product_id):
        lookup = _gateway(_respond(200, content=b"null")).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.MISSING

    def test_non_json_body_is_invalid(self, product_id):
        lookup = _gateway(_respond(200, text="<html>oops</html>")).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.INVALID

    @pytest.mark.parametrize(
        "content", [b"\xff\xfe\xfa", b'{"productId": "\xff\xfe"}']
    )
    def test_undecodable_body_is_invalid(self, product_id, content):
        lookup = _gateway(_respond(200, content=content)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.INVALID
        assert lookup.snapshot is None

    def test_negative_quantity_is_invalid(self, product_id):
        body = {"productId": str(product_id), "quantity": -3, "reorderLevel": 1}
        lookup = _gateway(_respond(200, json=body)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.INVALID
        assert lookup.snapshot is None

    def test_snapshot_for_other_product_is_invalid(self, product_id):
        body = {"productId": str(uuid.uuid4()), "quantity": 3, "reorderLevel": 1}
        lookup = _gateway(_respond(200, json=body)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.INVALID

    @pytest.mark.parametrize("status_code", [500, 502, 503, 401])
    def test_error_status_is_unavailable(self, product_id, status_code):
        lookup = _gateway(_respond(status_code)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.UNAVAILABLE
        assert str(status_code) in lookup.error

    @pytest.mark.parametrize(
        "exc_type", [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError]
    )
    def test_transport_failure_is_unavailable(self, product_id, exc_type):
        lookup = _gateway(_raise(exc_type)).get_stock(product_id)
        assert lookup.outcome is LookupOutcome.UNAVAILABLE


# ===========================================================================
# create_stock
# ===========================================================================


class TestCreateStock:
    def test_posts_camel_case_levels(self, product_id):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(201, json={})

        levels = StockLevelsDTO(product_id=product_id, quantity=5, reorder_level=2)
        _gateway(handler).create_stock(levels)

        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/stocks"
        assert json.loads(seen[0].content) == {
            "productId": str(product_id),
            "quantity": 5,
            "reorderLevel": 2,
        }

    def test_conflict(self, product_id):
        levels = StockLevelsDTO(product_id=product_id, quantity=1, reorder_level=0)
        with pytest.raises(StockConflict):
            _gateway(_respond(409)).create_stock(levels)

    def test_server_error_is_unavailable(self, product_id):
        levels = StockLevelsDTO(product_id=product_id, quantity=1, reorder_level=0)
        with pytest.raises(StockServiceUnavailable):
            _gateway(_respond(500)).create_stock(levels)

    def test_timeout_is_unavailable(self, product_id):
        levels = StockLevelsDTO(product_id=product_id, quantity=1, reorder_level=0)
        with pytest.raises(StockServiceUnavailable, match="timed out"):
            _gateway(_raise(httpx.ConnectTimeout)).create_stock(levels)


# ===========================================================================
# update_stock
# ===========================================================================


class TestUpdateStock:
    def test_puts_supplied_levels_only(self, product_id):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        levels = StockLevelsDTO(product_id=product_id, reorder_level=8)
        _gateway(handler).update_stock(product_id, levels)

        assert seen[0].method == "PUT"
        assert seen[0].url.path == f"/api/stocks/{product_id}"
        assert json.loads(seen[0].content) == {
            "productId": str(product_id),
            "reorderLevel": 8,
        }

    def test_not_found(self, product_id):
        levels = StockLevelsDTO(product_id=product_id, quantity=90)
        with pytest.raises(StockNotFound):
            _gateway(_respond(404)).update_stock(product_id, levels)

    def test_connection_refused_is_unavailable(self, product_id):
        levels = StockLevelsDTO(product_id=product_id, quantity=90)
        with pytest.raises(StockServiceUnavailable):
            _gateway(_raise(httpx.ConnectError)).update_stock(product_id, levels)


# ===========================================================================
# delete_stock
# ===========================================================================


class TestDeleteStock:
    def test_deletes(self, product_id):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        _gateway(handler).delete_stock(product_id)

        assert seen[0].method == "DELETE"
        assert seen[0].url.path == f"/api/stocks/{product_id}"

    def test_not_found(self, product_id):
        with pytest.raises(StockNotFound):
            _gateway(_respond(404)).delete_stock(product_id)

    def test_server_error_is_unavailable(self, product_id):
        with pytest.raises(StockServiceUnavailable):
            _gateway(_respond(503)).delete_stock(product_id)


# ===========================================================================
# ping / headers
# ===========================================================================


class TestPing:
    def test_healthy(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"status": "UP"})

        assert _gateway(handler).ping() is True
        assert seen[0].url.path == "/actuator/health"

    def test_unhealthy_status(self):
        assert _gateway(_respond(503)).ping() is False

    def test_unreachable(self):
        assert _gateway(_raise(httpx.ConnectError)).ping() is False


class TestCorrelationId:
    def test_forwards_current_correlation_id(self, product_id):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(404)

        token = correlation_id_var.set("cid-123")
        try:
            _gateway(handler).get_stock(product_id)
        finally:
            correlation_id_var.reset(token)

        assert seen[0].headers["X-Request-ID"] == "cid-123"

    def test_no_header_outside_a_request(self, product_id):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(404)

        _gateway(handler).get_stock(product_id)

        assert "X-Request-ID" not in seen[0].headers


class TestFromSettings:
    def test_reads_stock_service_settings(self, settings):
        settings.STOCK_SERVICE_URL = "http://stock.internal:8090/"
        settings.STOCK_SERVICE_TIMEOUT = 1.5
        settings.STOCK_SERVICE_HEALTH_PATH = "/health"

        gateway = HttpStockGateway.from_settings()

        assert gateway.base_url == "http://stock.internal:8090"
        assert gateway.timeout == 1.5
        assert gateway.health_path == "/health"
