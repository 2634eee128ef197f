from unittest.mock import MagicMock, patch

import pytest

from rest_framework.test import APIClient

from modules.stock.gateway import IStockGateway, StockLookup


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def stock_gateway():
    """Stand-in for the stock service, wired into the product views.

    Defaults to "no stock record" for every product.
    """
    gateway = MagicMock(spec=IStockGateway)
    gateway.get_stock.return_value = StockLookup.missing()
    gateway.ping.return_value = True
    with patch(
        "modules.stock.client.HttpStockGateway.from_settings",
        return_value=gateway,
    ):
        yield gateway
