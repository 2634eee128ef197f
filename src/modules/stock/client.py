"""HTTP implementation of the stock gateway.

Talks to the stock service's REST API with ``httpx``.  Every call opens a
short-lived synchronous client with a bounded timeout; a timeout, a
refused connection, a 5xx or any status the API does not document is
reported as the *unavailable* failure class.

Routes::

    POST   /api/stocks               create
    PUT    /api/stocks/{productId}   update
    DELETE /api/stocks/{productId}   delete
    GET    /api/stocks/{productId}   read
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import httpx
import structlog
from django.conf import settings
from pydantic import ValidationError

from modules.core.middleware import get_correlation_id
from modules.stock.dtos import StockLevelsDTO, StockSnapshot
from modules.stock.exceptions import (
    StockConflict,
    StockNotFound,
    StockServiceUnavailable,
)
from modules.stock.gateway import IStockGateway, StockLookup

logger = structlog.get_logger(__name__)


class HttpStockGateway(IStockGateway):
    """``IStockGateway`` backed by the stock service's REST API."""

    STOCKS_PATH = "/api/stocks"

    def __init__(
        self,
        base_url: str,
        timeout: float = 3.0,
        health_path: str = "/actuator/health",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.health_path = health_path
        self._transport = transport

    @classmethod
    def from_settings(cls) -> HttpStockGateway:
        return cls(
            base_url=settings.STOCK_SERVICE_URL,
            timeout=settings.STOCK_SERVICE_TIMEOUT,
            health_path=settings.STOCK_SERVICE_HEALTH_PATH,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_stock(self, levels: StockLevelsDTO) -> None:
        response = self._request("POST", self.STOCKS_PATH, payload=levels.to_payload())
        if response.status_code == httpx.codes.CONFLICT:
            raise StockConflict(f"Stock for product {levels.product_id} already exists.")
        self._expect_success(response, "create")

    def update_stock(self, product_id: UUID, levels: StockLevelsDTO) -> None:
        response = self._request(
            "PUT", self._stock_path(product_id), payload=levels.to_payload()
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise StockNotFound(f"No stock record for product {product_id}.")
        self._expect_success(response, "update")

    def delete_stock(self, product_id: UUID) -> None:
        response = self._request("DELETE", self._stock_path(product_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            raise StockNotFound(f"No stock record for product {product_id}.")
        self._expect_success(response, "delete")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_stock(self, product_id: UUID) -> StockLookup:
        try:
            response = self._request("GET", self._stock_path(product_id))
        except StockServiceUnavailable as exc:
            return StockLookup.unavailable(str(exc))

        if response.status_code == httpx.codes.NOT_FOUND:
            return StockLookup.missing()
        if response.status_code != httpx.codes.OK:
            return StockLookup.unavailable(
                f"Unexpected status {response.status_code} from stock service."
            )
        return self._read_snapshot(product_id, response)

    def ping(self) -> bool:
        try:
            response = self._request("GET", self.health_path)
        except StockServiceUnavailable:
            return False
        return response.is_success

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _stock_path(self, product_id: UUID) -> str:
        return f"{self.STOCKS_PATH}/{product_id}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        cid = get_correlation_id()
        if cid:
            headers["X-Request-ID"] = cid
        return headers

    def _request(
        self, method: str, path: str, payload: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        log = logger.bind(method=method, path=path)
        log.debug("stock.request")
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers(),
                transport=self._transport,
            ) as client:
                response = client.request(method, path, json=payload)
        except httpx.TimeoutException as exc:
            log.warning("stock.request_timeout", timeout=self.timeout)
            raise StockServiceUnavailable(f"Stock service timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            log.warning("stock.request_failed", error=str(exc))
            raise StockServiceUnavailable(f"Stock service unreachable: {exc}") from exc
        log.debug("stock.response", status_code=response.status_code)
        return response

    @staticmethod
    def _expect_success(response: httpx.Response, operation: str) -> None:
        if not response.is_success:
            raise StockServiceUnavailable(
                f"Stock {operation} failed with status {response.status_code}."
            )

    @staticmethod
    def _read_snapshot(product_id: UUID, response: httpx.Response) -> StockLookup:
        if not response.content.strip():
            return StockLookup.missing()
        try:
            body = response.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError both derive from ValueError.
            return StockLookup.invalid(f"Stock payload is not JSON: {exc}")
        if body is None:
            return StockLookup.missing()
        try:
            snapshot = StockSnapshot.model_validate(body)
        except ValidationError as exc:
            return StockLookup.invalid(f"Stock payload rejected: {exc.error_count()} error(s)")
        if snapshot.product_id != product_id:
            return StockLookup.invalid(
                f"Stock payload is for product {snapshot.product_id}, not {product_id}."
            )
        return StockLookup.found(snapshot)
