import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.stock.client import HttpStockGateway

logger = structlog.get_logger()


def health_check(request: HttpRequest) -> JsonResponse:
    """Report the health of the service and its dependencies.

    The database and cache are required: if either is down the service
    is "unhealthy" (503).  The stock service is optional: products stay
    readable without it, so its outage only makes the service
    "degraded" (200).
    """
    services: Dict[str, Dict[str, Any]] = {}
    required_healthy = True

    # Check database
    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["database"] = {"status": "down"}
        required_healthy = False
        logger.error("health_check_db_failure")

    # Check cache (Redis)
    try:
        start = time.monotonic()
        cache.set("_health_check", "ok", 10)
        result = cache.get("_health_check")
        if result != "ok":
            raise ConnectionError("Cache read failed")
        services["cache"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["cache"] = {"status": "down"}
        required_healthy = False
        logger.error("health_check_cache_failure")

    # Check stock service
    start = time.monotonic()
    stock_up = HttpStockGateway.from_settings().ping()
    services["stock_service"] = {"status": "up" if stock_up else "down"}
    if stock_up:
        services["stock_service"]["response_time_ms"] = round(
            (time.monotonic() - start) * 1000, 2
        )
    else:
        logger.warning("health_check_stock_service_failure")

    if not required_healthy:
        overall = "unhealthy"
    elif not stock_up:
        overall = "degraded"
    else:
        overall = "healthy"
    status_code = 200 if required_healthy else 503

    logger.info("health_check_completed", status=overall)

    return JsonResponse(
        {
            "status": overall,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status_code,
    )
