import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from app.config import Config
from app.db.database import Database
from app.dependencies import get_db, get_stats_service
from app.exceptions import AppException
from app.services.stats_service import StatsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

STARTED_AT = time.monotonic()


def uptime_seconds() -> int:
    return int(time.monotonic() - STARTED_AT)


@router.get("/health")
async def health(db: Database = Depends(get_db)):
    """Health check endpoint."""
    reachable = await db.is_reachable()
    return {
        "status": "healthy",
        "service": Config.SERVICE_NAME,
        "version": Config.SERVICE_VERSION,
        "database": "connected" if reachable else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": uptime_seconds(),
    }


@router.get("/ready")
async def ready(db: Database = Depends(get_db)):
    """Readiness: 503 until the store answers."""
    if await db.is_reachable():
        return {"ready": True, "database": "connected"}
    return JSONResponse(status_code=503, content={"ready": False, "database": "disconnected"})


@router.get("/metrics", response_class=PlainTextResponse)
async def metrics(service: StatsService = Depends(get_stats_service)):
    """Prometheus text exposition."""
    try:
        counts = await service.counts()
    except AppException as e:
        logger.error(f"Failed to collect metrics: {e.message}")
        return PlainTextResponse("# Error collecting metrics\n", status_code=500)

    lines = [
        "# HELP products_total Total number of products in database",
        "# TYPE products_total gauge",
        f"products_total {counts.products}",
        "",
        "# HELP orders_total Total number of orders in database",
        "# TYPE orders_total gauge",
        f"orders_total {counts.orders}",
        "",
        "# HELP api_uptime_seconds API uptime in seconds",
        "# TYPE api_uptime_seconds gauge",
        f"api_uptime_seconds {uptime_seconds()}",
    ]
    return PlainTextResponse("\n".join(lines) + "\n")
