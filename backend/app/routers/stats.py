from fastapi import APIRouter, Depends

from app.dependencies import get_stats_service
from app.schemas.common import ApiResponse
from app.schemas.stats import StatsSnapshot
from app.services.stats_service import StatsService

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=ApiResponse[StatsSnapshot])
async def stats(service: StatsService = Depends(get_stats_service)):
    """Dashboard statistics."""
    return ApiResponse[StatsSnapshot](data=await service.snapshot())
