from fastapi import APIRouter
from redis.exceptions import RedisError

from tiktok_proxy.core.state import state
from tiktok_proxy.models.response import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Lightweight health check"""
    redis_status = "disabled"
    if state.redis:
        try:
            await state.redis.ping()
            redis_status = "connected"
        except RedisError:
            redis_status = "disconnected"

    return HealthResponse(
        status="ok",
        ytdlp_version=state.ytdlp_version,
        redis=redis_status,
        uptime_seconds=state.uptime_seconds()
    )
