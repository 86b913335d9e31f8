import logging
from fastapi import HTTPException, Request
from redis.exceptions import RedisError
from tiktok_proxy.infra.redis import get_redis
from tiktok_proxy.config.settings import config

logger = logging.getLogger(__name__)

# INCR the window counter; report (allowed, seconds until reset)
FIXED_WINDOW_SCRIPT = """
local hits = redis.call('INCR', KEYS[1])
if hits == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[2])
end
if hits > tonumber(ARGV[1]) then
    return {0, redis.call('TTL', KEYS[1])}
end
return {1, 0}
"""

class RedisRateLimiter:
    """
    Per-client fixed-window limiter used as a FastAPI dependency.
    Each scope keeps its own counter and budget; without Redis it lets
    every request through.
    """

    def __init__(self, scope: str):
        self.scope = scope

    def budget(self) -> int:
        if self.scope == "download":
            return config.rate_limit.download_max_requests
        return config.rate_limit.max_requests

    async def __call__(self, request: Request) -> None:
        redis = get_redis()
        if not config.rate_limit.enabled or redis is None:
            return

        client_ip = request.client.host if request.client else "unknown"
        key = f"rate:{self.scope}:{client_ip}"

        try:
            allowed, retry_after = await redis.eval(
                FIXED_WINDOW_SCRIPT, 1, key, self.budget(), config.rate_limit.window_seconds
            )
        except RedisError as e:
            logger.warning(f"Rate limiter unavailable, allowing request: {e}")
            return

        if not allowed:
            raise HTTPException(
                status_code=429,
                detail=f"Too many requests, retry in {retry_after} seconds",
                headers={"Retry-After": str(retry_after)}
            )

info_rate_limiter = RedisRateLimiter("info")
download_rate_limiter = RedisRateLimiter("download")
