import time
from dataclasses import dataclass, field
from typing import Optional
from redis.asyncio import Redis

@dataclass
class RuntimeState:
    """Process-wide values filled in at startup"""
    redis: Optional[Redis] = None
    ytdlp_version: str = "unknown"
    started_at: float = field(default_factory=time.monotonic)

    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self.started_at)

state = RuntimeState()
