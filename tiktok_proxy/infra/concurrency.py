import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from tiktok_proxy.config.settings import config

class ExtractorLimiter:
    """
    Bounds the number of extractor processes alive at once.
    Callers past the limit wait for a free slot instead of being rejected.
    """

    def __init__(self, max_concurrent: int):
        self.max_concurrent = max_concurrent
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._active = 0

    @property
    def semaphore(self) -> asyncio.Semaphore:
        # Created lazily so the semaphore belongs to the serving event loop
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
        return self._semaphore

    @property
    def active(self) -> int:
        return self._active

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        async with self.semaphore:
            self._active += 1
            try:
                yield
            finally:
                self._active -= 1

extractor_limiter = ExtractorLimiter(config.extractor.max_concurrent)
