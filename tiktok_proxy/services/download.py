import os
import time
import uuid
import aiofiles
from contextlib import suppress
from typing import AsyncIterator, Awaitable, Callable, Dict, NamedTuple, Optional
from fastapi import Request
from tiktok_proxy.config.settings import config
from tiktok_proxy.core.errors import ExtractorError, ExtractorErrorKind
from tiktok_proxy.core.logging import log_info, log_warning
from tiktok_proxy.models.internal import DownloadIntent
from tiktok_proxy.services.ytdlp import YTDLPCommandBuilder, SubprocessExecutor
from tiktok_proxy.utils.urls import safe_url_for_log

CHUNK_SIZE = 1024 * 1024

class PreparedDownload(NamedTuple):
    """A finished extractor run, ready to be streamed and then removed"""
    path: str
    size: int
    headers: Dict[str, str]
    media_type: str

def _remove(path: str) -> None:
    with suppress(OSError):
        os.remove(path)

class DownloadService:
    """Fetch-and-convert into a scratch file, then stream it once"""

    @staticmethod
    def ensure_temp_dir() -> str:
        temp_dir = config.extractor.temp_dir
        try:
            os.makedirs(temp_dir, exist_ok=True)
        except OSError as e:
            raise ExtractorError(ExtractorErrorKind.IO_FAILURE, f"cannot create {temp_dir}: {e}") from e
        return temp_dir

    @staticmethod
    async def prepare(
        intent: DownloadIntent,
        request: Request,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None
    ) -> PreparedDownload:
        """
        Run yt-dlp into a uniquely named temp file.
        Whatever goes wrong, no file is left behind.
        """
        temp_dir = DownloadService.ensure_temp_dir()
        kind = intent.kind
        timestamp = int(time.time() * 1000)
        output_path = os.path.join(
            temp_dir, f"tiktok-{kind.value}-{uuid.uuid4().hex}.{kind.extension}"
        )

        cmd = YTDLPCommandBuilder.build_download_command(intent.url, kind, output_path)
        log_info(request, f"Starting {kind.value} download of {safe_url_for_log(intent.url)}")

        def on_stderr(line: str) -> None:
            log_warning(request, f"yt-dlp: {line}")

        try:
            returncode = await SubprocessExecutor.run_logged(
                cmd,
                timeout=config.extractor.download_timeout_seconds,
                on_stderr=on_stderr,
                is_disconnected=is_disconnected,
                poll_interval=config.extractor.disconnect_poll_seconds
            )
            if returncode != 0:
                raise ExtractorError(ExtractorErrorKind.NONZERO_EXIT, f"yt-dlp exited with code {returncode}")

            try:
                size = os.path.getsize(output_path)
            except OSError as e:
                raise ExtractorError(ExtractorErrorKind.IO_FAILURE, f"output missing: {e}") from e
        except BaseException:
            _remove(output_path)
            raise

        filename = f"tiktok-{kind.value}-{timestamp}.{kind.extension}"
        headers = {
            'Content-Disposition': f'attachment; filename="{filename}"',
            'Content-Length': str(size),
            'X-Content-Type-Options': 'nosniff',
            'Cache-Control': 'no-cache',
        }
        log_info(request, f"Download finished. Streaming {size / 1024 / 1024:.1f} MB")
        return PreparedDownload(output_path, size, headers, kind.content_type)

    @staticmethod
    async def open_stream(prepared: PreparedDownload, request: Request) -> AsyncIterator[bytes]:
        """
        Open the file before the response starts so read errors can still
        become a 500, then hand back a generator that deletes it when done.
        """
        try:
            handle = await aiofiles.open(prepared.path, 'rb')
        except OSError as e:
            _remove(prepared.path)
            raise ExtractorError(ExtractorErrorKind.IO_FAILURE, f"cannot open output: {e}") from e

        async def generate():
            try:
                while True:
                    chunk = await handle.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk
            finally:
                await handle.close()
                _remove(prepared.path)
                log_info(request, f"Cleaned up {os.path.basename(prepared.path)}")

        return generate()
