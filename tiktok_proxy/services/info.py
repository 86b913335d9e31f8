import json
import logging
from tiktok_proxy.config.settings import config
from tiktok_proxy.core.errors import ExtractorError, ExtractorErrorKind
from tiktok_proxy.models.response import VideoInfoResponse
from tiktok_proxy.services.format import build_video_info
from tiktok_proxy.services.ytdlp import YTDLPCommandBuilder, SubprocessExecutor

logger = logging.getLogger(__name__)

STDERR_PREVIEW_CHARS = 500

class VideoInfoService:
    """Video info fetching service"""

    @staticmethod
    async def fetch(url: str) -> VideoInfoResponse:
        """
        Run yt-dlp once in metadata mode and shape its JSON.
        Every call spawns its own process; identical concurrent requests
        are not coalesced.
        """
        cmd = YTDLPCommandBuilder.build_info_command(url)
        result = await SubprocessExecutor.run(cmd, timeout=config.extractor.info_timeout_seconds)

        if result.returncode != 0:
            error_msg = result.stderr.decode(errors="replace").strip()
            raise ExtractorError(
                ExtractorErrorKind.NONZERO_EXIT,
                f"exit code {result.returncode}: {error_msg[:STDERR_PREVIEW_CHARS]}"
            )

        try:
            info = json.loads(result.stdout.decode(errors="replace"))
        except ValueError as e:
            raise ExtractorError(ExtractorErrorKind.PARSE_FAILURE, str(e)) from e

        if not isinstance(info, dict):
            raise ExtractorError(
                ExtractorErrorKind.PARSE_FAILURE,
                f"expected a JSON object, got {type(info).__name__}"
            )

        logger.info(
            "Video info extracted: title=%r creator=%r views=%s likes=%s",
            info.get("title"),
            info.get("uploader") or info.get("creator"),
            info.get("view_count"),
            info.get("like_count"),
        )

        return build_video_info(url, info)
