from fastapi import APIRouter, Request, Depends, HTTPException
from tiktok_proxy.models.request import InfoRequest
from tiktok_proxy.models.response import ErrorResponse, VideoInfoResponse
from tiktok_proxy.services.info import VideoInfoService
from tiktok_proxy.core.errors import ExtractorError
from tiktok_proxy.core.logging import log_info, log_error
from tiktok_proxy.infra.rate_limit import info_rate_limiter
from tiktok_proxy.utils.urls import safe_url_for_log

INFO_FAILED_MESSAGE = "Failed to process TikTok URL"

router = APIRouter()

@router.post(
    "/info",
    response_model=VideoInfoResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(info_rate_limiter)]
)
async def get_video_info(request: Request, video_request: InfoRequest):
    """Get normalized video information"""

    log_info(request, f"Fetching info for {safe_url_for_log(video_request.url)}")

    try:
        video_info = await VideoInfoService.fetch(video_request.url)
    except ExtractorError as e:
        log_error(request, f"Video info error: {e}", error_kind=e.kind.value)
        raise HTTPException(status_code=500, detail=INFO_FAILED_MESSAGE)
    except Exception as e:
        log_error(request, f"Unexpected video info error: {e!r}", error_kind="unexpected")
        raise HTTPException(status_code=500, detail=INFO_FAILED_MESSAGE)

    log_info(request, f"Info retrieved: {video_info.title}")
    return video_info
