from typing import Optional
from fastapi import APIRouter, Request, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from tiktok_proxy.models.internal import DownloadIntent, MediaKind
from tiktok_proxy.models.response import ErrorResponse
from tiktok_proxy.services.download import DownloadService
from tiktok_proxy.core.errors import ExtractorError, ExtractorErrorKind
from tiktok_proxy.core.security import SecurityValidator, UrlValidationResult
from tiktok_proxy.core.logging import log_error, log_warning
from tiktok_proxy.infra.rate_limit import download_rate_limiter

URL_REQUIRED_MESSAGE = "URL is required"
INVALID_TYPE_MESSAGE = "Invalid download type"
DOWNLOAD_FAILED_MESSAGE = "Failed to download content"

router = APIRouter()

@router.get(
    "/download/{media_type}",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"video/mp4": {}, "audio/mpeg": {}}},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    dependencies=[Depends(download_rate_limiter)]
)
async def download_media(
    request: Request,
    media_type: str,
    url: Optional[str] = Query(None, description="TikTok video URL")
):
    """Download video (mp4) or extracted audio (mp3)"""

    if not url:
        raise HTTPException(status_code=400, detail=URL_REQUIRED_MESSAGE)

    try:
        kind = MediaKind(media_type)
    except ValueError:
        raise HTTPException(status_code=400, detail=INVALID_TYPE_MESSAGE)

    validation_result = SecurityValidator.validate_url(url)
    if validation_result != UrlValidationResult.OK:
        log_warning(request, f"Rejected download URL ({validation_result.name})", error_kind=ExtractorErrorKind.VALIDATION.value)
        raise HTTPException(status_code=400, detail=SecurityValidator.message_for(validation_result))

    intent = DownloadIntent(url=url, kind=kind)

    try:
        prepared = await DownloadService.prepare(intent, request, is_disconnected=request.is_disconnected)
        body = await DownloadService.open_stream(prepared, request)
    except ExtractorError as e:
        log_error(request, f"Download error: {e}", error_kind=e.kind.value)
        raise HTTPException(status_code=500, detail=DOWNLOAD_FAILED_MESSAGE)
    except Exception as e:
        log_error(request, f"Unexpected download error: {e!r}", error_kind="unexpected")
        raise HTTPException(status_code=500, detail=DOWNLOAD_FAILED_MESSAGE)

    return StreamingResponse(body, media_type=prepared.media_type, headers=prepared.headers)
