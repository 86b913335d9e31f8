"""
Derivation of the presentation document from raw yt-dlp metadata.

yt-dlp output is loosely typed and any field may be missing, so every
helper here accepts None and returns a printable fallback. "Missing"
follows truthiness: 0, "" and False fall through to the next candidate
just like None does.
"""
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from tiktok_proxy.models.response import (
    AudioTrack,
    Creator,
    VideoInfoResponse,
    VideoMetadata,
    VideoStats,
)
from tiktok_proxy.utils.urls import encode_uri_component

DOWNLOAD_PATH = "/api/tiktok/download"
DEFAULT_THUMBNAIL = "https://picsum.photos/seed/tiktok/1280/720"
DEFAULT_WIDTH = 1080
DEFAULT_HEIGHT = 1920

# ASCII word characters plus Latin-1 Supplement / Latin Extended-A letters
HASHTAG_PATTERN = re.compile(r"#[\w\u00C0-\u017F]+", re.ASCII)
UPLOAD_DATE_PATTERN = re.compile(r"^\d{8}$", re.ASCII)

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def first(*values: Any, default: Any = None) -> Any:
    """First truthy value, else default"""
    for value in values:
        if value:
            return value
    return default


def format_duration(seconds: Optional[float]) -> str:
    if not seconds:
        return "00:00"
    mins = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{mins}:{secs:02d}"


def format_file_size(num_bytes: Optional[float]) -> str:
    if not num_bytes:
        return "N/A"
    mb = num_bytes / 1024 / 1024
    return f"{mb:.2f} MB"


def format_bitrate(tbr: Optional[float]) -> str:
    if not tbr:
        return "N/A"
    # Half-up rounding, not banker's rounding
    return f"{math.floor(tbr + 0.5)} kbps"


def format_sample_rate(asr: Optional[float]) -> str:
    if not asr:
        return "44.1 kHz"
    return f"{asr / 1000:.1f} kHz"


def extract_hashtags(text: Optional[str]) -> List[str]:
    """Hashtags in order of appearance, '#' stripped, duplicates kept"""
    if not text:
        return []
    return [match[1:] for match in HASHTAG_PATTERN.findall(text)]


def _long_date(value: date) -> str:
    return f"{MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_upload_date(upload_date: Optional[str], timestamp: Optional[float]) -> str:
    """
    Render the upload day as e.g. "January 2, 2024".

    A YYYYMMDD upload_date wins, even when it is not a real calendar day
    (that renders as "Unknown"). Without one, a Unix timestamp in seconds
    is the fallback and is interpreted in UTC.
    """
    if isinstance(upload_date, str) and UPLOAD_DATE_PATTERN.match(upload_date):
        try:
            return _long_date(date(int(upload_date[:4]), int(upload_date[4:6]), int(upload_date[6:])))
        except ValueError:
            return "Unknown"

    if timestamp and isinstance(timestamp, (int, float)):
        try:
            moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return "Unknown"
        return _long_date(moment.date())

    return "Unknown"


def format_resolution(width: Optional[int], height: Optional[int]) -> str:
    return f"{width or DEFAULT_WIDTH}x{height or DEFAULT_HEIGHT}"


def download_urls(url: str) -> Dict[str, str]:
    """Self-issued links back to the download endpoint"""
    encoded = encode_uri_component(url)
    return {
        "video_url": f"{DOWNLOAD_PATH}/video?url={encoded}",
        "audio_url": f"{DOWNLOAD_PATH}/audio?url={encoded}",
    }


def _audio_size(info: Dict[str, Any]) -> str:
    approx = info.get("filesize_approx")
    estimate = approx * 0.1 if approx else None
    return format_file_size(first(info.get("audio_filesize"), estimate))


def build_video_info(url: str, info: Dict[str, Any]) -> VideoInfoResponse:
    """Shape one yt-dlp JSON document into the public response"""
    ext = info.get("ext")

    metadata = VideoMetadata(
        duration=format_duration(info.get("duration")),
        video_size=format_file_size(first(info.get("filesize"), info.get("filesize_approx"))),
        audio_size=_audio_size(info),
        resolution=format_resolution(info.get("width"), info.get("height")),
        format=ext.upper() if isinstance(ext, str) and ext else "MP4",
        codec=first(info.get("vcodec"), default="H.264"),
        fps=first(info.get("fps"), default=30),
        bitrate=format_bitrate(info.get("tbr")),
        width=first(info.get("width"), default=DEFAULT_WIDTH),
        height=first(info.get("height"), default=DEFAULT_HEIGHT),
        audio_codec=first(info.get("acodec"), default="AAC"),
        audio_channels=first(info.get("audio_channels"), default=2),
        audio_sample_rate=format_sample_rate(info.get("asr")),
    )

    creator = Creator(
        username=first(info.get("uploader_id"), info.get("uploader"), default="Unknown"),
        nickname=first(info.get("uploader"), info.get("creator"), default="TikTok User"),
        avatar=first(info.get("uploader_url"), info.get("channel_url"), default=""),
        verified=bool(info.get("uploader_verified")),
    )

    stats = VideoStats(
        views=info.get("view_count") or 0,
        likes=info.get("like_count") or 0,
        comments=info.get("comment_count") or 0,
        shares=info.get("repost_count") or 0,
        favorites=info.get("bookmark_count") or 0,
    )

    audio = AudioTrack(
        title=first(info.get("track"), info.get("alt_title"), default="Original Sound"),
        author=first(info.get("artist"), info.get("uploader"), default="Unknown Artist"),
    )

    return VideoInfoResponse(
        **download_urls(url),
        thumbnail=first(info.get("thumbnail"), default=DEFAULT_THUMBNAIL),
        title=first(info.get("title"), info.get("description"), default="TikTok Video"),
        description=first(info.get("description"), info.get("title"), default="No description available"),
        metadata=metadata,
        creator=creator,
        stats=stats,
        audio=audio,
        hashtags=extract_hashtags(first(info.get("description"), info.get("title"), default="")),
        upload_date=format_upload_date(info.get("upload_date"), info.get("timestamp")),
        video_id=str(first(info.get("id"), info.get("display_id"), default="unknown")),
    )
