from enum import Enum
from pydantic import BaseModel

class MediaKind(str, Enum):
    """Download modes exposed on /download/{type}"""
    VIDEO = "video"
    AUDIO = "audio"

    @property
    def extension(self) -> str:
        return "mp4" if self is MediaKind.VIDEO else "mp3"

    @property
    def content_type(self) -> str:
        return "video/mp4" if self is MediaKind.VIDEO else "audio/mpeg"

class DownloadIntent(BaseModel):
    """Internal download intent (separated from HTTP concerns)"""
    url: str
    kind: MediaKind
