from .internal import DownloadIntent, MediaKind
from .request import InfoRequest
from .response import ErrorResponse, HealthResponse, VideoInfoResponse

__all__ = ["DownloadIntent", "ErrorResponse", "HealthResponse", "InfoRequest", "MediaKind", "VideoInfoResponse"]
