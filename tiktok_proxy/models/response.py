from typing import List, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoMetadata(CamelModel):
    """Technical attributes of the video stream"""
    duration: str
    video_size: str
    audio_size: str
    resolution: str
    format: str
    codec: str
    fps: Union[int, float]
    bitrate: str
    width: int
    height: int
    audio_codec: str
    audio_channels: int
    audio_sample_rate: str


class Creator(CamelModel):
    username: str
    nickname: str
    avatar: str
    verified: bool


class VideoStats(CamelModel):
    views: int
    likes: int
    comments: int
    shares: int
    favorites: int


class AudioTrack(CamelModel):
    title: str
    author: str


class VideoInfoResponse(CamelModel):
    """Video information response"""
    video_url: str
    audio_url: str
    thumbnail: str
    title: str
    description: str
    metadata: VideoMetadata
    creator: Creator
    stats: VideoStats
    audio: AudioTrack
    hashtags: List[str]
    upload_date: str
    video_id: str


class ErrorResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    ytdlp_version: str
    redis: str
    uptime_seconds: int
