from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError
from tiktok_proxy.core.security import SecurityValidator, UrlValidationResult

class InfoRequest(BaseModel):
    url: str = Field(..., description="TikTok video URL")

    @field_validator('url')
    @classmethod
    def validate_tiktok_url(cls, v):
        """Reject anything that is not a TikTok URL before the extractor sees it"""
        result = SecurityValidator.validate_url(v)
        if result != UrlValidationResult.OK:
            raise PydanticCustomError("tiktok_url", SecurityValidator.message_for(result))
        return v
