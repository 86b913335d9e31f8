import json
import os
import tempfile
import logging
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_PATH = os.getenv("CONFIG_PATH", "config.json")

class RedisConfig(BaseModel):
    enabled: bool = Field(default=False, description="Connect to Redis for rate limiting")
    url: str = Field(default="redis://redis:6379", description="Redis connection URL")
    socket_timeout: int = Field(default=5, description="Redis socket timeout in seconds")

class RateLimitConfig(BaseModel):
    enabled: bool = Field(default=True, description="Enable rate limiting (requires Redis)")
    max_requests: int = Field(default=30, ge=1, description="Max info requests per client per window")
    download_max_requests: int = Field(default=10, ge=1, description="Max download requests per client per window")
    window_seconds: int = Field(default=60, ge=1, description="Rate limit window in seconds")

class ExtractorConfig(BaseModel):
    binary: str = Field(default="yt-dlp", description="Extractor executable name or path")
    max_concurrent: int = Field(default=10, ge=1, le=100, description="Max concurrent extractor processes")
    info_timeout_seconds: float = Field(default=30.0, gt=0, description="Metadata dump timeout in seconds")
    download_timeout_seconds: float = Field(default=3600.0, gt=0, description="Download timeout in seconds")
    socket_timeout: int = Field(default=10, ge=1, description="Socket timeout passed to yt-dlp")
    retries: int = Field(default=3, ge=0, description="Network retries performed inside yt-dlp")
    temp_dir: str = Field(
        default=os.path.join(tempfile.gettempdir(), "tiktok_downloads"),
        description="Scratch directory for downloaded media"
    )
    disconnect_poll_seconds: float = Field(default=1.0, gt=0, description="Client disconnect poll interval")

class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="%(message)s", description="Log format")
    enable_rich: bool = Field(default=True, description="Enable rich console logging")

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

class ApiConfig(BaseModel):
    title: str = Field(default="TikTok Proxy API", description="API title")
    description: str = Field(default="TikTok metadata and download proxy backed by yt-dlp", description="API description")
    version: str = Field(default="1.0.0", description="API version")
    cors_origins: list = Field(default=["*"], description="CORS allowed origins")
    debug: bool = Field(default=False, description="Enable debug mode (exposes /docs)")

class Config(BaseSettings):
    """Main configuration model"""
    model_config = SettingsConfigDict(env_prefix="TIKTOK_PROXY_", env_nested_delimiter="__")

    redis: RedisConfig = Field(default_factory=RedisConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @classmethod
    def load_from_file(cls, config_path: str = "config.json") -> "Config":
        """Load configuration from JSON file"""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
            logger.info(f"Configuration loaded from {config_path}")
            return cls(**config_data)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load config from {config_path}: {str(e)}")
            logger.info("Using environment/default configuration")
            return cls()

def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration with priority: config.json > env vars > defaults"""
    config_path = config_path or CONFIG_PATH

    if os.path.exists(config_path):
        return Config.load_from_file(config_path)

    logger.info(f"Config file not found at {config_path}, using environment variables")
    return Config()

# Global config instance
config = load_config()
