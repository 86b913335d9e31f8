import re
from enum import Enum, auto
from urllib.parse import urlparse

ALLOWED_SCHEMES = ("http", "https")
TIKTOK_DOMAIN = "tiktok.com"

# Whitespace and ASCII control characters never appear in a usable URL
_FORBIDDEN_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")

# Dot-separated DNS labels: letters, digits, inner hyphens
_HOSTNAME = re.compile(
    r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)*$"
)


class UrlValidationResult(Enum):
    """URL validation result without throwing exceptions"""
    OK = auto()
    INVALID = auto()
    FOREIGN_HOST = auto()


VALIDATION_MESSAGES = {
    UrlValidationResult.INVALID: "Please enter a valid URL",
    UrlValidationResult.FOREIGN_HOST: "Please enter a valid TikTok URL",
}


class SecurityValidator:
    """
    Gatekeeper for every caller-supplied URL that reaches the extractor.
    Returns a result enum; callers map it to their own error shape.
    """

    @staticmethod
    def validate_url(url: str) -> UrlValidationResult:
        if not isinstance(url, str) or not url or _FORBIDDEN_CHARS.search(url):
            return UrlValidationResult.INVALID

        try:
            parsed = urlparse(url)
            hostname = parsed.hostname
            # Accessing .port raises ValueError on malformed ports
            parsed.port
        except ValueError:
            return UrlValidationResult.INVALID

        if parsed.scheme.lower() not in ALLOWED_SCHEMES or not hostname:
            return UrlValidationResult.INVALID

        if parsed.username is not None or parsed.password is not None:
            return UrlValidationResult.FOREIGN_HOST

        hostname = hostname.rstrip(".")
        if not _HOSTNAME.match(hostname):
            return UrlValidationResult.INVALID

        if hostname == TIKTOK_DOMAIN or hostname.endswith("." + TIKTOK_DOMAIN):
            return UrlValidationResult.OK

        return UrlValidationResult.FOREIGN_HOST

    @staticmethod
    def message_for(result: UrlValidationResult) -> str:
        return VALIDATION_MESSAGES[result]
