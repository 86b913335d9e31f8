from .errors import ExtractorError, ExtractorErrorKind
from .security import SecurityValidator, UrlValidationResult

__all__ = ["ExtractorError", "ExtractorErrorKind", "SecurityValidator", "UrlValidationResult"]
