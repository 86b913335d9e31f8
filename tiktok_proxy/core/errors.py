from enum import Enum


class ExtractorErrorKind(str, Enum):
    """Internal failure categories, logged but never returned to callers"""
    VALIDATION = "validation"
    SPAWN_FAILURE = "spawn_failure"
    NONZERO_EXIT = "nonzero_exit"
    PARSE_FAILURE = "parse_failure"
    IO_FAILURE = "io_failure"
    TIMEOUT = "timeout"
    DISCONNECTED = "disconnected"


class ExtractorError(Exception):
    """Failure of the external extractor or of the files it produces"""

    def __init__(self, kind: ExtractorErrorKind, detail: str = ""):
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail
