from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    NETWORK_ERROR = "NETWORK_ERROR"
    EMPTY_CACHE = "EMPTY_CACHE"
    NO_DATA = "NO_DATA"
    LOAD_MORE_FAILED = "LOAD_MORE_FAILED"


class FacilityError(Exception):
    """Raised by the data source for all expected failure conditions.

    Caught by the store and converted into an ``Error`` resource. Consumers
    only ever see ``message``; the code is kept for logging.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable
