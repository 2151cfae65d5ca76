"""
Error taxonomy for accessibility test runs.

Every failure surfaced to a client carries a stable machine-readable code,
a human-readable message and, where available, the underlying detail.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Machine-readable failure kinds."""
    MISSING_URL = "MISSING_URL"
    INVALID_URL = "INVALID_URL"
    NAVIGATION_ERROR = "NAVIGATION_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    INJECTION_ERROR = "INJECTION_ERROR"
    TEST_ERROR = "TEST_ERROR"
    RATE_LIMIT = "RATE_LIMIT"
    NOT_FOUND = "NOT_FOUND"
    RENDER_ERROR = "RENDER_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Anything not listed maps to 500
STATUS_CODES = {
    ErrorCode.MISSING_URL: 400,
    ErrorCode.INVALID_URL: 400,
    ErrorCode.NAVIGATION_ERROR: 404,
    ErrorCode.TIMEOUT_ERROR: 504,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_REQUEST: 422,
}


class AccessibilityTestError(Exception):
    """
    Classified failure of a test run or report export.

    Args:
        message: Human-readable explanation
        code: Failure kind
        details: Underlying error message, if any
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code)
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.code, 500)

    def to_dict(self) -> Dict[str, Any]:
        """Structured body returned to HTTP clients."""
        body: Dict[str, Any] = {
            "success": False,
            "code": self.code.value,
            "error": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body
