"""
Error taxonomy for BizHub.

Every failure surfaced to callers derives from BizHubError. Reads fail with
NotAuthenticated, BackendError or QueryTimeout; writes fail with
ValidationError or BackendError.
"""

from typing import Optional


class BizHubError(Exception):
    """Base class for all BizHub errors."""

    kind = "unexpected"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticated(BizHubError):
    """No signed-in principal; the query must not reach the backend."""

    kind = "not_authenticated"

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class BackendError(BizHubError):
    """The backend rejected or failed a read or write."""

    kind = "backend"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(BizHubError):
    """A create request was rejected by the server as invalid."""

    kind = "validation"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class QueryTimeout(BizHubError):
    """A query load did not finish within QUERY_TIMEOUT_SECONDS."""

    kind = "timeout"

    def __init__(self, message: str = "Timeout"):
        super().__init__(message)
