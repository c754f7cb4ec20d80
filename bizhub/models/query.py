"""
Query Models - the tri-state result handed to directory consumers.
"""

from enum import Enum
from typing import Optional, List, Any

from pydantic import BaseModel, Field

from bizhub.errors import BizHubError


class QueryStatus(str, Enum):
    """Lifecycle states of a cached query."""
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class QueryResult(BaseModel):
    """Loading, Success(data) or Error(reason) for one cache key."""

    status: QueryStatus
    data: List[Any] = Field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[str] = None
    request_id: Optional[int] = Field(default=None, description="Load that produced this result")

    @classmethod
    def loading(cls) -> "QueryResult":
        return cls(status=QueryStatus.LOADING)

    @classmethod
    def success(cls, data: List[Any], request_id: Optional[int] = None) -> "QueryResult":
        return cls(status=QueryStatus.SUCCESS, data=data, request_id=request_id)

    @classmethod
    def failure(cls, exc: Exception, request_id: Optional[int] = None) -> "QueryResult":
        kind = exc.kind if isinstance(exc, BizHubError) else "unexpected"
        return cls(status=QueryStatus.ERROR, error=str(exc), error_kind=kind, request_id=request_id)

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR
