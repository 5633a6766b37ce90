"""
Common schemas used across multiple endpoints.
"""

from typing import Generic, TypeVar, List, Optional
from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list response."""
    items: List[T]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        """Check if there are more items."""
        return self.offset + len(self.items) < self.total


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
    error_code: Optional[str] = None


ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Case not found"},
    409: {"model": ErrorResponse, "description": "Invalid transition or stale expected status"},
    422: {"model": ErrorResponse, "description": "Missing decision or invalid field"},
}
