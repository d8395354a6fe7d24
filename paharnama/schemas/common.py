"""Response envelopes shared by the routers."""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel):
    """Success envelope for auth and user endpoints.

    ``data`` is omitted (null) when an operation has nothing to return,
    e.g. logout.
    """

    success: bool = True
    message: str
    data: dict[str, Any] | None = None


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a listing plus what is needed to fetch the next."""

    items: list[T]
    total: int = Field(..., description="Matching rows across all pages")
    skip: int = Field(..., description="Offset of the first item")
    limit: int = Field(..., description="Page size")
    has_more: bool = Field(..., description="True if a later page exists")


class ErrorResponse(BaseModel):
    """Body of every ServiceError response. Never carries a stack trace."""

    success: bool = False
    error: str = Field(..., description="Short error code, e.g. 'Conflict'")
    message: str = Field(..., description="Safe human-readable message")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    path: str | None = Field(None, description="Request path")
