"""
API models and schemas for the FastAPI application.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from bookstore.models import Book


class ResponseEnvelope(BaseModel):
    """
    Wrapper returned by every book endpoint.

    On success ``errorMessage`` is empty; on failure ``result`` is null.
    """
    result: Optional[Any] = Field(None, description="Operation payload")
    errorMessage: str = Field("", description="Human-readable failure, empty on success")


class IdResponse(ResponseEnvelope):
    """Envelope carrying a newly assigned book id."""
    result: Optional[int] = Field(None, description="Assigned book id")


class CountResponse(ResponseEnvelope):
    """Envelope carrying a count (matching or remaining books)."""
    result: Optional[int] = Field(None, description="Number of books")


class PriceResponse(ResponseEnvelope):
    """Envelope carrying the price a book had before an update."""
    result: Optional[int] = Field(None, description="Previous price")


class BookResponse(ResponseEnvelope):
    """Envelope carrying a single book."""
    result: Optional[Book] = Field(None, description="Book record")


class BookListResponse(ResponseEnvelope):
    """Envelope carrying books sorted by title."""
    result: Optional[List[Book]] = Field(None, description="Books sorted by title")


class ErrorResponse(ResponseEnvelope):
    """Envelope for a rejected request."""
    result: None = None
