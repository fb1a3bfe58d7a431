"""
Pydantic models for book records and query predicates.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


MIN_YEAR = 1940
MAX_YEAR = 2100


class FilterMode(str, Enum):
    """How the ambiguous price/genre predicates are evaluated."""
    LEGACY = "legacy"
    CORRECTED = "corrected"


class BookCreate(BaseModel):
    """
    Candidate book as received from a client.

    Range checks are left to BookService so that the failures can be
    reported in a fixed order.
    """
    title: str = Field(..., description="Book title, unique ignoring case")
    author: str = Field(..., description="Book author")
    year: int = Field(..., description="Publication year")
    price: int = Field(..., description="Price in whole units")
    genres: List[str] = Field(default_factory=list, description="Upper-case genre tokens")

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "title": "Dune",
                "author": "Frank Herbert",
                "year": 1965,
                "price": 20,
                "genres": ["SCI_FI", "NOVEL"]
            }
        }


class Book(BaseModel):
    """A stored book record. The id is fixed once assigned."""
    id: int = Field(..., frozen=True, description="Identifier assigned by the store")
    title: str = Field(..., description="Book title, unique ignoring case")
    author: str = Field(..., description="Book author")
    year: int = Field(..., description="Publication year")
    price: int = Field(..., description="Price in whole units")
    genres: List[str] = Field(default_factory=list, description="Upper-case genre tokens")

    def genre_set(self) -> set:
        return set(self.genres)


class BookFilters(BaseModel):
    """Optional predicates for the count and list queries."""
    author: Optional[str] = Field(None, description="Case-insensitive author match")
    price_bigger_than: Optional[int] = Field(None, description="Lower bound (see FilterMode)")
    price_less_than: Optional[int] = Field(None, description="Inclusive upper price bound")
    year_bigger_than: Optional[int] = Field(None, description="Inclusive lower year bound")
    year_less_than: Optional[int] = Field(None, description="Inclusive upper year bound")
    genres: Optional[str] = Field(None, description="Comma-separated upper-case genres")
