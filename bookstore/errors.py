"""
Request-scoped failures raised by the book service.

Every failure carries the message returned to the client and the HTTP
status the API layer answers with.
"""

from enum import Enum

from bookstore.models import MAX_YEAR, MIN_YEAR


class ErrorKind(str, Enum):
    """Failure taxonomy for book operations."""
    DUPLICATE_TITLE = "duplicate_title"
    INVALID_YEAR = "invalid_year"
    INVALID_PRICE = "invalid_price"
    BAD_FILTER = "bad_filter"
    NOT_FOUND = "not_found"


class BookServiceError(Exception):
    """Base class for all book service failures."""

    kind: ErrorKind
    status_code: int = 409

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateTitleError(BookServiceError):
    kind = ErrorKind.DUPLICATE_TITLE

    def __init__(self, title: str):
        super().__init__(f"Error: Book with the title [{title}] already exists in the system")
        self.title = title


class InvalidYearError(BookServiceError):
    kind = ErrorKind.INVALID_YEAR

    def __init__(self, year: int):
        super().__init__(
            f"Error: Can’t create new Book that its year [{year}] "
            f"is not in the accepted range [{MIN_YEAR} -> {MAX_YEAR}]"
        )
        self.year = year


class InvalidPriceError(BookServiceError):
    kind = ErrorKind.INVALID_PRICE

    @classmethod
    def on_create(cls) -> "InvalidPriceError":
        return cls("Error: Can’t create new Book with negative price")

    @classmethod
    def on_update(cls, book_id: int) -> "InvalidPriceError":
        return cls(f"Error: price update for book {book_id} must be a positive integer")


class BadFilterError(BookServiceError):
    kind = ErrorKind.BAD_FILTER
    status_code = 400

    def __init__(self, genres: str):
        super().__init__(f"Error: genres filter [{genres}] must be upper-case")
        self.genres = genres


class BookNotFoundError(BookServiceError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, book_id: int):
        super().__init__(f"Error: no such Book with id {book_id}")
        self.book_id = book_id
