"""
Observer interface notified by BookService at operation boundaries.
"""

from bookstore.errors import BookServiceError
from bookstore.models import Book


class ServiceObserver:
    """
    Receives operation events from BookService.

    Every method is a no-op here; implementations override what they need.
    """

    def operation_started(self, operation: str) -> None:
        pass

    def operation_finished(self, operation: str, duration_ms: float) -> None:
        pass

    def book_created(self, book: Book, previous_count: int) -> None:
        pass

    def book_rejected(self, operation: str, error: BookServiceError) -> None:
        pass

    def books_matched(self, operation: str, books_count: int) -> None:
        pass

    def book_fetched(self, book: Book) -> None:
        pass

    def price_updated(self, book: Book, old_price: int) -> None:
        pass

    def book_deleted(self, book: Book, remaining: int) -> None:
        pass


class NullObserver(ServiceObserver):
    """Observer that ignores every event."""
