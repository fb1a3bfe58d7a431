"""
Book service: validation, store access and filtering for every book operation.
"""

import time
from contextlib import contextmanager
from typing import Iterator, List, Optional

from bookstore.errors import (
    BookNotFoundError, BookServiceError, DuplicateTitleError, InvalidPriceError,
    InvalidYearError
)
from bookstore.filters import apply_filters, equals_ignore_case
from bookstore.models import MAX_YEAR, MIN_YEAR, Book, BookCreate, BookFilters, FilterMode
from bookstore.observer import NullObserver, ServiceObserver
from bookstore.store import BookStore


class BookService:
    """
    Answers the book operations over a single BookStore.

    Successful calls return their payload; rejected calls raise a
    BookServiceError subclass. Compound operations hold the store lock for
    their whole duration.
    """

    def __init__(
        self,
        store: Optional[BookStore] = None,
        observer: Optional[ServiceObserver] = None,
        filter_mode: FilterMode = FilterMode.LEGACY
    ):
        self.store = store if store is not None else BookStore()
        self.observer = observer if observer is not None else NullObserver()
        self.filter_mode = filter_mode

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        self.observer.operation_started(name)
        begin = time.perf_counter()
        try:
            yield
        except BookServiceError as e:
            self.observer.book_rejected(name, e)
            raise
        finally:
            self.observer.operation_finished(name, (time.perf_counter() - begin) * 1000)

    def _title_taken(self, title: str) -> bool:
        return any(equals_ignore_case(book.title, title) for book in self.store.all())

    def create(self, candidate: BookCreate) -> int:
        """
        Validate and store a new book, returning its id.

        Checks run in order and the first failure wins: duplicate title,
        year outside [MIN_YEAR, MAX_YEAR], non-positive price.
        """
        with self._operation("create"), self.store.transaction():
            if self._title_taken(candidate.title):
                raise DuplicateTitleError(candidate.title)
            if candidate.year < MIN_YEAR or candidate.year > MAX_YEAR:
                raise InvalidYearError(candidate.year)
            if candidate.price <= 0:
                raise InvalidPriceError.on_create()

            previous_count = self.store.count()
            book_id = self.store.insert(candidate)
            self.observer.book_created(self.store.get(book_id), previous_count)
            return book_id

    def count_matching(self, filters: BookFilters) -> int:
        with self._operation("count"), self.store.transaction():
            books_count = len(apply_filters(self.store.all(), filters, self.filter_mode))
            self.observer.books_matched("count", books_count)
            return books_count

    def list_matching(self, filters: BookFilters) -> List[Book]:
        """Matching books sorted by title (case-sensitive, stable)."""
        with self._operation("list"), self.store.transaction():
            books = apply_filters(self.store.all(), filters, self.filter_mode)
            books.sort(key=lambda book: book.title)
            self.observer.books_matched("list", len(books))
            return books

    def get_by_id(self, book_id: int) -> Book:
        with self._operation("get"):
            book = self.store.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)
            self.observer.book_fetched(book)
            return book

    def update_price(self, book_id: int, price: int) -> int:
        """Set a new positive price and return the previous one."""
        with self._operation("update_price"), self.store.transaction():
            book = self.store.get(book_id)
            if book is None:
                raise BookNotFoundError(book_id)
            if price <= 0:
                raise InvalidPriceError.on_update(book_id)
            old_price = self.store.update_price(book_id, price)
            self.observer.price_updated(book, old_price)
            return old_price

    def delete_by_id(self, book_id: int) -> int:
        """Remove a book and return how many books remain."""
        with self._operation("delete"), self.store.transaction():
            removed = self.store.delete(book_id)
            if removed is None:
                raise BookNotFoundError(book_id)
            remaining = self.store.count()
            self.observer.book_deleted(removed, remaining)
            return remaining

