"""
In-memory book store.

Owns the id -> record map and the id counter. Every method runs under a
single re-entrant lock, which callers can also hold through transaction()
to make check-then-write sequences atomic.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from bookstore.models import Book, BookCreate


class BookStore:
    """Keyed collection of live books plus a monotonic id generator."""

    def __init__(self):
        self._books: Dict[int, Book] = {}
        self._last_id = 0
        self.lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator["BookStore"]:
        """Hold the store lock for a sequence of operations."""
        with self.lock:
            yield self

    def insert(self, candidate: BookCreate) -> int:
        """
        Store a new book under the next id.

        Ids start at 1 and are never reused, even after deletions.
        """
        with self.lock:
            self._last_id += 1
            book_id = self._last_id
            self._books[book_id] = Book(id=book_id, **candidate.dict())
            return book_id

    def get(self, book_id: int) -> Optional[Book]:
        with self.lock:
            return self._books.get(book_id)

    def delete(self, book_id: int) -> Optional[Book]:
        with self.lock:
            return self._books.pop(book_id, None)

    def update_price(self, book_id: int, new_price: int) -> Optional[int]:
        """Overwrite the price of a book and return the previous one."""
        with self.lock:
            book = self._books.get(book_id)
            if book is None:
                return None
            old_price = book.price
            book.price = new_price
            return old_price

    def all(self) -> List[Book]:
        """Snapshot of the live books, in no particular order."""
        with self.lock:
            return list(self._books.values())

    def count(self) -> int:
        with self.lock:
            return len(self._books)

    @property
    def last_id(self) -> int:
        return self._last_id
