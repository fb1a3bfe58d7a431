"""
Unit tests for the in-memory book store.
"""

import threading

import pytest
from pydantic import ValidationError

from bookstore.models import Book, BookCreate


def make_book(title, price=10):
    return BookCreate(title=title, author="Author", year=2000, price=price, genres=["DRAMA"])


class TestBookStore:
    """Test cases for BookStore."""

    def test_insert_assigns_sequential_ids(self, store):
        """Test ids start at 1 and increase by one."""
        assert store.insert(make_book("A")) == 1
        assert store.insert(make_book("B")) == 2
        assert store.insert(make_book("C")) == 3

    def test_insert_stores_book_with_id(self, store, sample_book):
        """Test the stored record carries its id and candidate fields."""
        book_id = store.insert(sample_book)
        book = store.get(book_id)

        assert isinstance(book, Book)
        assert book.id == book_id
        assert book.title == "Dune"
        assert book.genres == ["SF"]

    def test_get_missing_returns_none(self, store):
        """Test lookup of an unknown id."""
        assert store.get(42) is None

    def test_delete_returns_removed_book(self, store):
        """Test delete removes and returns the record."""
        book_id = store.insert(make_book("A"))
        removed = store.delete(book_id)

        assert removed.title == "A"
        assert store.get(book_id) is None
        assert store.count() == 0

    def test_delete_missing_returns_none(self, store):
        """Test deleting an unknown id."""
        store.insert(make_book("A"))
        assert store.delete(7) is None
        assert store.count() == 1

    def test_ids_not_reused_after_delete(self, store):
        """Test deletions never rewind the id counter."""
        first = store.insert(make_book("A"))
        second = store.insert(make_book("B"))
        store.delete(second)
        store.delete(first)

        assert store.insert(make_book("C")) == 3
        assert store.last_id == 3

    def test_update_price_returns_old_price(self, store):
        """Test price update overwrites only the price."""
        book_id = store.insert(make_book("A", price=10))

        assert store.update_price(book_id, 99) == 10
        book = store.get(book_id)
        assert book.price == 99
        assert book.title == "A"

    def test_update_price_missing_returns_none(self, store):
        """Test price update of an unknown id."""
        assert store.update_price(1, 5) is None

    def test_all_is_snapshot(self, store):
        """Test all() returns a list detached from later inserts."""
        store.insert(make_book("A"))
        snapshot = store.all()
        store.insert(make_book("B"))

        assert len(snapshot) == 1
        assert store.count() == 2

    def test_concurrent_inserts_get_unique_ids(self, store):
        """Test parallel inserts never share an id."""
        ids = []
        ids_lock = threading.Lock()

        def worker(offset):
            for i in range(50):
                book_id = store.insert(make_book(f"T{offset}-{i}"))
                with ids_lock:
                    ids.append(book_id)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(ids) == list(range(1, 401))
        assert store.count() == 400

    def test_transaction_is_reentrant(self, store):
        """Test store methods can run while holding the store lock."""
        with store.transaction() as locked:
            locked.insert(make_book("A"))
            assert locked.count() == 1

    def test_id_cannot_be_reassigned(self, store):
        """Test the stored id is frozen while the price stays mutable."""
        book = store.get(store.insert(make_book("A")))

        with pytest.raises(ValidationError):
            book.id = 99
        book.price = 11
        assert (book.id, book.price) == (1, 11)

    def test_id_serialized_first(self, store):
        book = store.get(store.insert(make_book("A")))
        assert list(book.dict()) == ["id", "title", "author", "year", "price", "genres"]
