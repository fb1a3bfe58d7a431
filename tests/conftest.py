"""
Pytest configuration and shared fixtures.
"""

import logging

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from bookstore.models import BookCreate
from bookstore.observer import ServiceObserver
from bookstore.service import BookService
from bookstore.store import BookStore


@pytest.fixture
def store():
    """Create an empty book store."""
    return BookStore()


@pytest.fixture
def mock_observer():
    """Create a mock observer recording service events."""
    return MagicMock(spec=ServiceObserver)


@pytest.fixture
def service(store, mock_observer):
    """Create a book service over an empty store."""
    return BookService(store=store, observer=mock_observer)


@pytest.fixture
def sample_book():
    """Create sample book data for testing."""
    return BookCreate(
        title="Dune",
        author="Herbert",
        year=1965,
        price=20,
        genres=["SF"]
    )


@pytest.fixture
def library_books():
    """Books with a spread of authors, years, prices and genres."""
    return [
        BookCreate(title="Foundation", author="Isaac Asimov", year=1951, price=15, genres=["SCI_FI"]),
        BookCreate(title="Dune", author="Frank Herbert", year=1965, price=25, genres=["SCI_FI", "NOVEL"]),
        BookCreate(title="The Hobbit", author="J.R.R. Tolkien", year=1950, price=30, genres=["FANTASY"]),
        BookCreate(title="I, Robot", author="Isaac Asimov", year=1950, price=12, genres=["SCI_FI", "SHORT_STORIES"]),
        BookCreate(title="animal Farm", author="George Orwell", year=1945, price=10, genres=["SATIRE", "NOVEL"]),
        BookCreate(title="Neuromancer", author="William Gibson", year=1984, price=40, genres=["CYBERPUNK"]),
    ]


@pytest.fixture
def library_service(service, library_books):
    """Book service pre-loaded with library_books (ids 1..6 in order)."""
    for book in library_books:
        service.create(book)
    return service


@pytest.fixture
def client():
    """Create test client over a fresh application."""
    from api.main import create_app
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def restore_server_logger_levels():
    """Undo runtime level changes made to the server loggers."""
    names = ("request-logger", "books-logger")
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
