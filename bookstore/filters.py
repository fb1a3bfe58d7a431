"""
Predicate composition for the count and list queries.

Filters are combined with AND. The genres filter is validated before any
predicate runs so a malformed value rejects the whole query.

In LEGACY mode two predicates keep the historical behaviour of the server:
``price-bigger-than`` bounds the publication year, and ``genres`` keeps
only books sharing no genre with the request. CORRECTED mode bounds the
price and keeps books sharing at least one genre.
"""

from typing import Callable, Iterable, List

from bookstore.errors import BadFilterError
from bookstore.models import Book, BookFilters, FilterMode

Predicate = Callable[[Book], bool]


def equals_ignore_case(first: str, second: str) -> bool:
    """
    Compare two strings character by character, ignoring case.

    Strings of different lengths never match, so "Straße" and "STRASSE" differ.
    """
    if len(first) != len(second):
        return False
    return all(
        a == b or a.upper() == b.upper() or a.lower() == b.lower()
        for a, b in zip(first, second)
    )


def parse_genres(raw: str) -> List[str]:
    """
    Split a comma-separated genres value into tokens.

    Trailing empty tokens are dropped ("SF," gives ["SF"]); a value without
    any comma is a single token, even when empty.

    Raises:
        BadFilterError: if the value is not entirely upper-case
    """
    if raw != raw.upper():
        raise BadFilterError(raw)
    if "," not in raw:
        return [raw]
    tokens = raw.split(",")
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def build_predicates(filters: BookFilters, mode: FilterMode = FilterMode.LEGACY) -> List[Predicate]:
    """Turn the populated fields of ``filters`` into predicates."""
    requested_genres = None
    if filters.genres is not None:
        requested_genres = set(parse_genres(filters.genres))

    predicates: List[Predicate] = []

    if filters.author is not None:
        author = filters.author
        predicates.append(lambda book: equals_ignore_case(book.author, author))

    if filters.price_bigger_than is not None:
        bound = filters.price_bigger_than
        if mode == FilterMode.CORRECTED:
            predicates.append(lambda book: book.price >= bound)
        else:
            predicates.append(lambda book: book.year >= bound)

    if filters.price_less_than is not None:
        price_bound = filters.price_less_than
        predicates.append(lambda book: book.price <= price_bound)

    if filters.year_bigger_than is not None:
        year_low = filters.year_bigger_than
        predicates.append(lambda book: book.year >= year_low)

    if filters.year_less_than is not None:
        year_high = filters.year_less_than
        predicates.append(lambda book: book.year <= year_high)

    if requested_genres is not None:
        if mode == FilterMode.CORRECTED:
            predicates.append(lambda book: not book.genre_set().isdisjoint(requested_genres))
        else:
            predicates.append(lambda book: book.genre_set().isdisjoint(requested_genres))

    return predicates


def apply_filters(
    books: Iterable[Book],
    filters: BookFilters,
    mode: FilterMode = FilterMode.LEGACY
) -> List[Book]:
    """Return the books matching every populated filter."""
    predicates = build_predicates(filters, mode)
    return [book for book in books if all(predicate(book) for predicate in predicates)]
