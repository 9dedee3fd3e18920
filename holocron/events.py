"""Lifecycle events emitted by the library."""

from collections.abc import Callable
from dataclasses import dataclass

from .models import Book, Collection


@dataclass(frozen=True)
class BookMoved:
    """A book left one collection and was appended to another."""

    book: Book
    source: Collection
    destination: Collection


@dataclass(frozen=True)
class BookEnteredHangar:
    book: Book


@dataclass(frozen=True)
class BookCompleted:
    """A book was finished from the hangar."""

    book: Book


@dataclass(frozen=True)
class BookRated:
    """A book's rating changed. `previous` is a snapshot taken before the change."""

    previous: Book
    new_rating: int


LibraryEvent = BookMoved | BookEnteredHangar | BookCompleted | BookRated

Listener = Callable[[LibraryEvent], None]
