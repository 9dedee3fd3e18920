"""Book collections and the transitions between them."""

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from .codec import decode_books, decode_sort_order, encode_books, encode_sort_order
from .db import Database
from .errors import CodecError
from .events import BookCompleted, BookEnteredHangar, BookMoved, BookRated, LibraryEvent, Listener
from .models import SORT_ORDERS, Book, Collection, FilterOption, SortOrder, clamp_rating
from .utils import book_matches, filter_books, sort_books

# (source, destination) -> whether the rating is reset on the way
TRANSITIONS: dict[tuple[Collection, Collection], bool] = {
    (Collection.WISHLIST, Collection.ARCHIVE): True,
    (Collection.WISHLIST, Collection.HANGAR): False,
    (Collection.ARCHIVE, Collection.HANGAR): False,
    (Collection.HANGAR, Collection.ARCHIVE): False,
    (Collection.HANGAR, Collection.WISHLIST): False,
    (Collection.ARCHIVE, Collection.WISHLIST): False,
}


@dataclass
class SearchResults:
    """Books matching a search, per collection."""

    wishlist: list[Book] = field(default_factory=list)
    hangar: list[Book] = field(default_factory=list)
    archive: list[Book] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.wishlist) + len(self.hangar) + len(self.archive)


class Library:
    """Owns the wishlist, hangar and archive collections.

    Every mutating operation commits the touched collections to the database,
    then notifies listeners. Missing books are logged and ignored.
    """

    def __init__(self, db: Database):
        self.db = db
        self.listeners: list[Listener] = []
        self.collections: dict[Collection, list[Book]] = {
            collection: self._load_collection(collection) for collection in Collection
        }

    @property
    def wishlist(self) -> list[Book]:
        return self.collections[Collection.WISHLIST]

    @property
    def hangar(self) -> list[Book]:
        return self.collections[Collection.HANGAR]

    @property
    def archive(self) -> list[Book]:
        return self.collections[Collection.ARCHIVE]

    def subscribe(self, listener: Listener) -> None:
        """Register a callable to receive lifecycle events."""
        self.listeners.append(listener)

    def _emit(self, *events: LibraryEvent) -> None:
        for event in events:
            for listener in self.listeners:
                listener(event)

    # Persistence

    def _load_collection(self, collection: Collection) -> list[Book]:
        data = self.db.load(collection.storage_key)
        if data is None:
            return []
        try:
            return decode_books(data)
        except CodecError as e:
            logger.warning("Failed to load {}, resetting to empty: {}", collection.value, e)
            return []

    def commit(self, *collections: Collection) -> None:
        """Persist the given collections (all of them if none given).

        Encoding failures are logged and the write dropped.
        """
        for collection in collections or tuple(Collection):
            try:
                self.db.save(collection.storage_key, encode_books(self.collections[collection]))
            except CodecError as e:
                logger.error("Failed to save {}: {}", collection.value, e)

    # Lookup

    def find(self, book_id: str) -> tuple[Collection, Book] | None:
        """Locate a book by id across all collections."""
        for collection, books in self.collections.items():
            for book in books:
                if book.id == book_id:
                    return collection, book
        return None

    def get(self, book_id: str, collection: Collection | None = None) -> Book | None:
        if collection is None:
            found = self.find(book_id)
            return found[1] if found else None
        return next((b for b in self.collections[collection] if b.id == book_id), None)

    def all_books(self) -> list[Book]:
        return [book for books in self.collections.values() for book in books]

    # Mutations

    def add(self, book: Book) -> Book:
        """Append a new book to the wishlist."""
        self.wishlist.append(book)
        logger.debug("Added '{}' to wishlist", book.title)
        self.commit(Collection.WISHLIST)
        return book

    def move_book(self, book_id: str, source: Collection, destination: Collection) -> Book | None:
        """Move a book between collections following the transition table.

        Returns:
            The moved book, or None if the move was not performed
        """
        if (source, destination) not in TRANSITIONS:
            logger.warning("Unsupported move from {} to {}", source.value, destination.value)
            return None

        books = self.collections[source]
        index = next((i for i, b in enumerate(books) if b.id == book_id), None)
        if index is None:
            logger.warning("Book {} not found in {}, move skipped", book_id, source.value)
            return None

        book = books.pop(index)
        if TRANSITIONS[(source, destination)]:
            book.rating = 0
        self.collections[destination].append(book)
        logger.debug("Moved '{}' from {} to {}", book.title, source.value, destination.value)
        self.commit(source, destination)

        events: list[LibraryEvent] = [BookMoved(book=book, source=source, destination=destination)]
        if destination == Collection.HANGAR:
            events.append(BookEnteredHangar(book=book))
        elif source == Collection.HANGAR and destination == Collection.ARCHIVE:
            events.append(BookCompleted(book=book))
        self._emit(*events)
        return book

    def mark_as_read(self, book_id: str) -> Book | None:
        return self.move_book(book_id, Collection.WISHLIST, Collection.ARCHIVE)

    def start_reading(self, book_id: str) -> Book | None:
        return self.move_book(book_id, Collection.WISHLIST, Collection.HANGAR)

    def reread(self, book_id: str) -> Book | None:
        return self.move_book(book_id, Collection.ARCHIVE, Collection.HANGAR)

    def finish_reading(self, book_id: str) -> Book | None:
        return self.move_book(book_id, Collection.HANGAR, Collection.ARCHIVE)

    def abandon(self, book_id: str) -> Book | None:
        return self.move_book(book_id, Collection.HANGAR, Collection.WISHLIST)

    def mark_as_unread(self, book_id: str) -> Book | None:
        return self.move_book(book_id, Collection.ARCHIVE, Collection.WISHLIST)

    def set_rating(self, book_id: str, rating: int, collection: Collection | None = None) -> Book | None:
        """Set a book's rating, clamped to 0-5.

        Args:
            book_id: Book to rate
            rating: New rating, clamped into range
            collection: Restrict the lookup to one collection

        Returns:
            The rated book, or None if it was not found
        """
        found = self._locate(book_id, collection)
        if found is None:
            logger.warning("Book {} not found, rating skipped", book_id)
            return None

        where, book = found
        new_rating = clamp_rating(rating)
        previous = dataclasses.replace(book)
        if book.rating != new_rating:
            book.rating = new_rating
            self.commit(where)
        # Emitted on every call, changed or not
        self._emit(BookRated(previous=previous, new_rating=new_rating))
        return book

    def update_book(
        self,
        book_id: str,
        title: str | None = None,
        author: str | None = None,
        notes: str | None = None,
    ) -> Book | None:
        """Edit a book's attributes in place. Identity is preserved."""
        found = self.find(book_id)
        if found is None:
            logger.warning("Book {} not found, edit skipped", book_id)
            return None

        where, book = found
        if title is not None:
            book.title = title
        if author is not None:
            book.author = author
        if notes is not None:
            book.notes = notes
        self.commit(where)
        return book

    def delete_books(self, collection: Collection, book_ids: Iterable[str]) -> list[Book]:
        """Remove books by id from a collection. Stats are not touched.

        Returns:
            The removed books
        """
        ids = set(book_ids)
        books = self.collections[collection]
        removed = [b for b in books if b.id in ids]
        missing = ids - {b.id for b in removed}
        if missing:
            logger.warning("Books not found in {}: {}", collection.value, sorted(missing))
        if not removed:
            return []

        self.collections[collection] = [b for b in books if b.id not in ids]
        self.commit(collection)
        return removed

    def delete_at(self, collection: Collection, offsets: Iterable[int], order: SortOrder | None = None) -> list[Book]:
        """Remove books by their positions in the displayed view."""
        view = self.view(collection, order)
        ids = [view[i].id for i in self._valid_offsets(offsets, len(view), collection)]
        return self.delete_books(collection, ids)

    def reorder(
        self,
        collection: Collection,
        offsets: Iterable[int],
        destination: int,
        order: SortOrder | None = None,
    ) -> None:
        """Move the books at view offsets so they sit before view position `destination`.

        Offsets refer to the displayed (possibly sorted) view and are mapped to
        the stored order by identity before the permutation is applied.
        """
        view = self.view(collection, order)
        valid = self._valid_offsets(offsets, len(view), collection)
        if not valid:
            return

        destination = max(0, min(destination, len(view)))
        moving_ids = {view[i].id for i in valid}
        moving = [view[i] for i in valid]

        # The first unmoved book at or after the destination anchors the insert
        anchor = next((b for b in view[destination:] if b.id not in moving_ids), None)

        remaining = [b for b in self.collections[collection] if b.id not in moving_ids]
        if anchor is None:
            position = len(remaining)
        else:
            position = next(i for i, b in enumerate(remaining) if b.id == anchor.id)

        self.collections[collection] = remaining[:position] + moving + remaining[position:]
        self.commit(collection)

    # Views

    def sort_order(self, collection: Collection) -> SortOrder:
        """Stored sort order for a collection, defaultOrder if unset or invalid."""
        data = self.db.load(collection.sort_key)
        if data is None:
            return SortOrder.DEFAULT
        try:
            order = decode_sort_order(data)
        except CodecError as e:
            logger.warning("Failed to load sort order for {}: {}", collection.value, e)
            return SortOrder.DEFAULT
        if order not in SORT_ORDERS[collection]:
            return SortOrder.DEFAULT
        return order

    def set_sort_order(self, collection: Collection, order: SortOrder) -> None:
        """Persist a sort order preference.

        Raises:
            ValueError: If the order is not offered for this collection
        """
        if order not in SORT_ORDERS[collection]:
            raise ValueError(f"Sort order '{order.value}' is not available for {collection.value}")
        self.db.save(collection.sort_key, encode_sort_order(order))

    def view(self, collection: Collection, order: SortOrder | None = None) -> list[Book]:
        """Displayed projection of a collection. Stored order is never changed."""
        if order is None:
            order = self.sort_order(collection)
        return sort_books(self.collections[collection], order)

    def search(self, query: str, filter_option: FilterOption = FilterOption.ALL) -> SearchResults:
        def matches(collection: Collection) -> list[Book]:
            hits = [b for b in self.view(collection) if book_matches(b, query)]
            return filter_books(hits, filter_option)

        return SearchResults(
            wishlist=matches(Collection.WISHLIST),
            hangar=matches(Collection.HANGAR),
            archive=matches(Collection.ARCHIVE),
        )

    # Helpers

    def _locate(self, book_id: str, collection: Collection | None) -> tuple[Collection, Book] | None:
        if collection is None:
            return self.find(book_id)
        book = self.get(book_id, collection)
        return (collection, book) if book else None

    def _valid_offsets(self, offsets: Iterable[int], size: int, collection: Collection) -> list[int]:
        valid = []
        for offset in sorted(set(offsets)):
            if 0 <= offset < size:
                valid.append(offset)
            else:
                logger.warning("Offset {} out of range for {} ({} books)", offset, collection.value, size)
        return valid
