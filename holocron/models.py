"""Data models for Holocron."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .config import (
    ARCHIVE_KEY,
    ARCHIVE_SORT_KEY,
    HANGAR_KEY,
    HANGAR_SORT_KEY,
    WISHLIST_KEY,
    WISHLIST_SORT_KEY,
)

MIN_RATING = 0
MAX_RATING = 5


def clamp_rating(rating: int) -> int:
    """Clamp a rating into the 0-5 range."""
    return max(MIN_RATING, min(MAX_RATING, int(rating)))


class Collection(str, Enum):
    WISHLIST = "wishlist"
    HANGAR = "hangar"
    ARCHIVE = "archive"

    @property
    def storage_key(self) -> str:
        return {
            Collection.WISHLIST: WISHLIST_KEY,
            Collection.HANGAR: HANGAR_KEY,
            Collection.ARCHIVE: ARCHIVE_KEY,
        }[self]

    @property
    def sort_key(self) -> str:
        return {
            Collection.WISHLIST: WISHLIST_SORT_KEY,
            Collection.HANGAR: HANGAR_SORT_KEY,
            Collection.ARCHIVE: ARCHIVE_SORT_KEY,
        }[self]


class SortOrder(str, Enum):
    DEFAULT = "defaultOrder"
    TITLE_ASCENDING = "titleAscending"
    TITLE_DESCENDING = "titleDescending"
    RATING_ASCENDING = "ratingAscending"
    RATING_DESCENDING = "ratingDescending"

    @property
    def label(self) -> str:
        return {
            SortOrder.DEFAULT: "Added Order",
            SortOrder.TITLE_ASCENDING: "Title (A-Z)",
            SortOrder.TITLE_DESCENDING: "Title (Z-A)",
            SortOrder.RATING_ASCENDING: "Rating (Low-High)",
            SortOrder.RATING_DESCENDING: "Rating (High-Low)",
        }[self]


# Wishlist books are unrated, so rating sorts are only offered for hangar and archive
SORT_ORDERS: dict[Collection, tuple[SortOrder, ...]] = {
    Collection.WISHLIST: (SortOrder.DEFAULT, SortOrder.TITLE_ASCENDING, SortOrder.TITLE_DESCENDING),
    Collection.HANGAR: tuple(SortOrder),
    Collection.ARCHIVE: tuple(SortOrder),
}


class FilterOption(str, Enum):
    ALL = "all"
    RATED = "rated"
    UNRATED = "unrated"
    HIGH_RATED = "highRated"
    LOW_RATED = "lowRated"

    @property
    def label(self) -> str:
        return {
            FilterOption.ALL: "All Books",
            FilterOption.RATED: "Rated (1-5 stars)",
            FilterOption.UNRATED: "Unrated",
            FilterOption.HIGH_RATED: "4-5 stars Only",
            FilterOption.LOW_RATED: "1-3 stars Only",
        }[self]


@dataclass(eq=False)
class Book:
    """A book, identified by its id regardless of attribute changes."""

    title: str
    author: str
    notes: str = ""
    rating: int = 0  # 0-5, 0 means unrated
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        self.rating = clamp_rating(self.rating)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class ReadingStats:
    """Aggregate reading statistics maintained by the stats engine."""

    # Streaks
    current_streak: int = 0
    longest_streak: int = 0
    last_reading_date: datetime | None = None

    # Completions, keyed "YYYY" and "YYYY-MM"
    books_completed_by_year: dict[str, int] = field(default_factory=dict)
    books_completed_by_month: dict[str, int] = field(default_factory=dict)

    # Goals
    yearly_goal: int = 0
    current_year_books_read: int = 0

    # Hangar tracking
    hangar_entry_dates: dict[str, datetime] = field(default_factory=dict)
    total_books_moved_to_hangar: int = 0
    average_days_in_hangar: float = 0.0

    # Ratings
    total_rated_books: int = 0
    average_rating: float = 0.0
    rating_distribution: dict[int, int] = field(default_factory=dict)

    achievements: set[str] = field(default_factory=set)

    @property
    def total_books_completed(self) -> int:
        return sum(self.books_completed_by_year.values())
