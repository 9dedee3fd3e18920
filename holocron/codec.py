"""JSON encoding of persisted Holocron state."""

import json
from datetime import datetime
from typing import Any

from .errors import CodecError
from .models import Book, ReadingStats, SortOrder


def book_to_dict(book: Book) -> dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "notes": book.notes,
        "rating": book.rating,
    }


def book_from_dict(data: Any) -> Book:
    """Build a Book from its serialized form.

    Raises:
        CodecError: If required fields are missing or have the wrong type
    """
    if not isinstance(data, dict):
        raise CodecError(f"Expected book object, got {type(data).__name__}")

    book_id = data.get("id")
    if not isinstance(book_id, str) or not book_id:
        raise CodecError("Book is missing a string id")

    title = data.get("title")
    author = data.get("author")
    if not isinstance(title, str) or not isinstance(author, str):
        raise CodecError(f"Book {book_id} has invalid title or author")

    notes = data.get("notes", "")
    if not isinstance(notes, str):
        raise CodecError(f"Book {book_id} has invalid notes")

    rating = data.get("rating", 0)
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise CodecError(f"Book {book_id} has non-integer rating")

    return Book(id=book_id, title=title, author=author, notes=notes, rating=rating)


def encode_books(books: list[Book]) -> bytes:
    return _dumps([book_to_dict(book) for book in books])


def decode_books(data: bytes) -> list[Book]:
    """Decode a serialized list of books."""
    payload = _loads(data)
    if not isinstance(payload, list):
        raise CodecError(f"Expected list of books, got {type(payload).__name__}")
    return [book_from_dict(entry) for entry in payload]


def stats_to_dict(stats: ReadingStats) -> dict[str, Any]:
    return {
        "currentStreak": stats.current_streak,
        "longestStreak": stats.longest_streak,
        "lastReadingDate": stats.last_reading_date.isoformat() if stats.last_reading_date else None,
        "booksCompletedByYear": dict(stats.books_completed_by_year),
        "booksCompletedByMonth": dict(stats.books_completed_by_month),
        "yearlyGoal": stats.yearly_goal,
        "currentYearBooksRead": stats.current_year_books_read,
        "hangarEntryDates": {book_id: entered.isoformat() for book_id, entered in stats.hangar_entry_dates.items()},
        "totalBooksMovedToHangar": stats.total_books_moved_to_hangar,
        "averageDaysInHangar": stats.average_days_in_hangar,
        "totalRatedBooks": stats.total_rated_books,
        "averageRating": stats.average_rating,
        # JSON object keys are strings
        "ratingDistribution": {str(rating): count for rating, count in stats.rating_distribution.items()},
        "achievements": sorted(stats.achievements),
    }


def stats_from_dict(data: Any) -> ReadingStats:
    """Build ReadingStats from its serialized form.

    Missing fields take their defaults; fields of the wrong type raise.

    Raises:
        CodecError: If a field cannot be converted
    """
    if not isinstance(data, dict):
        raise CodecError(f"Expected stats object, got {type(data).__name__}")

    try:
        last_reading = data.get("lastReadingDate")
        return ReadingStats(
            current_streak=int(data.get("currentStreak", 0)),
            longest_streak=int(data.get("longestStreak", 0)),
            last_reading_date=_parse_datetime(last_reading) if last_reading else None,
            books_completed_by_year={str(k): int(v) for k, v in data.get("booksCompletedByYear", {}).items()},
            books_completed_by_month={str(k): int(v) for k, v in data.get("booksCompletedByMonth", {}).items()},
            yearly_goal=int(data.get("yearlyGoal", 0)),
            current_year_books_read=int(data.get("currentYearBooksRead", 0)),
            hangar_entry_dates={
                str(k): _parse_datetime(v) for k, v in data.get("hangarEntryDates", {}).items()
            },
            total_books_moved_to_hangar=int(data.get("totalBooksMovedToHangar", 0)),
            average_days_in_hangar=float(data.get("averageDaysInHangar", 0.0)),
            total_rated_books=int(data.get("totalRatedBooks", 0)),
            average_rating=float(data.get("averageRating", 0.0)),
            rating_distribution={int(k): int(v) for k, v in data.get("ratingDistribution", {}).items()},
            achievements=_parse_achievements(data.get("achievements", [])),
        )
    except (TypeError, ValueError, AttributeError) as e:
        raise CodecError(f"Invalid reading stats: {e}") from e


def _parse_datetime(value: str) -> datetime:
    """Parse a stored timestamp. Stats use naive local time throughout."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        raise CodecError(f"Timestamp {value!r} carries a UTC offset")
    return parsed


def _parse_achievements(value: Any) -> set[str]:
    if not isinstance(value, list):
        raise CodecError(f"Expected list of achievements, got {type(value).__name__}")
    return {str(a) for a in value}


def encode_stats(stats: ReadingStats) -> bytes:
    return _dumps(stats_to_dict(stats))


def decode_stats(data: bytes) -> ReadingStats:
    return stats_from_dict(_loads(data))


def encode_sort_order(order: SortOrder) -> bytes:
    return _dumps(order.value)


def decode_sort_order(data: bytes) -> SortOrder:
    value = _loads(data)
    try:
        return SortOrder(value)
    except (TypeError, ValueError) as e:
        raise CodecError(f"Unknown sort order: {value!r}") from e


def _dumps(payload: Any) -> bytes:
    try:
        return json.dumps(payload).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise CodecError(f"Cannot encode payload: {e}") from e


def _loads(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CodecError(f"Cannot decode payload: {e}") from e
