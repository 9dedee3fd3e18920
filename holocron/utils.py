"""Shared utilities for Holocron."""

import re

from rapidfuzz import fuzz

from .models import Book, FilterOption, SortOrder


def normalize_title(title: str) -> str:
    """Normalize a title for comparison.

    Args:
        title: The title to normalize

    Returns:
        Normalized title string
    """
    if not title:
        return ""

    normalized = title.lower()

    # Remove common prefixes
    for prefix in ("the ", "a ", "an "):
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix) :]

    # Remove punctuation and extra whitespace
    normalized = re.sub(r"[^\w\s]", "", normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()

    return normalized


def titles_match(title1: str | None, title2: str | None, threshold: int = 85) -> bool:
    """Check if two titles match using fuzzy comparison.

    Args:
        title1: First title
        title2: Second title
        threshold: Minimum fuzzy match score (0-100) for non-exact matches

    Returns:
        True if titles are considered a match
    """
    if not title1 or not title2:
        return False

    norm1 = normalize_title(title1)
    norm2 = normalize_title(title2)
    if not norm1 or not norm2:
        return False

    # Exact normalized match (fast path)
    if norm1 == norm2:
        return True

    # token_set_ratio handles word order and extra words well
    return fuzz.token_set_ratio(norm1, norm2) >= threshold


def creators_match(creator1: str | None, creator2: str | None, threshold: int = 80) -> bool:
    """Check if two author names match.

    Handles "Frank Herbert" vs "Herbert" and small typos.
    """
    if not creator1 or not creator2:
        return False

    c1 = creator1.lower().strip()
    c2 = creator2.lower().strip()

    if c1 == c2 or c1 in c2 or c2 in c1:
        return True

    # Same last name
    parts1 = c1.split()
    parts2 = c2.split()
    if parts1 and parts2 and parts1[-1] == parts2[-1]:
        return True

    return fuzz.ratio(c1, c2) >= threshold


def book_matches(book: Book, query: str) -> bool:
    """Check whether a book matches a search query.

    Title, author and notes are matched by case-insensitive substring;
    title and author also fuzzy-match to tolerate typos. An empty query
    matches every book.
    """
    needle = query.strip().lower()
    if not needle:
        return True

    for text in (book.title, book.author, book.notes):
        if needle in text.lower():
            return True

    return titles_match(book.title, query) or creators_match(book.author, query)


def sort_books(books: list[Book], order: SortOrder) -> list[Book]:
    """Return books in display order. Never mutates the input list."""
    if order == SortOrder.TITLE_ASCENDING:
        return sorted(books, key=lambda b: b.title.casefold())
    if order == SortOrder.TITLE_DESCENDING:
        return sorted(books, key=lambda b: b.title.casefold(), reverse=True)
    if order == SortOrder.RATING_ASCENDING:
        # Ties broken by title ascending
        return sorted(books, key=lambda b: (b.rating, b.title.casefold()))
    if order == SortOrder.RATING_DESCENDING:
        return sorted(books, key=lambda b: (-b.rating, b.title.casefold()))
    return list(books)


def filter_books(books: list[Book], option: FilterOption) -> list[Book]:
    """Filter books by rating bucket."""
    if option == FilterOption.RATED:
        return [b for b in books if b.rating > 0]
    if option == FilterOption.UNRATED:
        return [b for b in books if b.rating == 0]
    if option == FilterOption.HIGH_RATED:
        return [b for b in books if b.rating >= 4]
    if option == FilterOption.LOW_RATED:
        return [b for b in books if 0 < b.rating <= 3]
    return list(books)


def format_rating(rating: int) -> str:
    """Format a 0-5 rating as stars.

    Args:
        rating: Rating value (0-5)

    Returns:
        Star string like "[****.]"
    """
    return "[" + "*" * rating + "." * (5 - rating) + "]"
