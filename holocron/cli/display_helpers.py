"""Shared display and selection helpers for CLI."""

from collections.abc import Callable
from typing import TypeVar

import click

from ..config import DEFAULT_DISPLAY_LIMIT
from ..library import Library
from ..models import Book, Collection
from ..stats import StatsEngine
from ..utils import book_matches, format_rating

T = TypeVar("T")

COLLECTION_TITLES = {
    Collection.WISHLIST: "Wishlist",
    Collection.HANGAR: "Hangar",
    Collection.ARCHIVE: "Archive",
}


def select_from_results(
    items: list[T],
    query: str,
    empty_message: str,
    formatter: Callable[[T], str],
    max_results: int = DEFAULT_DISPLAY_LIMIT,
) -> T | None:
    """Interactively select an item from search results."""
    if not items:
        click.echo(empty_message.format(query=query))
        return None

    if len(items) == 1:
        return items[0]

    click.echo(f"Multiple books match '{query}':")
    display_items = items[:max_results]
    for i, item in enumerate(display_items, 1):
        click.echo(f"  {i}. {formatter(item)}")

    choice = click.prompt("Select book number", type=int, default=1)
    if not 1 <= choice <= len(display_items):
        click.echo("Invalid choice")
        return None
    return items[choice - 1]


def format_book(book: Book, show_rating: bool = True) -> str:
    author_str = f" - {book.author}" if book.author else ""
    rating_str = f" {format_rating(book.rating)}" if show_rating and book.rating else ""
    return f"{book.title}{author_str}{rating_str}"


def select_book(
    library: Library,
    query: str,
    collections: tuple[Collection, ...] = tuple(Collection),
) -> tuple[Collection, Book] | None:
    """Search the given collections and interactively select a book.

    Exact title matches win over fuzzy ones.
    """
    candidates = [(c, b) for c in collections for b in library.view(c) if book_matches(b, query)]
    exact = [(c, b) for c, b in candidates if b.title.lower() == query.strip().lower()]
    return select_from_results(
        exact or candidates,
        query,
        "No books found matching '{query}'",
        lambda found: f"[{found[0].value}] {format_book(found[1])}",
    )


def display_collection(collection: Collection, books: list[Book]) -> None:
    """Display a collection view as a numbered list."""
    title = COLLECTION_TITLES[collection]
    if not books:
        click.echo(f"{title} is empty.")
        return

    click.echo(f"\n{title} ({len(books)})")
    for i, book in enumerate(books, 1):
        click.echo(f"  {i}. {format_book(book, show_rating=collection != Collection.WISHLIST)}")
        if book.notes:
            click.echo(f"     {book.notes}")
    click.echo()


def announce_achievements(stats: StatsEngine) -> None:
    """Print newly earned achievements and drain the pending queue."""
    for achievement in stats.new_achievements:
        click.echo(f"Achievement unlocked: {achievement.display_name} - {achievement.description}")
    stats.clear_new_achievements()
