"""Book and collection CLI commands."""

from collections.abc import Callable

import click

from ..library import Library
from ..models import SORT_ORDERS, Book, Collection, FilterOption, SortOrder
from ..stats import StatsEngine
from ..utils import format_rating
from .core import cli
from .display_helpers import (
    COLLECTION_TITLES,
    announce_achievements,
    display_collection,
    format_book,
    select_book,
)

COLLECTION_CHOICE = click.Choice([c.value for c in Collection])
SORT_CHOICE = click.Choice([o.value for o in SortOrder])


def _parse_sort(collection: Collection, value: str | None) -> SortOrder | None:
    if value is None:
        return None
    order = SortOrder(value)
    if order not in SORT_ORDERS[collection]:
        raise click.BadParameter(f"'{value}' is not available for {collection.value}", param_hint="--sort")
    return order


@cli.command()
@click.argument("title")
@click.option("--author", "-a", default="", help="Author")
@click.option("--notes", "-n", default="", help="Notes")
@click.pass_context
def add(ctx: click.Context, title: str, author: str, notes: str) -> None:
    """Add a book to the wishlist."""
    library: Library = ctx.obj["library"]

    if not title.strip():
        click.echo("Error: title must not be empty.")
        ctx.exit(1)

    book = library.add(Book(title=title, author=author, notes=notes))
    author_str = f" by {author}" if author else ""
    click.echo(f"Added to wishlist: {book.title}{author_str}")
    if notes:
        click.echo(f"  Notes: {notes}")


@cli.command(name="list")
@click.argument("collection", type=COLLECTION_CHOICE, required=False)
@click.option(
    "--sort",
    "-s",
    "sort",
    type=SORT_CHOICE,
    help="Sort order for this listing only (skipped for collections that do not offer it)",
)
@click.pass_context
def list_books(ctx: click.Context, collection: str | None, sort: str | None) -> None:
    """List books in one or all collections."""
    library: Library = ctx.obj["library"]
    targets = [Collection(collection)] if collection else list(Collection)

    for target in targets:
        if collection:
            order = _parse_sort(target, sort)
        else:
            # Collections that do not offer the order keep their saved one
            order = SortOrder(sort) if sort and SortOrder(sort) in SORT_ORDERS[target] else None
        display_collection(target, library.view(target, order))


@cli.command(name="sort")
@click.argument("collection", type=COLLECTION_CHOICE)
@click.argument("order", type=SORT_CHOICE)
@click.pass_context
def set_sort(ctx: click.Context, collection: str, order: str) -> None:
    """Set the stored sort order of a collection."""
    library: Library = ctx.obj["library"]
    target = Collection(collection)
    sort_order = SortOrder(order)

    try:
        library.set_sort_order(target, sort_order)
    except ValueError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)

    click.echo(f"{COLLECTION_TITLES[target]} sorted by {sort_order.label}")


# Move commands: name -> (source, destination, message, docstring)
_MOVE_COMMANDS = {
    "start": (Collection.WISHLIST, Collection.HANGAR, "Started reading", "Move a wishlist book to the hangar."),
    "finish": (Collection.HANGAR, Collection.ARCHIVE, "Finished", "Move a hangar book to the archive."),
    "abandon": (Collection.HANGAR, Collection.WISHLIST, "Back on the wishlist", "Move a hangar book back to the wishlist."),
    "read": (Collection.WISHLIST, Collection.ARCHIVE, "Marked as read", "Archive a wishlist book without reading it in the hangar."),
    "unread": (Collection.ARCHIVE, Collection.WISHLIST, "Marked as unread", "Move an archived book back to the wishlist."),
    "reread": (Collection.ARCHIVE, Collection.HANGAR, "Rereading", "Move an archived book to the hangar."),
}


def _create_move_command(
    name: str,
    source: Collection,
    destination: Collection,
    message: str,
    docstring: str,
) -> Callable[..., None]:
    """Create a command moving a book from source to destination."""

    @cli.command(name=name)
    @click.argument("query")
    @click.pass_context
    def move(ctx: click.Context, query: str) -> None:
        library: Library = ctx.obj["library"]
        stats: StatsEngine = ctx.obj["stats"]

        found = select_book(library, query, (source,))
        if not found:
            return

        book = library.move_book(found[1].id, source, destination)
        if book:
            click.echo(f"{message}: {book.title}")
        announce_achievements(stats)

    move.__doc__ = docstring
    return move


for _name, (_source, _destination, _message, _doc) in _MOVE_COMMANDS.items():
    _create_move_command(_name, _source, _destination, _message, _doc)


@cli.command()
@click.argument("query")
@click.argument("rating", type=int)
@click.pass_context
def rate(ctx: click.Context, query: str, rating: int) -> None:
    """Rate a book 0-5 (out of range values are clamped)."""
    library: Library = ctx.obj["library"]
    stats: StatsEngine = ctx.obj["stats"]

    found = select_book(library, query)
    if not found:
        return

    collection, book = found
    rated = library.set_rating(book.id, rating, collection)
    if rated:
        click.echo(f"Rated: {rated.title} {format_rating(rated.rating)}")
    announce_achievements(stats)


@cli.command()
@click.argument("query")
@click.option("--title", "-t", help="New title")
@click.option("--author", "-a", help="New author")
@click.option("--notes", "-n", help="New notes")
@click.pass_context
def edit(ctx: click.Context, query: str, title: str | None, author: str | None, notes: str | None) -> None:
    """Edit a book's title, author or notes."""
    library: Library = ctx.obj["library"]

    if title is None and author is None and notes is None:
        click.echo("Nothing to update. Use --title, --author or --notes.")
        return
    if title is not None and not title.strip():
        click.echo("Error: title must not be empty.")
        ctx.exit(1)

    found = select_book(library, query)
    if not found:
        return

    book = library.update_book(found[1].id, title=title, author=author, notes=notes)
    if book:
        click.echo(f"Updated: {format_book(book)}")


@cli.command()
@click.argument("query")
@click.option("--collection", "-c", type=COLLECTION_CHOICE, help="Only look in this collection")
@click.pass_context
def remove(ctx: click.Context, query: str, collection: str | None) -> None:
    """Delete a book. Reading stats are kept."""
    library: Library = ctx.obj["library"]
    collections = (Collection(collection),) if collection else tuple(Collection)

    found = select_book(library, query, collections)
    if not found:
        return

    where, book = found
    if library.delete_books(where, [book.id]):
        click.echo(f"Removed from {where.value}: {book.title}")


@cli.command()
@click.argument("collection", type=COLLECTION_CHOICE)
@click.argument("positions", type=int, nargs=-1, required=True)
@click.option("--to", "to", type=int, required=True, help="Insert before this position (count + 1 for the end)")
@click.option(
    "--sort",
    "-s",
    "sort",
    type=SORT_CHOICE,
    help="Order the positions refer to (default: the saved sort order shown by 'holocron list')",
)
@click.pass_context
def reorder(ctx: click.Context, collection: str, positions: tuple[int, ...], to: int, sort: str | None) -> None:
    """Move books to a new position in a collection.

    Positions are the 1-based numbers shown by 'holocron list'.
    """
    library: Library = ctx.obj["library"]
    target = Collection(collection)
    order = _parse_sort(target, sort)

    library.reorder(target, [p - 1 for p in positions], to - 1, order)
    display_collection(target, library.view(target, order))


@cli.command()
@click.argument("query")
@click.option(
    "--filter",
    "-f",
    "filter_option",
    type=click.Choice([f.value for f in FilterOption]),
    default=FilterOption.ALL.value,
    help="Rating filter",
)
@click.pass_context
def search(ctx: click.Context, query: str, filter_option: str) -> None:
    """Search all collections by title, author or notes."""
    library: Library = ctx.obj["library"]
    results = library.search(query, FilterOption(filter_option))

    if results.total == 0:
        click.echo(f"No books found matching '{query}'")
        return

    click.echo(f"{results.total} book(s) matching '{query}':")
    for collection, books in (
        (Collection.WISHLIST, results.wishlist),
        (Collection.HANGAR, results.hangar),
        (Collection.ARCHIVE, results.archive),
    ):
        if books:
            display_collection(collection, books)
