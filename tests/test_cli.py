"""Integration tests for CLI commands."""

import json
from datetime import datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from holocron.cli import cli
from holocron.db import Database
from holocron.library import Library
from holocron.models import Book, Collection, SortOrder


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_db_path(tmp_path: Path) -> Path:
    return tmp_path / "cli.db"


@pytest.fixture
def invoke(runner: CliRunner, cli_db_path: Path):
    """Invoke the CLI against the temporary database."""

    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(cli, ["--db-path", str(cli_db_path), *args], input=input)

    return _invoke


def _library(path: Path) -> Library:
    with Database(db_path=path) as db:
        return Library(db)


def _seed(path: Path, collection: Collection, *books: Book) -> None:
    with Database(db_path=path) as db:
        library = Library(db)
        library.collections[collection].extend(books)
        library.commit(collection)


class TestHelp:
    def test_help_does_not_create_db(self, runner: CliRunner, cli_db_path: Path) -> None:
        result = runner.invoke(cli, ["--db-path", str(cli_db_path), "--help"])

        assert result.exit_code == 0
        assert "wishlist" in result.output
        assert not cli_db_path.exists()


class TestAddCommand:
    def test_add_basic_book(self, invoke, cli_db_path: Path) -> None:
        result = invoke("add", "Dune", "-a", "Frank Herbert", "-n", "Spice")

        assert result.exit_code == 0
        assert "Added to wishlist: Dune by Frank Herbert" in result.output
        assert "Notes: Spice" in result.output

        library = _library(cli_db_path)
        assert [b.title for b in library.wishlist] == ["Dune"]
        assert library.wishlist[0].notes == "Spice"

    def test_add_rejects_empty_title(self, invoke, cli_db_path: Path) -> None:
        result = invoke("add", "   ")

        assert result.exit_code == 1
        assert "title must not be empty" in result.output
        assert _library(cli_db_path).wishlist == []


class TestListCommand:
    def test_list_all_empty(self, invoke) -> None:
        result = invoke("list")

        assert result.exit_code == 0
        assert "Wishlist is empty." in result.output
        assert "Hangar is empty." in result.output
        assert "Archive is empty." in result.output

    def test_list_sorted(self, invoke, cli_db_path: Path) -> None:
        _seed(
            cli_db_path,
            Collection.ARCHIVE,
            Book(title="Beta", author="", rating=2),
            Book(title="Alpha", author="", rating=5),
        )

        result = invoke("list", "archive", "--sort", "ratingDescending")

        assert result.exit_code == 0
        assert result.output.index("1. Alpha") < result.output.index("2. Beta")
        assert "[*****]" in result.output

    def test_sort_applies_to_every_collection(self, invoke, cli_db_path: Path) -> None:
        _seed(cli_db_path, Collection.WISHLIST, Book(title="Zed", author=""), Book(title="Ann", author=""))
        _seed(
            cli_db_path,
            Collection.ARCHIVE,
            Book(title="Beta", author="", rating=2),
            Book(title="Alpha", author="", rating=5),
        )

        result = invoke("list", "--sort", "titleAscending")

        assert result.exit_code == 0
        assert result.output.index("1. Ann") < result.output.index("2. Zed")
        assert result.output.index("1. Alpha") < result.output.index("2. Beta")

    def test_sort_skipped_where_not_offered(self, invoke, cli_db_path: Path) -> None:
        _seed(cli_db_path, Collection.WISHLIST, Book(title="Zed", author=""), Book(title="Ann", author=""))
        _seed(
            cli_db_path,
            Collection.ARCHIVE,
            Book(title="Beta", author="", rating=2),
            Book(title="Alpha", author="", rating=5),
        )

        result = invoke("list", "--sort", "ratingDescending")

        assert result.exit_code == 0
        assert result.output.index("1. Zed") < result.output.index("2. Ann")
        assert result.output.index("1. Alpha") < result.output.index("2. Beta")

    def test_rating_sort_rejected_for_wishlist(self, invoke) -> None:
        result = invoke("list", "wishlist", "--sort", "ratingAscending")

        assert result.exit_code != 0
        assert "not available for wishlist" in result.output


class TestSortCommand:
    def test_set_sort_order(self, invoke, cli_db_path: Path) -> None:
        result = invoke("sort", "hangar", "titleDescending")

        assert result.exit_code == 0
        assert "Hangar sorted by Title (Z-A)" in result.output
        with Database(db_path=cli_db_path) as db:
            assert Library(db).sort_order(Collection.HANGAR) == SortOrder.TITLE_DESCENDING

    def test_invalid_for_collection(self, invoke) -> None:
        result = invoke("sort", "wishlist", "ratingDescending")

        assert result.exit_code == 1
        assert "not available for wishlist" in result.output


class TestMoveCommands:
    def test_reading_lifecycle(self, invoke, cli_db_path: Path) -> None:
        invoke("add", "Dune", "-a", "Frank Herbert")

        result = invoke("start", "Dune")
        assert result.exit_code == 0
        assert "Started reading: Dune" in result.output

        result = invoke("finish", "dune")
        assert result.exit_code == 0
        assert "Finished: Dune" in result.output
        assert "Achievement unlocked: First Book Completed" in result.output

        library = _library(cli_db_path)
        assert library.wishlist == []
        assert library.hangar == []
        assert [b.title for b in library.archive] == ["Dune"]

    def test_move_from_wrong_collection(self, invoke) -> None:
        invoke("add", "Dune")

        result = invoke("finish", "Dune")

        assert result.exit_code == 0
        assert "No books found matching 'Dune'" in result.output

    def test_read_resets_rating(self, invoke, cli_db_path: Path) -> None:
        _seed(cli_db_path, Collection.WISHLIST, Book(title="Emma", author="Austen", rating=4))

        result = invoke("read", "Emma")

        assert "Marked as read: Emma" in result.output
        assert _library(cli_db_path).archive[0].rating == 0

    def test_prompt_on_multiple_matches(self, invoke, cli_db_path: Path) -> None:
        invoke("add", "Dune Messiah")
        invoke("add", "Children of Dune")

        result = invoke("start", "dune", input="2\n")

        assert result.exit_code == 0
        assert "Multiple books match 'dune'" in result.output
        assert "Started reading: Children of Dune" in result.output
        assert [b.title for b in _library(cli_db_path).hangar] == ["Children of Dune"]


class TestRateCommand:
    def test_rate_clamps(self, invoke, cli_db_path: Path) -> None:
        _seed(cli_db_path, Collection.ARCHIVE, Book(title="Dune", author="Herbert"))

        result = invoke("rate", "Dune", "9")

        assert result.exit_code == 0
        assert "Rated: Dune [*****]" in result.output
        assert _library(cli_db_path).archive[0].rating == 5

    def test_rate_updates_stats(self, invoke) -> None:
        invoke("add", "Dune")
        invoke("rate", "Dune", "4")

        result = invoke("stats", "-f", "json")
        data = json.loads(result.output)
        assert data["ratings"]["total_rated"] == 1
        assert data["ratings"]["distribution"]["4"] == 1


class TestEditCommand:
    def test_edit_title(self, invoke, cli_db_path: Path) -> None:
        invoke("add", "Dnue", "-a", "Herbert")

        result = invoke("edit", "Dnue", "--title", "Dune", "--notes", "fixed")

        assert result.exit_code == 0
        assert "Updated: Dune - Herbert" in result.output
        book = _library(cli_db_path).wishlist[0]
        assert (book.title, book.author, book.notes) == ("Dune", "Herbert", "fixed")

    def test_nothing_to_update(self, invoke) -> None:
        invoke("add", "Dune")
        result = invoke("edit", "Dune")
        assert "Nothing to update" in result.output


class TestRemoveCommand:
    def test_remove(self, invoke, cli_db_path: Path) -> None:
        invoke("add", "Dune")
        invoke("add", "Emma")

        result = invoke("remove", "Dune", "-c", "wishlist")

        assert result.exit_code == 0
        assert "Removed from wishlist: Dune" in result.output
        assert [b.title for b in _library(cli_db_path).wishlist] == ["Emma"]


class TestReorderCommand:
    def test_reorder_positions(self, invoke, cli_db_path: Path) -> None:
        for title in ("A", "B", "C"):
            invoke("add", title)

        result = invoke("reorder", "wishlist", "3", "--to", "1")

        assert result.exit_code == 0
        assert [b.title for b in _library(cli_db_path).wishlist] == ["C", "A", "B"]

    def test_reorder_in_sorted_view(self, invoke, cli_db_path: Path) -> None:
        for title in ("C", "A", "B"):
            invoke("add", title)

        # title view: A, B, C -> move "A" to the end
        result = invoke("reorder", "wishlist", "1", "--to", "4", "--sort", "titleAscending")

        assert result.exit_code == 0
        assert [b.title for b in _library(cli_db_path).wishlist] == ["C", "B", "A"]

    def test_reorder_uses_saved_sort_order(self, invoke, cli_db_path: Path) -> None:
        for title in ("Cats", "Apes", "Bees"):
            invoke("add", title)
        invoke("sort", "wishlist", "titleDescending")

        # saved view: Cats, Bees, Apes -> move "Apes" to the top
        result = invoke("reorder", "wishlist", "3", "--to", "1")

        assert result.exit_code == 0
        assert result.output.index("1. Cats") < result.output.index("3. Apes")
        assert [b.title for b in _library(cli_db_path).wishlist] == ["Apes", "Cats", "Bees"]


class TestSearchCommand:
    def test_search(self, invoke, cli_db_path: Path) -> None:
        _seed(cli_db_path, Collection.ARCHIVE, Book(title="Dune", author="Frank Herbert", rating=5))
        _seed(cli_db_path, Collection.WISHLIST, Book(title="Emma", author="Jane Austen"))

        result = invoke("search", "herbert")

        assert result.exit_code == 0
        assert "1 book(s) matching 'herbert'" in result.output
        assert "Dune" in result.output
        assert "Emma" not in result.output

    def test_search_filter(self, invoke, cli_db_path: Path) -> None:
        _seed(cli_db_path, Collection.ARCHIVE, Book(title="Dune", author="Herbert", rating=2))

        result = invoke("search", "dune", "--filter", "highRated")

        assert "No books found matching 'dune'" in result.output


class TestStatsCommands:
    def test_stats_text(self, invoke) -> None:
        result = invoke("stats")

        assert result.exit_code == 0
        assert "Holocron Reading Stats" in result.output
        assert "Start your reading streak!" in result.output

    def test_stats_json_after_completion(self, invoke) -> None:
        invoke("add", "Dune")
        invoke("start", "Dune")
        invoke("finish", "Dune")

        result = invoke("stats", "-f", "json")

        data = json.loads(result.output)
        year = str(datetime.now().year)
        assert data["collections"] == {"wishlist": 0, "hangar": 0, "archive": 1}
        assert data["completed"]["by_year"] == {year: 1}
        assert data["streak"]["current"] == 1
        assert data["hangar"]["total_moved"] == 1
        assert data["achievements"] == ["firstBook"]

    def test_goal(self, invoke) -> None:
        invoke("add", "Dune")
        invoke("start", "Dune")
        invoke("finish", "Dune")

        result = invoke("goal", "1")

        assert result.exit_code == 0
        assert "Yearly goal: 1/1 books this year" in result.output
        assert "Achievement unlocked: Yearly Goal Achieved" in result.output

    def test_goal_rejects_negative(self, invoke) -> None:
        result = invoke("goal", "-1")
        assert result.exit_code != 0

    def test_achievements_list(self, invoke) -> None:
        result = invoke("achievements")

        assert result.exit_code == 0
        assert "0/13 achievements earned" in result.output
        assert "[ ] 10 Five-Star Books" in result.output
