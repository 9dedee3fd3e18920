"""Unit tests for achievement evaluation."""

from datetime import datetime, timedelta

from holocron.achievements import CATALOG, Achievement, newly_earned
from holocron.library import Library
from holocron.models import Book, ReadingStats
from holocron.stats import StatsEngine

from .conftest import FakeClock

NOW = datetime(2025, 3, 10, 9, 30)


def _complete(library: Library, title: str) -> Book:
    book = library.add(Book(title=title, author=""))
    library.start_reading(book.id)
    library.finish_reading(book.id)
    return book


class TestCatalog:
    def test_every_achievement_in_catalog_once(self) -> None:
        assert [info.achievement for info in CATALOG] == list(Achievement)

    def test_display_metadata(self) -> None:
        assert Achievement.FIVE_STAR_FAN.display_name == "10 Five-Star Books"
        assert Achievement.FIVE_STAR_FAN.icon == "heart"
        assert Achievement.YEARLY_GOAL_MET.description == "Met your yearly reading goal!"
        assert Achievement.FIVE_STAR_FAN.value == "fiveStarFan"


class TestNewlyEarned:
    def test_empty_stats_earn_nothing(self) -> None:
        assert newly_earned(ReadingStats(), NOW) == []

    def test_book_milestones_span_years(self) -> None:
        stats = ReadingStats(books_completed_by_year={"2023": 40, "2024": 10})
        earned = newly_earned(stats, NOW)
        assert Achievement.FIRST_BOOK in earned
        assert Achievement.BOOKS_10 in earned
        assert Achievement.BOOKS_50 in earned
        assert Achievement.BOOKS_100 not in earned

    def test_streak_thresholds(self) -> None:
        earned = newly_earned(ReadingStats(current_streak=30), NOW)
        assert Achievement.STREAK_7 in earned
        assert Achievement.STREAK_30 in earned
        assert Achievement.STREAK_100 not in earned

    def test_raters(self) -> None:
        earned = newly_earned(ReadingStats(total_rated_books=10), NOW)
        assert Achievement.PERFECT_RATER in earned
        assert Achievement.CRITIC_RATER not in earned

    def test_yearly_goal_needs_a_goal(self) -> None:
        assert Achievement.YEARLY_GOAL_MET not in newly_earned(ReadingStats(current_year_books_read=3), NOW)
        stats = ReadingStats(yearly_goal=3, current_year_books_read=3)
        assert Achievement.YEARLY_GOAL_MET in newly_earned(stats, NOW)

    def test_slow_and_steady(self) -> None:
        recent = ReadingStats(hangar_entry_dates={"b1": NOW - timedelta(days=29)})
        old = ReadingStats(hangar_entry_dates={"b1": NOW - timedelta(days=30)})
        assert Achievement.SLOW_AND_STEADY not in newly_earned(recent, NOW)
        assert Achievement.SLOW_AND_STEADY in newly_earned(old, NOW)

    def test_speed_reader_stays_locked(self) -> None:
        stats = ReadingStats(
            current_streak=500,
            books_completed_by_year={"2025": 500},
            total_rated_books=500,
            rating_distribution={5: 500},
        )
        assert Achievement.SPEED_READER not in newly_earned(stats, NOW)

    def test_earned_achievements_skipped(self) -> None:
        stats = ReadingStats(books_completed_by_year={"2025": 1}, achievements={"firstBook"})
        assert newly_earned(stats, NOW) == []

    def test_does_not_modify_stats(self) -> None:
        stats = ReadingStats(current_streak=7)
        newly_earned(stats, NOW)
        assert stats.achievements == set()


class TestEngineAchievements:
    def test_five_star_fan(self, library: Library, stats: StatsEngine) -> None:
        for i in range(10):
            book = library.add(Book(title=f"Favourite {i}", author=""))
            library.mark_as_read(book.id)
            library.set_rating(book.id, 5)

        assert stats.is_earned(Achievement.FIVE_STAR_FAN)
        assert stats.new_achievements.count(Achievement.FIVE_STAR_FAN) == 1

        book = library.add(Book(title="Favourite 11", author=""))
        library.mark_as_read(book.id)
        library.set_rating(book.id, 5)

        assert stats.stats.rating_distribution[5] == 11
        assert stats.new_achievements.count(Achievement.FIVE_STAR_FAN) == 1
        assert "fiveStarFan" in stats.stats.achievements

    def test_yearly_goal_met_once(self, library: Library, stats: StatsEngine) -> None:
        stats.set_yearly_goal(1)
        _complete(library, "One")

        assert stats.is_earned(Achievement.YEARLY_GOAL_MET)

        _complete(library, "Two")

        assert stats.new_achievements.count(Achievement.YEARLY_GOAL_MET) == 1

    def test_goal_set_after_reading(self, library: Library, stats: StatsEngine) -> None:
        _complete(library, "One")
        _complete(library, "Two")
        stats.clear_new_achievements()

        stats.set_yearly_goal(2)

        assert stats.new_achievements == [Achievement.YEARLY_GOAL_MET]

    def test_queue_order_follows_catalog(self, library: Library, stats: StatsEngine, clock: FakeClock) -> None:
        for day in range(7):
            _complete(library, f"Day {day}")
            clock.advance(days=1)

        assert stats.new_achievements == [Achievement.FIRST_BOOK, Achievement.STREAK_7]

    def test_clear_keeps_earned_set(self, library: Library, stats: StatsEngine) -> None:
        _complete(library, "One")
        stats.clear_new_achievements()

        assert stats.new_achievements == []
        assert stats.is_earned(Achievement.FIRST_BOOK)

    def test_never_unearned(self, library: Library, stats: StatsEngine, clock: FakeClock) -> None:
        for day in range(7):
            _complete(library, f"Day {day}")
            clock.advance(days=1)
        clock.advance(days=5)
        _complete(library, "After gap")

        assert stats.stats.current_streak == 1
        assert stats.is_earned(Achievement.STREAK_7)

    def test_slow_and_steady_checked_on_next_event(
        self, library: Library, stats: StatsEngine, clock: FakeClock
    ) -> None:
        slow = library.add(Book(title="Slow", author=""))
        library.start_reading(slow.id)
        clock.advance(days=31)

        assert not stats.is_earned(Achievement.SLOW_AND_STEADY)

        _complete(library, "Quick")

        assert stats.is_earned(Achievement.SLOW_AND_STEADY)
