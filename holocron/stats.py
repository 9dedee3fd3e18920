"""Reading statistics engine.

Consumes lifecycle events from the library and keeps ReadingStats up to date.
Stats are persisted under the ``readingStats`` key after every change.
"""

from collections.abc import Callable
from datetime import datetime, timedelta

from loguru import logger

from .achievements import Achievement, newly_earned
from .codec import decode_stats, encode_stats
from .config import STATS_KEY
from .db import Database
from .errors import CodecError
from .events import BookCompleted, BookEnteredHangar, BookRated, LibraryEvent
from .models import Book, ReadingStats, clamp_rating


class StatsEngine:
    """Maintains reading statistics and the pending achievement queue."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = datetime.now):
        """Initialize the engine and load persisted stats.

        Args:
            db: Key-value store holding the stats blob
            clock: Source of the current time
        """
        self.db = db
        self.clock = clock
        self.stats = self._load()
        self.new_achievements: list[Achievement] = []
        self._sync_current_year()

    # Persistence

    def _load(self) -> ReadingStats:
        data = self.db.load(STATS_KEY)
        if data is None:
            return ReadingStats()
        try:
            return decode_stats(data)
        except CodecError as e:
            logger.warning("Failed to load reading stats, starting fresh: {}", e)
            return ReadingStats()

    def commit(self) -> None:
        """Persist current stats. Failures are logged and the write dropped."""
        try:
            self.db.save(STATS_KEY, encode_stats(self.stats))
        except CodecError as e:
            logger.error("Failed to save reading stats: {}", e)

    # Event handling

    def handle_event(self, event: LibraryEvent) -> None:
        """Library listener entry point."""
        if isinstance(event, BookEnteredHangar):
            self.on_book_entered_hangar(event.book)
        elif isinstance(event, BookCompleted):
            self.on_book_completed(event.book)
        elif isinstance(event, BookRated):
            self.on_book_rated(event.previous, event.new_rating)

    def on_book_entered_hangar(self, book: Book) -> None:
        self.stats.hangar_entry_dates[book.id] = self.clock()
        self.stats.total_books_moved_to_hangar += 1
        logger.debug("'{}' entered the hangar", book.title)
        self.commit()

    def on_book_completed(self, book: Book) -> None:
        """Record a book finished from the hangar."""
        stats = self.stats
        year = self.current_year
        month = self.current_month

        stats.books_completed_by_year[year] = stats.books_completed_by_year.get(year, 0) + 1
        stats.books_completed_by_month[month] = stats.books_completed_by_month.get(month, 0) + 1
        self._sync_current_year()

        self._update_reading_streak()
        self._update_average_days_in_hangar(book.id)
        logger.debug("'{}' completed, {} this year", book.title, stats.current_year_books_read)

        self.check_for_new_achievements()
        self.commit()

    def on_book_rated(self, previous: Book, new_rating: int) -> None:
        """Move a book's rating between distribution buckets.

        Args:
            previous: The book as it was before the rating change
            new_rating: The rating it now holds
        """
        stats = self.stats
        old_rating = previous.rating
        new_rating = clamp_rating(new_rating)

        if old_rating > 0:
            remaining = stats.rating_distribution.get(old_rating, 0) - 1
            if remaining > 0:
                stats.rating_distribution[old_rating] = remaining
            else:
                stats.rating_distribution.pop(old_rating, None)
        elif new_rating > 0:
            stats.total_rated_books += 1

        if new_rating > 0:
            stats.rating_distribution[new_rating] = stats.rating_distribution.get(new_rating, 0) + 1

        self._update_average_rating()
        self.check_for_new_achievements()
        self.commit()

    def set_yearly_goal(self, goal: int) -> None:
        self.stats.yearly_goal = max(0, int(goal))
        self.check_for_new_achievements()
        self.commit()

    # Derived state

    def _update_reading_streak(self) -> None:
        stats = self.stats
        now = self.clock()
        today = now.date()
        last = stats.last_reading_date.date() if stats.last_reading_date else None

        if last is not None and last in (today, today - timedelta(days=1)):
            # Only one increment per calendar day
            if last != today:
                stats.current_streak += 1
        else:
            stats.current_streak = 1

        stats.last_reading_date = now
        stats.longest_streak = max(stats.longest_streak, stats.current_streak)

    def _sync_current_year(self) -> None:
        # The count belongs to the calendar year of the clock, not of the last completion
        self.stats.current_year_books_read = self.stats.books_completed_by_year.get(self.current_year, 0)

    def _update_average_days_in_hangar(self, book_id: str) -> None:
        stats = self.stats
        entered = stats.hangar_entry_dates.pop(book_id, None)
        days = (self.clock() - entered).days if entered else 0

        n = stats.total_books_moved_to_hangar
        if n <= 0:
            logger.warning("Book {} completed without any recorded hangar entries", book_id)
            return
        stats.average_days_in_hangar = (stats.average_days_in_hangar * (n - 1) + days) / n

    def _update_average_rating(self) -> None:
        buckets = {r: c for r, c in self.stats.rating_distribution.items() if 1 <= r <= 5}
        total = sum(buckets.values())
        points = sum(rating * count for rating, count in buckets.items())
        self.stats.average_rating = points / total if total > 0 else 0.0

    # Achievements

    def check_for_new_achievements(self) -> list[Achievement]:
        """Earn every achievement whose predicate now holds and queue it."""
        self._sync_current_year()
        earned = newly_earned(self.stats, self.clock())
        for achievement in earned:
            self.stats.achievements.add(achievement.value)
            logger.info("Achievement unlocked: {}", achievement.display_name)
        self.new_achievements.extend(earned)
        return earned

    def clear_new_achievements(self) -> None:
        """Drain the pending queue. Earned achievements are kept."""
        self.new_achievements.clear()

    def is_earned(self, achievement: Achievement) -> bool:
        return achievement.value in self.stats.achievements

    # Labels and descriptions

    @property
    def current_year(self) -> str:
        return self.clock().strftime("%Y")

    @property
    def current_month(self) -> str:
        return self.clock().strftime("%Y-%m")

    @property
    def streak_description(self) -> str:
        streak = self.stats.current_streak
        if streak == 0:
            return "Start your reading streak!"
        if streak == 1:
            return "1 day streak"
        return f"{streak} day streak"

    @property
    def yearly_goal_progress(self) -> float:
        if self.stats.yearly_goal <= 0:
            return 0.0
        return self.stats.current_year_books_read / self.stats.yearly_goal

    @property
    def yearly_goal_description(self) -> str:
        if self.stats.yearly_goal == 0:
            return "Set a yearly goal"
        return f"{self.stats.current_year_books_read}/{self.stats.yearly_goal} books this year"

    @property
    def average_rating_description(self) -> str:
        if self.stats.average_rating == 0:
            return "Start rating books"
        return f"{self.stats.average_rating:.1f} star average"

    @property
    def hangar_time_description(self) -> str:
        if self.stats.average_days_in_hangar == 0:
            return "No completed books yet"
        return f"{self.stats.average_days_in_hangar:.1f} days average reading time"
