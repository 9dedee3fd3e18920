"""Achievement catalog and evaluation."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .models import ReadingStats

SLOW_AND_STEADY_DAYS = 30


class Achievement(str, Enum):
    FIRST_BOOK = "firstBook"
    STREAK_7 = "streak7"
    STREAK_30 = "streak30"
    STREAK_100 = "streak100"
    BOOKS_10 = "books10"
    BOOKS_50 = "books50"
    BOOKS_100 = "books100"
    PERFECT_RATER = "perfectRater"
    CRITIC_RATER = "criticRater"
    YEARLY_GOAL_MET = "yearlyGoalMet"
    FIVE_STAR_FAN = "fiveStarFan"
    SPEED_READER = "speedReader"
    SLOW_AND_STEADY = "slowAndSteady"

    @property
    def info(self) -> "AchievementInfo":
        return _CATALOG_BY_ID[self]

    @property
    def display_name(self) -> str:
        return self.info.title

    @property
    def icon(self) -> str:
        return self.info.icon

    @property
    def description(self) -> str:
        return self.info.description


Predicate = Callable[[ReadingStats, datetime], bool]


@dataclass(frozen=True)
class AchievementInfo:
    achievement: Achievement
    title: str
    icon: str
    description: str
    predicate: Predicate


def _has_long_hangar_stay(stats: ReadingStats, now: datetime) -> bool:
    return any((now - entered).days >= SLOW_AND_STEADY_DAYS for entered in stats.hangar_entry_dates.values())


# Evaluated in this order; notifications are queued in the same order.
CATALOG: tuple[AchievementInfo, ...] = (
    AchievementInfo(
        Achievement.FIRST_BOOK,
        "First Book Completed",
        "book",
        "Completed your first book!",
        lambda s, now: s.current_year_books_read >= 1 or s.total_books_completed >= 1,
    ),
    AchievementInfo(
        Achievement.STREAK_7,
        "7-Day Reading Streak",
        "flame",
        "Read for 7 days in a row!",
        lambda s, now: s.current_streak >= 7,
    ),
    AchievementInfo(
        Achievement.STREAK_30,
        "30-Day Reading Streak",
        "flame",
        "Read for 30 days in a row!",
        lambda s, now: s.current_streak >= 30,
    ),
    AchievementInfo(
        Achievement.STREAK_100,
        "100-Day Reading Streak",
        "flame",
        "Read for 100 days in a row!",
        lambda s, now: s.current_streak >= 100,
    ),
    AchievementInfo(
        Achievement.BOOKS_10,
        "10 Books Read",
        "books",
        "Completed 10 books!",
        lambda s, now: s.total_books_completed >= 10,
    ),
    AchievementInfo(
        Achievement.BOOKS_50,
        "50 Books Read",
        "books",
        "Completed 50 books!",
        lambda s, now: s.total_books_completed >= 50,
    ),
    AchievementInfo(
        Achievement.BOOKS_100,
        "100 Books Read",
        "books",
        "Completed 100 books!",
        lambda s, now: s.total_books_completed >= 100,
    ),
    AchievementInfo(
        Achievement.PERFECT_RATER,
        "Rated 10 Books",
        "star",
        "Rated 10 books!",
        lambda s, now: s.total_rated_books >= 10,
    ),
    AchievementInfo(
        Achievement.CRITIC_RATER,
        "Rated 50 Books",
        "star",
        "Rated 50 books!",
        lambda s, now: s.total_rated_books >= 50,
    ),
    AchievementInfo(
        Achievement.YEARLY_GOAL_MET,
        "Yearly Goal Achieved",
        "target",
        "Met your yearly reading goal!",
        lambda s, now: s.yearly_goal > 0 and s.current_year_books_read >= s.yearly_goal,
    ),
    AchievementInfo(
        Achievement.FIVE_STAR_FAN,
        "10 Five-Star Books",
        "heart",
        "Gave 5 stars to 10 books!",
        lambda s, now: s.rating_distribution.get(5, 0) >= 10,
    ),
    AchievementInfo(
        Achievement.SPEED_READER,
        "Completed Book in 1 Day",
        "bolt",
        "Finished a book in one day!",
        # Completion timestamps per book are not tracked, so this stays locked.
        lambda s, now: False,
    ),
    AchievementInfo(
        Achievement.SLOW_AND_STEADY,
        "Book in Hangar for 30+ Days",
        "tortoise",
        "Kept a book in hangar for 30+ days!",
        _has_long_hangar_stay,
    ),
)

_CATALOG_BY_ID = {info.achievement: info for info in CATALOG}


def newly_earned(stats: ReadingStats, now: datetime) -> list[Achievement]:
    """Return catalog achievements whose predicate holds but are not yet earned.

    Does not modify stats.
    """
    return [
        info.achievement
        for info in CATALOG
        if info.achievement.value not in stats.achievements and info.predicate(stats, now)
    ]
