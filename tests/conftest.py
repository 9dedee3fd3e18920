"""Shared test fixtures."""

from collections.abc import Iterator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from holocron.app import open_library
from holocron.db import Database
from holocron.library import Library
from holocron.stats import StatsEngine


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.now += timedelta(days=days, hours=hours)


@pytest.fixture
def tmp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test_holocron.db"


@pytest.fixture
def db(tmp_db_path: Path) -> Iterator[Database]:
    """Create a temporary database for testing."""
    database = Database(db_path=tmp_db_path)
    yield database
    database.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 10, 9, 30))


@pytest.fixture
def wired(db: Database, clock: FakeClock) -> tuple[Library, StatsEngine]:
    """Library with a stats engine subscribed to its events."""
    return open_library(db, clock=clock)


@pytest.fixture
def library(wired: tuple[Library, StatsEngine]) -> Library:
    return wired[0]


@pytest.fixture
def stats(wired: tuple[Library, StatsEngine]) -> StatsEngine:
    return wired[1]
