"""Wiring of the library and the stats engine."""

from collections.abc import Callable
from datetime import datetime

from .db import Database
from .library import Library
from .stats import StatsEngine


def open_library(db: Database, clock: Callable[[], datetime] = datetime.now) -> tuple[Library, StatsEngine]:
    """Load the library and stats from db and subscribe the engine to library events."""
    library = Library(db)
    stats = StatsEngine(db, clock=clock)
    library.subscribe(stats.handle_event)
    return library, stats
