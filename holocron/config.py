"""Configuration constants for Holocron."""

import os
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".local" / "state" / "holocron" / "holocron.db"

# Display limits
DEFAULT_DISPLAY_LIMIT = 10

LOG_LEVEL = os.environ.get("HOLOCRON_LOG_LEVEL", "WARNING")

# Storage keys
WISHLIST_KEY = "holocronWishlist"
ARCHIVE_KEY = "jediArchives"
HANGAR_KEY = "inTheHangar"
STATS_KEY = "readingStats"

WISHLIST_SORT_KEY = "wishlistSortOrder"
HANGAR_SORT_KEY = "hangarSortOrder"
ARCHIVE_SORT_KEY = "archivesSortOrder"


def resolve_db_path(db_path: str | Path | None = None) -> Path:
    """Resolve the database path.

    Explicit path wins, then HOLOCRON_DB_PATH, then the default location.
    """
    if db_path:
        return Path(db_path)
    env_path = os.environ.get("HOLOCRON_DB_PATH")
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH
