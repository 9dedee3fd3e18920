"""Reading status summary for the stats command."""

from typing import Any

from ..achievements import CATALOG
from ..library import Library
from ..stats import StatsEngine


def get_reading_status(library: Library, stats: StatsEngine) -> dict[str, Any]:
    """Get collection counts and reading stats as a structured dict."""
    s = stats.stats
    return {
        "collections": {
            "wishlist": len(library.wishlist),
            "hangar": len(library.hangar),
            "archive": len(library.archive),
        },
        "streak": {
            "current": s.current_streak,
            "longest": s.longest_streak,
            "last_reading_date": s.last_reading_date.isoformat() if s.last_reading_date else None,
        },
        "completed": {
            "total": s.total_books_completed,
            "by_year": dict(sorted(s.books_completed_by_year.items())),
            "by_month": dict(sorted(s.books_completed_by_month.items())),
        },
        "goal": {
            "yearly_goal": s.yearly_goal,
            "current_year_books_read": s.current_year_books_read,
            "progress": stats.yearly_goal_progress,
        },
        "hangar": {
            "total_moved": s.total_books_moved_to_hangar,
            "currently_tracked": len(s.hangar_entry_dates),
            "average_days": round(s.average_days_in_hangar, 2),
        },
        "ratings": {
            "total_rated": s.total_rated_books,
            "average": round(s.average_rating, 2),
            "distribution": {str(r): s.rating_distribution.get(r, 0) for r in range(1, 6)},
        },
        "achievements": [info.achievement.value for info in CATALOG if stats.is_earned(info.achievement)],
    }


def format_status_text(library: Library, stats: StatsEngine) -> str:
    """Format reading status as readable text."""
    data = get_reading_status(library, stats)
    lines = []

    lines.append("# Holocron Reading Stats\n")

    lines.append("## Collections\n")
    lines.append(f"- Wishlist: {data['collections']['wishlist']}")
    lines.append(f"- Hangar: {data['collections']['hangar']}")
    lines.append(f"- Archive: {data['collections']['archive']}")
    lines.append("")

    lines.append("## Reading\n")
    lines.append(f"- Streak: {stats.streak_description} (longest: {data['streak']['longest']})")
    lines.append(f"- Goal: {stats.yearly_goal_description}")
    lines.append(f"- Books completed: {data['completed']['total']}")
    lines.append(f"- Hangar: {stats.hangar_time_description}")
    lines.append("")

    lines.append("## Ratings\n")
    lines.append(f"- {stats.average_rating_description}")
    for rating in range(5, 0, -1):
        count = data["ratings"]["distribution"][str(rating)]
        if count:
            lines.append(f"- {'*' * rating}: {count}")
    lines.append("")

    if data["completed"]["by_year"]:
        lines.append("## By Year\n")
        for year, count in data["completed"]["by_year"].items():
            lines.append(f"- {year}: {count} books")
        lines.append("")

    lines.append(f"## Achievements ({len(data['achievements'])}/{len(CATALOG)})\n")
    for info in CATALOG:
        if stats.is_earned(info.achievement):
            lines.append(f"- {info.title}")
    lines.append("")

    return "\n".join(lines)
