"""Reading stats CLI commands."""

import json as json_module

import click

from ..achievements import CATALOG
from ..library import Library
from ..stats import StatsEngine
from .core import cli
from .display_helpers import announce_achievements
from .status_helpers import format_status_text, get_reading_status


@cli.command(name="stats")
@click.option("--format", "-f", type=click.Choice(["text", "json"]), default="text", help="Output format")
@click.pass_context
def show_stats(ctx: click.Context, format: str) -> None:
    """Show reading stats and streaks."""
    library: Library = ctx.obj["library"]
    stats: StatsEngine = ctx.obj["stats"]

    if format == "json":
        data = get_reading_status(library, stats)
        click.echo(json_module.dumps(data, indent=2, default=str))
    else:
        click.echo(format_status_text(library, stats))


@cli.command()
@click.argument("books", type=click.IntRange(min=0))
@click.pass_context
def goal(ctx: click.Context, books: int) -> None:
    """Set the yearly reading goal (0 to clear)."""
    stats: StatsEngine = ctx.obj["stats"]

    stats.set_yearly_goal(books)
    click.echo(f"Yearly goal: {stats.yearly_goal_description}")
    announce_achievements(stats)


@cli.command()
@click.pass_context
def achievements(ctx: click.Context) -> None:
    """List all achievements and which are earned."""
    stats: StatsEngine = ctx.obj["stats"]

    earned = sum(1 for info in CATALOG if stats.is_earned(info.achievement))
    click.echo(f"{earned}/{len(CATALOG)} achievements earned:\n")
    for info in CATALOG:
        marker = "[x]" if stats.is_earned(info.achievement) else "[ ]"
        click.echo(f"  {marker} {info.title} - {info.description}")
