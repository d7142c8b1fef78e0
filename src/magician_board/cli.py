"""Command-line interface for the Magician leaderboard."""

from typing import NoReturn, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .board import MagicianBoard, PlayerProfile
from .config import CONFIG_ENV_VAR, BoardConfig, load_config
from .logger import setup_logging
from .lookup import MemberNotFoundError
from .models import RarityTier, ScoredRecord, SortKey, ValentineNote
from .ranking import LeaderboardPage
from .valentines import ValentineLimitError

console = Console()

SORT_CHOICES = [key.value for key in SortKey]

TIER_COLORS = {
    RarityTier.COMMON: "white",
    RarityTier.UNCOMMON: "magenta",
    RarityTier.RARE: "green",
    RarityTier.EPIC: "cyan",
    RarityTier.LEGENDARY: "yellow",
    RarityTier.MYTHICAL: "bright_magenta",
    RarityTier.GOAT: "red",
    RarityTier.QUEEN: "bright_white",
}


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(1)


def format_tier(tier: RarityTier) -> str:
    color = TIER_COLORS[tier]
    return f"[{color}]{tier.value}[/{color}]"


def format_member(record: ScoredRecord) -> str:
    name = escape(record.display_name or record.username)
    return f"{name} [dim]@{escape(record.username)}[/dim]"


def display_leaderboard(board: MagicianBoard, page: LeaderboardPage) -> None:
    """Render one leaderboard page."""
    title = f"Leaderboard by {page.sort_key.value}"
    if page.query:
        title += f" matching '{escape(page.query)}'"

    table = Table(title=title)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Member")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Tier")
    if page.sort_key != SortKey.SCORE:
        table.add_column(page.sort_key.value.capitalize(), style="yellow", justify="right")

    for entry in page.entries:
        row = [
            str(entry.stable_rank),
            format_member(entry),
            f"{entry.magician_score:.1f}",
            format_tier(board.rarity_for(entry).tier),
        ]
        if page.sort_key != SortKey.SCORE:
            row.append(f"{getattr(entry, page.sort_key.field_name):,}")
        table.add_row(*row)

    console.print(table)

    if not page.entries:
        console.print("[yellow]No members found.[/yellow]")
        return

    console.print(
        f"Showing results {page.first_position} - {page.last_position} of {page.total_matches}  "
        f"[dim]page {page.current_page:02d} / {page.total_pages:02d}[/dim]"
    )


def display_profile(profile: PlayerProfile) -> None:
    """Render a member profile card."""
    record = profile.record
    rank = f"#{profile.rank}" if profile.rank is not None else "unranked"

    lines = [
        f"[bold]{escape(record.display_name or record.username)}[/bold] [dim]@{escape(record.username)}[/dim]",
        f"Role: {escape(profile.role)}",
        f"Rarity: {format_tier(profile.rarity.tier)}",
        f"Magician Score: [green]{record.magician_score:.1f}[/green] ({rank})",
        "",
        f"Posts: {record.posts_count:,}   Views: {record.views_total:,}",
        f"Likes: {record.likes_total:,}   Replies: {record.replies_total:,}",
        f"Retweets: {record.retweets_total:,}   Quotes: {record.quotes_total:,}",
    ]
    if record.best_post:
        lines.append(f"Best post: {escape(record.best_post)}")

    color = TIER_COLORS[profile.rarity.tier]
    console.print(Panel("\n".join(lines), title="[bold]Player Card[/bold]", border_style=color))


def display_valentines(notes: list[ValentineNote]) -> None:
    """Render valentine notes."""
    if not notes:
        console.print("[yellow]No valentines yet.[/yellow]")
        return

    table = Table(title="Valentines")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Tier")
    table.add_column("Message")

    for note in notes:
        recipient = f"@{note.recipient_username}" if note.recipient_username else "community"
        tier = format_tier(note.rarity_tier) if note.rarity_tier else "-"
        table.add_row(
            f"@{escape(note.sender_username)}",
            escape(recipient),
            tier,
            escape(note.message_text),
        )

    console.print(table)


def load_board(config: BoardConfig, snapshot: str, valentine_path: Optional[str] = None) -> MagicianBoard:
    return MagicianBoard.from_snapshot(snapshot, config=config, valentine_path=valentine_path)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    envvar=CONFIG_ENV_VAR,
    help=f"JSON config file (or ${CONFIG_ENV_VAR})",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Magician Board - rank community members and build their cards."""
    config = load_config(config_path)
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = config


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--sort", "-s", "sort_key",
    type=click.Choice(SORT_CHOICES),
    default=SortKey.SCORE.value,
    help="Column to rank by",
)
@click.option("--search", "-q", type=str, default="", help="Filter by display name or handle")
@click.option("--page", "-p", type=int, default=1, help="Page number (1-based)")
@click.option("--page-size", type=click.IntRange(min=1), help="Rows per page")
@click.pass_obj
def leaderboard(
    config: BoardConfig,
    snapshot: str,
    sort_key: str,
    search: str,
    page: int,
    page_size: Optional[int],
):
    """Show the ranked leaderboard."""
    board = load_board(config, snapshot)
    result = board.get_leaderboard(sort_key=sort_key, query=search, page=page, page_size=page_size)
    display_leaderboard(board, result)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.argument("identifier")
@click.pass_obj
def player(config: BoardConfig, snapshot: str, identifier: str):
    """Show the card of one member."""
    board = load_board(config, snapshot)
    try:
        profile = board.lookup_player(identifier)
    except MemberNotFoundError as e:
        fail(str(e))
    display_profile(profile)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--per-category", "-n", type=click.IntRange(min=1), help="Members taken per category")
@click.pass_obj
def spotlight(config: BoardConfig, snapshot: str, per_category: Optional[int]):
    """List the top members across posts, views, likes and replies."""
    board = load_board(config, snapshot)
    members = board.get_spotlight(per_category)

    table = Table(title="Spotlight")
    table.add_column("Member")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Posts", justify="right")
    table.add_column("Views", justify="right")
    table.add_column("Likes", justify="right")
    table.add_column("Replies", justify="right")

    for record in members:
        table.add_row(
            format_member(record),
            f"{record.magician_score:.1f}",
            f"{record.posts_count:,}",
            f"{record.views_total:,}",
            f"{record.likes_total:,}",
            f"{record.replies_total:,}",
        )

    console.print(table)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def tiers(config: BoardConfig, snapshot: str):
    """Show how many members sit in each rarity tier."""
    board = load_board(config, snapshot)
    distribution = board.tier_distribution()

    table = Table(title="Rarity Distribution")
    table.add_column("Tier")
    table.add_column("Members", style="yellow", justify="right")

    for tier, count in distribution.items():
        table.add_row(format_tier(tier), str(count))

    console.print(table)


@cli.group()
def valentine():
    """Send and list valentines."""
    pass


@valentine.command("send")
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--from", "sender", required=True, help="Sender handle")
@click.option("--to", "recipient", help="Recipient handle (default: the whole community)")
@click.option("--message", "-m", required=True, help="Message text")
@click.option("--store", "store_path", type=click.Path(dir_okay=False), default="valentines.json",
              show_default=True, help="Valentine JSON file")
@click.pass_obj
def send_valentine(
    config: BoardConfig,
    snapshot: str,
    sender: str,
    recipient: Optional[str],
    message: str,
    store_path: str,
):
    """Send a valentine to a member or the community."""
    board = load_board(config, snapshot, store_path)
    try:
        note = board.send_valentine(sender, message, recipient)
    except (MemberNotFoundError, ValentineLimitError) as e:
        fail(str(e))
    except ValidationError as e:
        fail(f"Invalid valentine: {e.errors()[0]['msg']}")

    target = f"@{note.recipient_username}" if note.recipient_username else "the community"
    console.print(f"[green]O[/green] Valentine {note.id} sent to {escape(target)}")
    if note.rarity_tier:
        console.print(f"  Sender tier: {format_tier(note.rarity_tier)}")


@valentine.command("list")
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False))
@click.option("--sender", help="Only notes from this handle")
@click.option("--store", "store_path", type=click.Path(dir_okay=False), default="valentines.json",
              show_default=True, help="Valentine JSON file")
@click.pass_obj
def list_valentines(config: BoardConfig, snapshot: str, sender: Optional[str], store_path: str):
    """List stored valentines, newest first."""
    board = load_board(config, snapshot, store_path)
    display_valentines(board.list_valentines(sender))


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
