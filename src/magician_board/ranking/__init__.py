"""Leaderboard ranking, search and pagination."""

from .leaderboard import (
    LeaderboardPage,
    build_page,
    clamp_page,
    filter_records,
    paginate,
    rank_records,
    select_spotlight,
    total_pages,
)

__all__ = [
    "LeaderboardPage",
    "build_page",
    "clamp_page",
    "filter_records",
    "paginate",
    "rank_records",
    "select_spotlight",
    "total_pages",
]
