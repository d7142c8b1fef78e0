"""Sort, search and paginate scored leaderboard records."""

import math
from dataclasses import dataclass
from typing import Sequence, TypeVar

from ..models import RankedRecord, ScoredRecord, SortKey

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 25

SPOTLIGHT_CATEGORIES = (SortKey.POSTS, SortKey.VIEWS, SortKey.LIKES, SortKey.REPLIES)


def get_sort_value(record: ScoredRecord, sort_key: SortKey) -> float:
    """Value a record is ordered by for a sort key (missing -> 0)."""
    value = getattr(record, sort_key.field_name, None)
    return value if value is not None else 0


def rank_records(
    records: Sequence[ScoredRecord],
    sort_key: SortKey = SortKey.SCORE,
) -> list[RankedRecord]:
    """
    Sort records by a key (highest first) and number them.

    sorted() is stable with reverse=True, so equal values keep their
    input order. Ranks are assigned after sorting.

    Args:
        records: Scored records from one batch
        sort_key: Column to order by

    Returns:
        RankedRecords with stable_rank 1..N
    """
    ordered = sorted(records, key=lambda r: get_sort_value(r, sort_key), reverse=True)
    return [RankedRecord.from_scored(record, index + 1) for index, record in enumerate(ordered)]


def filter_records(ranked: Sequence[RankedRecord], query: str) -> list[RankedRecord]:
    """
    Keep records whose display name or handle contains the query.

    Matching is case-insensitive on the query as typed; a blank query
    keeps everything. Ranks are not touched, so a filtered
    view shows each member's position in the full list.
    """
    if not query or not query.strip():
        return list(ranked)

    term = query.lower()
    return [
        r for r in ranked
        if term in (r.display_name or "").lower() or term in r.username.lower()
    ]


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for count records (0 when empty)."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if count <= 0:
        return 0
    return math.ceil(count / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into [1, max(1, pages)]."""
    return max(1, min(page, max(1, pages)))


def paginate(records: Sequence[T], page: int, page_size: int) -> list[T]:
    """
    Slice out one 1-based page.

    Pages outside the data return an empty list.
    """
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if page < 1:
        return []
    return list(records[(page - 1) * page_size : page * page_size])


@dataclass(frozen=True)
class LeaderboardPage:
    """One page of a ranked, filtered leaderboard."""

    entries: list[RankedRecord]
    current_page: int
    total_pages: int
    total_matches: int
    sort_key: SortKey
    page_size: int = DEFAULT_PAGE_SIZE
    query: str = ""

    @property
    def first_position(self) -> int:
        """Position of the first entry within the filtered list (0 when empty)."""
        if not self.entries:
            return 0
        return (self.current_page - 1) * self.page_size + 1

    @property
    def last_position(self) -> int:
        """Position of the last entry within the filtered list (0 when empty)."""
        if not self.entries:
            return 0
        return self.first_position + len(self.entries) - 1


def build_page(
    records: Sequence[ScoredRecord],
    sort_key: SortKey = SortKey.SCORE,
    query: str = "",
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> LeaderboardPage:
    """Rank, filter and paginate a scored batch, clamping the page number."""
    ranked = rank_records(records, sort_key)
    matches = filter_records(ranked, query)
    pages = total_pages(len(matches), page_size)
    current = clamp_page(page, pages)

    return LeaderboardPage(
        entries=paginate(matches, current, page_size),
        current_page=current,
        total_pages=pages,
        total_matches=len(matches),
        sort_key=sort_key,
        page_size=page_size,
        query=query,
    )


def select_spotlight(
    records: Sequence[ScoredRecord],
    per_category: int = 15,
    categories: Sequence[SortKey] = SPOTLIGHT_CATEGORIES,
) -> list[ScoredRecord]:
    """
    Merge the top members of several categories into one list.

    Categories are taken in order; a member already picked by an earlier
    category is skipped.
    """
    seen: set[str] = set()
    picked: list[ScoredRecord] = []

    for sort_key in categories:
        top = sorted(records, key=lambda r: get_sort_value(r, sort_key), reverse=True)
        for record in top[:per_category]:
            if record.username not in seen:
                seen.add(record.username)
                picked.append(record)

    return picked
