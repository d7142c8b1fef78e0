"""
Session facade over the scoring, ranking and rarity modules.

Every query rescores the full snapshot, so results always reflect the
records currently held and no maxima survive between calls.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from .config import BoardConfig
from .lookup import MemberNotFoundError, find_member
from .models import (
    ActivityRecord,
    RarityConfig,
    RarityTier,
    RecipientType,
    ScoredRecord,
    SortKey,
    ValentineNote,
)
from .ranking import LeaderboardPage, build_page, rank_records, select_spotlight
from .rarity import best_role, classify_rarity, parse_roles
from .scoring import compute_normalization_context, compute_scores, compute_single_score
from .store import SnapshotStore, ValentineStore
from .valentines import enrich_valentines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerProfile:
    """Everything a profile card needs for one member."""

    record: ScoredRecord
    rank: Optional[int]  # None when the member is outside the ranked batch
    rarity: RarityConfig
    role: str

    def to_dict(self) -> dict:
        return {
            "username": self.record.username,
            "display_name": self.record.display_name,
            "avatar_url": self.record.avatar_url,
            "magician_score": self.record.magician_score,
            "rank": self.rank,
            "tier": self.rarity.tier.value,
            "role": self.role,
            "posts_count": self.record.posts_count,
            "views_total": self.record.views_total,
            "likes_total": self.record.likes_total,
            "replies_total": self.record.replies_total,
            "retweets_total": self.record.retweets_total,
            "quotes_total": self.record.quotes_total,
            "best_post": self.record.best_post,
        }


class MagicianBoard:
    """
    Leaderboard session for one snapshot of member records.

    Holds the raw records, never their scores: each method runs the
    whole batch through the score engine before ranking or classifying.
    """

    def __init__(
        self,
        records: Sequence[ActivityRecord],
        config: Optional[BoardConfig] = None,
        directory: Sequence[ActivityRecord] = (),
        valentine_store: Optional[ValentineStore] = None,
    ):
        """
        Initialize the board.

        Args:
            records: Members on the leaderboard
            config: Board settings (defaults if not provided)
            directory: Extra members that can be looked up but are not ranked
            valentine_store: Where valentines are kept (valentines disabled if None)
        """
        self.records = tuple(records)
        self.config = config or BoardConfig()
        self.directory = tuple(directory)
        self.valentine_store = valentine_store

    @classmethod
    def from_snapshot(
        cls,
        snapshot_path: Union[str, Path],
        config: Optional[BoardConfig] = None,
        valentine_path: Optional[Union[str, Path]] = None,
    ) -> "MagicianBoard":
        """Build a board from a snapshot file."""
        config = config or BoardConfig()
        snapshot = SnapshotStore(snapshot_path).load()
        store = ValentineStore(valentine_path, limit=config.valentine_limit) if valentine_path else None
        return cls(snapshot.users, config=config, valentine_store=store)

    def scored(self) -> list[ScoredRecord]:
        """Score the whole snapshot."""
        return compute_scores(self.records)

    def rarity_for(self, record: ScoredRecord) -> RarityConfig:
        """Rarity tier and style for a scored member."""
        return classify_rarity(
            record.magician_score,
            parse_roles(record.roles),
            record.username,
            self.config.rarity,
        )

    def get_leaderboard(
        self,
        sort_key: Union[SortKey, str] = SortKey.SCORE,
        query: str = "",
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> LeaderboardPage:
        """
        One page of the leaderboard.

        Args:
            sort_key: Column to rank by
            query: Search text (display name or handle)
            page: 1-based page, clamped to the available pages
            page_size: Rows per page (config default if not provided)
        """
        return build_page(
            self.scored(),
            sort_key=SortKey(sort_key),
            query=query,
            page=page,
            page_size=page_size or self.config.page_size,
        )

    def lookup_player(self, identifier: str) -> PlayerProfile:
        """
        Find a member and build their profile.

        Members on the leaderboard keep their score rank. Members found
        only in the directory are scored against the current batch's
        maxima so their score is on the same scale, and have no rank.

        Raises:
            MemberNotFoundError: If neither the leaderboard nor the directory has a match
        """
        ranked = rank_records(self.scored(), SortKey.SCORE)
        try:
            member = find_member(ranked, identifier)
            return self._profile(member, member.stable_rank)
        except MemberNotFoundError:
            if not self.directory:
                raise

        outsider = find_member(self.directory, identifier)
        context = compute_normalization_context(self.records)
        logger.debug("Scoring directory member %s against current batch", outsider.username)
        return self._profile(compute_single_score(outsider, context), None)

    def _profile(self, record: ScoredRecord, rank: Optional[int]) -> PlayerProfile:
        return PlayerProfile(
            record=record,
            rank=rank,
            rarity=self.rarity_for(record),
            role=best_role(record, record.magician_score, self.config.rarity),
        )

    def get_spotlight(self, per_category: Optional[int] = None) -> list[ScoredRecord]:
        """Top members across posts, views, likes and replies."""
        return select_spotlight(
            self.scored(),
            per_category=per_category or self.config.spotlight_per_category,
        )

    def tier_distribution(self) -> dict[RarityTier, int]:
        """Member count per rarity tier (every tier listed)."""
        counts = {tier: 0 for tier in RarityTier}
        for record in self.scored():
            counts[self.rarity_for(record).tier] += 1
        return counts

    def _require_store(self) -> ValentineStore:
        if self.valentine_store is None:
            raise ValueError("No valentine store configured.")
        return self.valentine_store

    def send_valentine(
        self,
        sender: str,
        message: str,
        recipient: Optional[str] = None,
    ) -> ValentineNote:
        """
        Store a valentine from one member to another or to the community.

        Args:
            sender: Sender identifier (must be on the leaderboard)
            message: Note text
            recipient: Recipient identifier; None addresses the community

        Returns:
            The stored note, enriched with the sender's live score

        Raises:
            MemberNotFoundError: If sender or recipient is unknown
            ValentineLimitError: If the sender is at the limit
        """
        store = self._require_store()
        scored = self.scored()
        sender_record = find_member(scored, sender)

        fields = {
            "sender_username": sender_record.username,
            "sender_display_name": sender_record.display_name,
            "sender_avatar_url": sender_record.avatar_url,
            "message_text": message,
        }
        if recipient:
            recipient_record = find_member(scored, recipient)
            fields.update(
                recipient_type=RecipientType.USER,
                recipient_username=recipient_record.username,
                recipient_display_name=recipient_record.display_name,
                recipient_avatar_url=recipient_record.avatar_url,
            )

        stored = store.save(ValentineNote(**fields))
        return enrich_valentines([stored], scored, self.config.rarity)[0]

    def list_valentines(self, sender: Optional[str] = None) -> list[ValentineNote]:
        """Stored valentines, newest first, with live sender data."""
        store = self._require_store()
        notes = store.list_by_sender(sender) if sender else store.load_all()
        return enrich_valentines(notes, self.scored(), self.config.rarity)
