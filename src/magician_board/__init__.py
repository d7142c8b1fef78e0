"""Magician Board - community leaderboard scoring, ranking and rarity cards."""

__version__ = "0.3.0"

from .board import MagicianBoard, PlayerProfile
from .config import BoardConfig, RarityRules, load_config
from .lookup import MemberNotFoundError, find_member
from .models import (
    ActivityRecord,
    LeaderboardSnapshot,
    NormalizationContext,
    RankedRecord,
    RarityConfig,
    RarityStyle,
    RarityTier,
    RecipientType,
    ScoredRecord,
    SortKey,
    ValentineNote,
)
from .ranking import LeaderboardPage, build_page, filter_records, paginate, rank_records, total_pages
from .rarity import classify_rarity
from .scoring import compute_normalization_context, compute_scores, compute_single_score
from .store import SnapshotStore, ValentineStore
from .valentines import ValentineLimitError, ValentineNotFoundError

__all__ = [
    # Board
    "MagicianBoard",
    "PlayerProfile",
    # Scoring
    "compute_scores",
    "compute_single_score",
    "compute_normalization_context",
    # Ranking
    "LeaderboardPage",
    "build_page",
    "filter_records",
    "paginate",
    "rank_records",
    "total_pages",
    # Rarity
    "classify_rarity",
    # Lookup
    "find_member",
    "MemberNotFoundError",
    # Stores
    "SnapshotStore",
    "ValentineStore",
    "ValentineLimitError",
    "ValentineNotFoundError",
    # Config
    "BoardConfig",
    "RarityRules",
    "load_config",
    # Models
    "ActivityRecord",
    "LeaderboardSnapshot",
    "NormalizationContext",
    "RankedRecord",
    "RarityConfig",
    "RarityStyle",
    "RarityTier",
    "RecipientType",
    "ScoredRecord",
    "SortKey",
    "ValentineNote",
]
