"""Data models for the Magician leaderboard."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

COUNT_FIELDS = (
    "posts_count",
    "likes_total",
    "replies_total",
    "retweets_total",
    "quotes_total",
    "views_total",
)


class SortKey(str, Enum):
    """Leaderboard columns a ranking can be ordered by."""

    SCORE = "score"
    POSTS = "posts"
    VIEWS = "views"
    LIKES = "likes"
    REPLIES = "replies"
    RETWEETS = "retweets"
    QUOTES = "quotes"

    @property
    def field_name(self) -> str:
        """Record attribute this key sorts on."""
        return _SORT_FIELDS[self]


_SORT_FIELDS = {
    SortKey.SCORE: "magician_score",
    SortKey.POSTS: "posts_count",
    SortKey.VIEWS: "views_total",
    SortKey.LIKES: "likes_total",
    SortKey.REPLIES: "replies_total",
    SortKey.RETWEETS: "retweets_total",
    SortKey.QUOTES: "quotes_total",
}


class RarityTier(str, Enum):
    """Card rarity, lowest to highest, followed by the two override tiers."""

    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"
    MYTHICAL = "Mythical"
    GOAT = "GOAT"  # privileged role override
    QUEEN = "MGB Queen"  # reserved handle override


class RecipientType(str, Enum):
    """Who a valentine is addressed to."""

    COMMUNITY = "community"
    USER = "user"


class ActivityRecord(BaseModel):
    """Snapshot of one member's measured activity."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(min_length=1, description="Unique handle")
    display_name: str = Field(default="", description="Name shown on cards")
    avatar_url: Optional[str] = Field(default=None)

    # Engagement counts (missing/null -> 0)
    posts_count: int = Field(default=0, ge=0)
    likes_total: int = Field(default=0, ge=0)
    replies_total: int = Field(default=0, ge=0)
    retweets_total: int = Field(default=0, ge=0)
    quotes_total: int = Field(default=0, ge=0)
    views_total: int = Field(default=0, ge=0)

    # Descriptive, never used in scoring
    roles: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("roles", "discrod_roles"),
        description="Raw role-tag string, e.g. 'Team Lead | Artist'",
    )
    discord_username: Optional[str] = Field(default=None)
    discord_messages: Optional[int] = Field(default=None)
    days_in_community: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("days_in_community", "days_in_mgb")
    )
    discord_joined_date: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("discord_joined_date", "discord_mgb_joined_date")
    )
    best_post: Optional[str] = Field(default=None, description="URL of the member's best post")
    best_post_text: Optional[str] = Field(default=None)
    last_updated: Optional[str] = Field(default=None)

    @field_validator(*COUNT_FIELDS, mode="before")
    @classmethod
    def _missing_count_is_zero(cls, value):
        return 0 if value is None else value

    @field_validator("display_name", mode="before")
    @classmethod
    def _missing_name_is_blank(cls, value):
        return "" if value is None else value


class ScoredRecord(ActivityRecord):
    """An ActivityRecord with its Magician Score for one batch."""

    magician_score: float = Field(ge=0, le=100, description="Score in [0, 100], one decimal")

    @classmethod
    def from_activity(cls, record: ActivityRecord, magician_score: float) -> "ScoredRecord":
        return cls.model_validate({**record.model_dump(), "magician_score": magician_score})


class RankedRecord(ScoredRecord):
    """A ScoredRecord placed in a sorted view."""

    stable_rank: int = Field(ge=1, description="1-based position in the full sorted list")

    @classmethod
    def from_scored(cls, record: ScoredRecord, stable_rank: int) -> "RankedRecord":
        return cls.model_validate({**record.model_dump(), "stable_rank": stable_rank})


class NormalizationContext(BaseModel):
    """Batch-wide maxima of the three score components."""

    model_config = ConfigDict(frozen=True)

    max_reach: float = Field(default=0.0, ge=0)
    max_quality: float = Field(default=0.0, ge=0)
    max_consistency: float = Field(default=0.0, ge=0)


class RarityStyle(BaseModel):
    """Presentation data attached to a rarity tier."""

    model_config = ConfigDict(frozen=True)

    gradient_from: str
    gradient_to: str
    text: str
    bg_solid: str
    glow: str = Field(description="CSS rgba() glow colour")
    accent: str
    border: str
    icon: str = Field(description="Icon name understood by the card renderer")


class RarityConfig(BaseModel):
    """A rarity tier together with its style bundle."""

    model_config = ConfigDict(frozen=True)

    tier: RarityTier
    style: RarityStyle


class LeaderboardSnapshot(BaseModel):
    """Raw member records as returned by the data store."""

    last_updated: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("last_updated", "lastUpdated")
    )
    users: list[ActivityRecord] = Field(default_factory=list)


# Fields recomputed on every read and never written back to the store
DERIVED_VALENTINE_FIELDS = frozenset({"sender_score", "sender_role", "rarity_tier"})


class ValentineNote(BaseModel):
    """A note sent from one member to another member or to the community."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(default=None)
    sender_username: str = Field(min_length=1)
    sender_display_name: str = Field(default="")
    sender_avatar_url: Optional[str] = Field(default=None)
    recipient_type: RecipientType = Field(default=RecipientType.COMMUNITY)
    recipient_username: Optional[str] = Field(default=None)
    recipient_display_name: Optional[str] = Field(default=None)
    recipient_avatar_url: Optional[str] = Field(default=None)
    message_text: str = Field(min_length=1, max_length=500)
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = Field(default_factory=lambda: datetime.now().isoformat())

    # Live enrichment
    sender_score: Optional[float] = Field(default=None)
    sender_role: Optional[str] = Field(default=None)
    rarity_tier: Optional[RarityTier] = Field(default=None)

    @field_validator("message_text", mode="before")
    @classmethod
    def _strip_message(cls, value):
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _check_recipient(self) -> "ValentineNote":
        if self.recipient_type == RecipientType.USER and not self.recipient_username:
            raise ValueError("recipient_username is required when recipient_type is 'user'")
        return self

    def stored_fields(self) -> dict:
        """Serializable fields without the live enrichment."""
        return self.model_dump(mode="json", exclude=set(DERIVED_VALENTINE_FIELDS))
