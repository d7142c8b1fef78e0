"""Map Magician Scores, roles and handles to card rarity tiers."""

import re
from typing import Optional, Sequence

from .config import RarityRules
from .models import ActivityRecord, RarityConfig, RarityStyle, RarityTier

ROLE_SEPARATORS = re.compile(r"[,\-|]")

# (minimum score, tier), highest first; first satisfied band wins
SCORE_BANDS = (
    (95.0, RarityTier.MYTHICAL),
    (80.0, RarityTier.LEGENDARY),
    (65.0, RarityTier.EPIC),
    (50.0, RarityTier.RARE),
    (21.0, RarityTier.UNCOMMON),
)

RARITY_STYLES = {
    RarityTier.QUEEN: RarityStyle(
        gradient_from="from-white",
        gradient_to="to-pink-500",
        text="text-white",
        bg_solid="bg-pink-500/15",
        glow="rgba(236, 72, 153, 0.9)",
        accent="text-pink-200",
        border="border-pink-300/80",
        icon="crown",
    ),
    RarityTier.GOAT: RarityStyle(
        gradient_from="from-rose-400",
        gradient_to="to-rose-600",
        text="text-rose-100",
        bg_solid="bg-rose-500/10",
        glow="rgba(244, 63, 94, 0.6)",
        accent="text-rose-400",
        border="border-rose-500/50",
        icon="flame",
    ),
    RarityTier.MYTHICAL: RarityStyle(
        gradient_from="from-fuchsia-400",
        gradient_to="to-purple-600",
        text="text-fuchsia-100",
        bg_solid="bg-fuchsia-500/10",
        glow="rgba(192, 38, 211, 0.4)",
        accent="text-fuchsia-400",
        border="border-fuchsia-500/30",
        icon="crown",
    ),
    RarityTier.LEGENDARY: RarityStyle(
        gradient_from="from-amber-300",
        gradient_to="to-yellow-500",
        text="text-amber-100",
        bg_solid="bg-amber-500/10",
        glow="rgba(234, 179, 8, 0.4)",
        accent="text-amber-400",
        border="border-amber-500/30",
        icon="trophy",
    ),
    RarityTier.EPIC: RarityStyle(
        gradient_from="from-cyan-300",
        gradient_to="to-blue-500",
        text="text-cyan-100",
        bg_solid="bg-cyan-500/10",
        glow="rgba(6, 182, 212, 0.4)",
        accent="text-cyan-400",
        border="border-cyan-500/30",
        icon="gem",
    ),
    RarityTier.RARE: RarityStyle(
        gradient_from="from-emerald-300",
        gradient_to="to-green-500",
        text="text-emerald-100",
        bg_solid="bg-emerald-500/10",
        glow="rgba(16, 185, 129, 0.4)",
        accent="text-emerald-400",
        border="border-emerald-500/30",
        icon="shield",
    ),
    RarityTier.UNCOMMON: RarityStyle(
        gradient_from="from-indigo-400",
        gradient_to="to-violet-600",
        text="text-indigo-100",
        bg_solid="bg-violet-500/15",
        glow="rgba(139, 92, 246, 0.35)",
        accent="text-violet-400",
        border="border-indigo-500/40",
        icon="sparkles",
    ),
    RarityTier.COMMON: RarityStyle(
        gradient_from="from-slate-400",
        gradient_to="to-slate-600",
        text="text-slate-100",
        bg_solid="bg-slate-500/5",
        glow="rgba(148, 163, 184, 0.1)",
        accent="text-slate-400",
        border="border-slate-500/10",
        icon="sparkles",
    ),
}

DEFAULT_RULES = RarityRules()


def parse_roles(raw: Optional[str]) -> list[str]:
    """Split a role-tag string like 'Team Lead | Artist' into role names."""
    if not raw:
        return []
    return [part.strip() for part in ROLE_SEPARATORS.split(raw) if part.strip()]


def primary_role(raw: Optional[str]) -> Optional[str]:
    """First role as written, trimmed (may be empty); None without a role string."""
    if not raw:
        return None
    return ROLE_SEPARATORS.split(raw, maxsplit=1)[0].strip()


def score_tier(score: float) -> RarityTier:
    """Tier from the score bands alone."""
    for minimum, tier in SCORE_BANDS:
        if score >= minimum:
            return tier
    return RarityTier.COMMON


def classify_tier(
    score: float,
    roles: Sequence[str] = (),
    username: Optional[str] = None,
    rules: Optional[RarityRules] = None,
) -> RarityTier:
    """
    Pick a rarity tier.

    Order: reserved handle, then privileged role marker, then score bands.
    """
    rules = rules or DEFAULT_RULES

    if username and username.lower() in {h.lower() for h in rules.reserved_handles}:
        return RarityTier.QUEEN

    markers = [m.lower() for m in rules.privileged_role_markers]
    if any(marker in role.lower() for role in roles for marker in markers):
        return RarityTier.GOAT

    return score_tier(score)


def classify_rarity(
    score: float,
    roles: Sequence[str] = (),
    username: Optional[str] = None,
    rules: Optional[RarityRules] = None,
) -> RarityConfig:
    """Tier plus its style bundle."""
    tier = classify_tier(score, roles, username, rules)
    return RarityConfig(tier=tier, style=RARITY_STYLES[tier])


def best_role(
    record: ActivityRecord,
    score: float = 0.0,
    rules: Optional[RarityRules] = None,
) -> str:
    """
    Label shown under a member's name.

    The first listed role wins; members without roles, or whose role
    string starts with a separator, get their rarity tier name instead.
    """
    role = primary_role(record.roles)
    if role:
        return role
    return classify_tier(score, [], record.username, rules).value
