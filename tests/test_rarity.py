"""Tests for rarity tier classification."""

import pytest

from magician_board.config import RarityRules
from magician_board.models import ActivityRecord, RarityTier
from magician_board.rarity import (
    RARITY_STYLES,
    best_role,
    classify_rarity,
    classify_tier,
    parse_roles,
    primary_role,
)


@pytest.mark.parametrize(
    "score,expected",
    [
        (100.0, RarityTier.MYTHICAL),
        (95.0, RarityTier.MYTHICAL),
        (94.9, RarityTier.LEGENDARY),
        (80.0, RarityTier.LEGENDARY),
        (79.9, RarityTier.EPIC),
        (65.0, RarityTier.EPIC),
        (64.9, RarityTier.RARE),
        (50.0, RarityTier.RARE),
        (49.9, RarityTier.UNCOMMON),
        (21.0, RarityTier.UNCOMMON),
        (20.9, RarityTier.COMMON),
        (0.0, RarityTier.COMMON),
    ],
)
def test_score_bands(score, expected):
    """Test exact band boundaries."""
    assert classify_tier(score) == expected


def test_team_role_overrides_score():
    assert classify_tier(3.0, ["Team Lead"]) == RarityTier.GOAT


def test_moderator_role_overrides_score():
    assert classify_tier(99.0, ["artist", "Moderator"]) == RarityTier.GOAT


def test_ordinary_roles_do_not_override():
    assert classify_tier(55.0, ["Artist", "Collector"]) == RarityTier.RARE


def test_reserved_handle_beats_everything():
    assert classify_tier(0.0, ["Team Lead"], "16VIVZ") == RarityTier.QUEEN


def test_custom_rules():
    rules = RarityRules(reserved_handles=["founder"], privileged_role_markers=["council"])

    assert classify_tier(10.0, [], "Founder", rules) == RarityTier.QUEEN
    assert classify_tier(10.0, ["High Council"], "someone", rules) == RarityTier.GOAT
    assert classify_tier(10.0, ["Team Lead"], "16vivz", rules) == RarityTier.COMMON


def test_classify_rarity_returns_style_bundle():
    config = classify_rarity(82.0)

    assert config.tier == RarityTier.LEGENDARY
    assert config.style == RARITY_STYLES[RarityTier.LEGENDARY]
    assert config.style.glow == "rgba(234, 179, 8, 0.4)"


def test_classification_is_deterministic():
    first = classify_rarity(66.6, ["Artist"], "someone")
    second = classify_rarity(66.6, ["Artist"], "someone")

    assert first == second
    assert first.model_dump() == second.model_dump()


def test_every_tier_has_a_style():
    assert set(RARITY_STYLES) == set(RarityTier)


class TestRoles:
    """Tests for role parsing and labels."""

    def test_parse_roles_separators(self):
        assert parse_roles("Painter | Team Lead, Collector") == ["Painter", "Team Lead", "Collector"]
        assert parse_roles("OG-Holder") == ["OG", "Holder"]

    def test_parse_roles_empty(self):
        assert parse_roles(None) == []
        assert parse_roles("") == []
        assert parse_roles(" | ") == []

    def test_best_role_is_first_listed(self):
        record = ActivityRecord(username="x", roles="Curator | Artist")

        assert best_role(record, 10.0) == "Curator"

    def test_best_role_falls_back_to_tier(self):
        record = ActivityRecord(username="x")

        assert best_role(record, 70.0) == "Epic"
        assert best_role(record, 5.0) == "Common"

    def test_best_role_leading_separator_falls_back_to_tier(self):
        record = ActivityRecord(username="x", roles="-Artist")

        assert best_role(record, 70.0) == "Epic"

    def test_primary_role(self):
        assert primary_role("Curator | Artist") == "Curator"
        assert primary_role(" | Artist") == ""
        assert primary_role(None) is None
