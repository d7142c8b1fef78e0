"""Valentine notes between members."""

import logging
from typing import Optional, Sequence

from .config import RarityRules
from .models import ScoredRecord, ValentineNote
from .rarity import classify_tier, parse_roles, primary_role

logger = logging.getLogger(__name__)

DEFAULT_VALENTINE_LIMIT = 5


class ValentineLimitError(ValueError):
    """A sender already has the maximum number of stored valentines."""

    def __init__(self, sender_username: str, limit: int):
        self.sender_username = sender_username
        self.limit = limit
        super().__init__(f"{sender_username} has already sent {limit} valentines")


class ValentineNotFoundError(LookupError):
    """No stored valentine has the given id."""

    def __init__(self, note_id: str):
        self.note_id = note_id
        super().__init__(f"Valentine not found: {note_id}")


def check_sender_limit(
    existing: Sequence[ValentineNote],
    sender_username: str,
    limit: int = DEFAULT_VALENTINE_LIMIT,
) -> None:
    """Raise ValentineLimitError if the sender cannot store another note."""
    sent = sum(1 for note in existing if note.sender_username == sender_username)
    if sent >= limit:
        logger.warning("Valentine limit reached for %s (%d/%d)", sender_username, sent, limit)
        raise ValentineLimitError(sender_username, limit)


def newest_first(notes: Sequence[ValentineNote]) -> list[ValentineNote]:
    """Order notes by created_at, most recent first."""
    return sorted(notes, key=lambda n: n.created_at, reverse=True)


def enrich_valentines(
    notes: Sequence[ValentineNote],
    scored: Sequence[ScoredRecord],
    rules: Optional[RarityRules] = None,
) -> list[ValentineNote]:
    """
    Attach the sender's live score, role label and rarity tier.

    Scores come from the batch passed in, so they always reflect the
    latest snapshot. The role label is the first role in the sender's
    role string; senders without one keep the note's own label. Notes
    from senders missing from the batch are returned unchanged.
    """
    by_handle = {r.username.lower(): r for r in scored}
    enriched = []

    for note in notes:
        sender = by_handle.get(note.sender_username.lower())
        if sender is None:
            enriched.append(note)
            continue

        tier = classify_tier(
            sender.magician_score,
            parse_roles(sender.roles),
            sender.username,
            rules,
        )
        enriched.append(
            note.model_copy(
                update={
                    "sender_score": sender.magician_score,
                    "sender_role": primary_role(sender.roles) if sender.roles else note.sender_role,
                    "rarity_tier": tier,
                }
            )
        )

    return enriched
