"""Compute Magician Scores from member activity counts."""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..models import ActivityRecord, NormalizationContext, ScoredRecord

logger = logging.getLogger(__name__)

# Component weights in the base score
REACH_WEIGHT = 0.45
QUALITY_WEIGHT = 0.40
CONSISTENCY_WEIGHT = 0.15

# Replies count double towards quality
REPLY_WEIGHT = 2

# Posts needed for the full activity bonus
ACTIVITY_SATURATION_POSTS = 8

# Share of the score independent of activity; the rest scales with it
BASE_SHARE = 0.85
ACTIVITY_SHARE = 0.15

MAX_SCORE = 100.0


@dataclass(frozen=True)
class ScoreComponents:
    """Log-compressed score components for one record."""

    reach: float
    quality: float
    consistency: float


def compute_components(record: ActivityRecord) -> ScoreComponents:
    """Compute reach, quality and consistency as ln(1 + x)."""
    return ScoreComponents(
        reach=math.log1p(record.views_total),
        quality=math.log1p(record.likes_total + REPLY_WEIGHT * record.replies_total),
        consistency=math.log1p(record.posts_count),
    )


def compute_normalization_context(records: Sequence[ActivityRecord]) -> NormalizationContext:
    """
    Find the batch-wide component maxima.

    Always computed from the batch passed in; an empty batch gives all zeros.
    """
    components = [compute_components(r) for r in records]
    return _context_from_components(components)


def _context_from_components(components: Sequence[ScoreComponents]) -> NormalizationContext:
    return NormalizationContext(
        max_reach=max((c.reach for c in components), default=0.0),
        max_quality=max((c.quality for c in components), default=0.0),
        max_consistency=max((c.consistency for c in components), default=0.0),
    )


def round_score(value: float) -> float:
    """Round to one decimal, halves away from zero, on the exact float value."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def activity_bonus(posts_count: int) -> float:
    """Saturating activity multiplier in [0, 1]."""
    return min(1.0, posts_count / ACTIVITY_SATURATION_POSTS)


def _normalize(value: float, maximum: float) -> float:
    return value / maximum if maximum > 0 else 0.0


def _weighted_base(reach: float, quality: float, consistency: float) -> float:
    return REACH_WEIGHT * reach + QUALITY_WEIGHT * quality + CONSISTENCY_WEIGHT * consistency


def _blend(base: float, activity: float) -> float:
    return BASE_SHARE * base + ACTIVITY_SHARE * base * activity


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_SCORE, value))


def _normalized_score(
    record: ActivityRecord,
    components: ScoreComponents,
    context: NormalizationContext,
) -> float:
    base = _weighted_base(
        _normalize(components.reach, context.max_reach),
        _normalize(components.quality, context.max_quality),
        _normalize(components.consistency, context.max_consistency),
    )
    raw_score = MAX_SCORE * _blend(base, activity_bonus(record.posts_count))
    return round_score(_clamp(raw_score))


def compute_scores(records: Sequence[ActivityRecord]) -> list[ScoredRecord]:
    """
    Score a full batch of records.

    Each component is normalized by its maximum within this batch, so a
    record's score is only meaningful next to the other records scored
    in the same call.

    Args:
        records: The entire batch to rank

    Returns:
        ScoredRecords in input order
    """
    if not records:
        return []

    components = [compute_components(r) for r in records]
    context = _context_from_components(components)
    logger.debug(
        "Scoring %d records (max reach=%.4f, quality=%.4f, consistency=%.4f)",
        len(records),
        context.max_reach,
        context.max_quality,
        context.max_consistency,
    )

    return [
        ScoredRecord.from_activity(record, _normalized_score(record, comp, context))
        for record, comp in zip(records, components)
    ]


def compute_single_score(
    record: ActivityRecord,
    context: Optional[NormalizationContext] = None,
) -> ScoredRecord:
    """
    Score one record outside a batch.

    With a context (the maxima of the latest full batch) the result is
    comparable to that batch's scores.

    Without one, the raw log components are weighted directly and the
    result is NOT on the batch scale. This legacy path only exists for
    standalone profile views; never rank its output next to batch scores.

    Args:
        record: Record to score
        context: Maxima from compute_normalization_context()

    Returns:
        ScoredRecord for the record
    """
    components = compute_components(record)

    if context is not None:
        return ScoredRecord.from_activity(record, _normalized_score(record, components, context))

    logger.debug("Scoring %s without normalization context", record.username)
    base = _weighted_base(components.reach, components.quality, components.consistency)
    raw_score = _blend(base, activity_bonus(record.posts_count))
    return ScoredRecord.from_activity(record, round_score(_clamp(raw_score)))
