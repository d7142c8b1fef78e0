"""Magician Score computation."""

from .score_engine import (
    ScoreComponents,
    compute_components,
    compute_normalization_context,
    compute_scores,
    compute_single_score,
    round_score,
)

__all__ = [
    "ScoreComponents",
    "compute_components",
    "compute_normalization_context",
    "compute_scores",
    "compute_single_score",
    "round_score",
]
