"""Public search exports for fuzzydrive."""

from __future__ import annotations

from .engine import (
    DEFAULT_THRESHOLD,
    FuzzySearchEngine,
    MatchKind,
    classify,
    find_matched_ranges,
    score,
    search,
    subsequence_ratio,
)

__all__ = [
    "FuzzySearchEngine",
    "MatchKind",
    "DEFAULT_THRESHOLD",
    "search",
    "score",
    "classify",
    "subsequence_ratio",
    "find_matched_ranges",
]
