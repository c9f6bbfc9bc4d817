"""Fuzzy file-name ranking."""

from __future__ import annotations

import enum
from typing import Sequence

from fuzzydrive.models import FileRecord, MatchResult

DEFAULT_THRESHOLD: float = 0.3
MAX_RESULTS: int = 20
EMPTY_QUERY_LIMIT: int = 50

EXACT_SCORE: float = 1.0
PREFIX_SCORE: float = 0.9
SUBSTRING_SCORE: float = 0.7
SUBSEQUENCE_WEIGHT: float = 0.6


class MatchKind(enum.Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    SUBSEQUENCE = "subsequence"


class FuzzySearchEngine:
    """
    Rank file records by how well their names match a query.

    Only names that contain the query (case-insensitively) are scored, so the
    subsequence branch of `score` never surfaces a result on its own. Callers
    rely on that: results are always literal substring hits.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        *,
        max_results: int = MAX_RESULTS,
        empty_query_limit: int = EMPTY_QUERY_LIMIT,
    ) -> None:
        self.threshold = threshold
        self.max_results = max_results
        self.empty_query_limit = empty_query_limit

    def search(self, query: str, files: Sequence[FileRecord]) -> list[MatchResult]:
        if not query.strip():
            return [
                MatchResult(file=f, score=1.0, matched_ranges=[])
                for f in files[: self.empty_query_limit]
            ]

        query_lower = query.lower()
        results: list[MatchResult] = []

        for f in files:
            name_lower = f.name.lower()
            if query_lower not in name_lower:
                continue

            kind = classify(query_lower, name_lower)
            value = _kind_score(kind, query_lower, name_lower)
            if value < self.threshold:
                continue

            ranges = find_matched_ranges(query, f.name) if kind is MatchKind.SUBSTRING else []
            results.append(MatchResult(file=f, score=value, matched_ranges=ranges))

        # list.sort is stable, including with reverse=True.
        results.sort(key=lambda r: r.score, reverse=True)
        return results[: self.max_results]


def search(query: str, files: Sequence[FileRecord]) -> list[MatchResult]:
    """Rank `files` against `query` with the default engine settings."""
    return FuzzySearchEngine().search(query, files)


def classify(query: str, name: str) -> MatchKind:
    query_lower = query.lower()
    name_lower = name.lower()
    if name_lower == query_lower:
        return MatchKind.EXACT
    if name_lower.startswith(query_lower):
        return MatchKind.PREFIX
    if query_lower in name_lower:
        return MatchKind.SUBSTRING
    return MatchKind.SUBSEQUENCE


def score(query: str, name: str) -> float:
    """Score in [0, 1]: exact 1.0, prefix 0.9, substring 0.7, else ratio * 0.6."""
    return _kind_score(classify(query, name), query, name)


def _kind_score(kind: MatchKind, query: str, name: str) -> float:
    if kind is MatchKind.EXACT:
        return EXACT_SCORE
    if kind is MatchKind.PREFIX:
        return PREFIX_SCORE
    if kind is MatchKind.SUBSTRING:
        return SUBSTRING_SCORE
    return subsequence_ratio(query.lower(), name.lower()) * SUBSEQUENCE_WEIGHT


def subsequence_ratio(query: str, text: str) -> float:
    """
    Fraction of `query` characters found in order in `text`.

    Greedy left-to-right scan; each text character is used at most once.
    """
    if not query:
        return 0.0

    matches = 0
    text_index = 0
    for ch in query:
        while text_index < len(text):
            text_index += 1
            if text[text_index - 1] == ch:
                matches += 1
                break

    return matches / len(query)


def find_matched_ranges(query: str, text: str) -> list[tuple[int, int]]:
    """
    (start, end) of the first case-insensitive occurrence of `query` in `text`.

    Offsets index the original `text`. Lowercasing can change length
    ("İ" becomes two code points), so each lowered code point remembers the
    position of the character it came from.
    """
    query_lower = query.lower()
    if not query_lower:
        return []

    lowered: list[str] = []
    origin: list[int] = []
    for index, ch in enumerate(text):
        folded = ch.lower()
        lowered.append(folded)
        origin.extend([index] * len(folded))

    start = "".join(lowered).find(query_lower)
    if start < 0:
        return []
    end = start + len(query_lower)
    return [(origin[start], origin[end - 1] + 1)]
