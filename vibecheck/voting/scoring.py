from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

import pandas as pd

from .models import Candidate, ScoredCandidate, Verdict, VoteRecord

# love weighs double like, nope costs more than love earns
VERDICT_WEIGHTS: dict[Verdict, int] = {
    Verdict.love: 4,
    Verdict.like: 2,
    Verdict.meh: 0,
    Verdict.unknown: 0,
    Verdict.nope: -3,
}

_BREAKDOWN_LABELS: dict[Verdict, str] = {
    Verdict.love: "love",
    Verdict.like: "like",
    Verdict.meh: "meh",
    Verdict.unknown: "haven't tried",
    Verdict.nope: "nope",
}


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Lowercase, strip and de-duplicate tags, keeping first-seen order."""
    seen: list[str] = []
    for tag in tags:
        t = str(tag).strip().lower()
        if t and t not in seen:
            seen.append(t)
    return seen


def _vote_matrix(
    candidates: Sequence[Candidate],
    vote_records: Sequence[VoteRecord],
) -> pd.DataFrame:
    """One row per candidate, one column per ballot, cells hold verdict values."""
    columns: dict[int, list[str]] = {}
    for col, record in enumerate(vote_records):
        columns[col] = [
            Verdict.parse(record.choices.get(c.id)).value for c in candidates
        ]
    return pd.DataFrame(columns, index=pd.RangeIndex(len(candidates)), dtype=object)


def _breakdown(counts: dict[Verdict, int]) -> str:
    parts = [
        f"{counts[v]} {label}" for v, label in _BREAKDOWN_LABELS.items() if counts[v] > 0
    ]
    return ", ".join(parts)


def tag_affinity(scored: Iterable[ScoredCandidate]) -> Counter[str]:
    """Sum of positive votes (love + like) per tag across all candidates."""
    affinity: Counter[str] = Counter()
    for s in scored:
        if s.positive_count > 0:
            for tag in normalize_tags(s.candidate.tags):
                affinity[tag] += s.positive_count
    return affinity


def top_tag_affinity(affinity: Counter[str], limit: int = 3) -> list[str]:
    return [tag for tag, _ in affinity.most_common(limit)]


def score_candidates(
    candidates: Sequence[Candidate],
    vote_records: Sequence[VoteRecord],
) -> list[ScoredCandidate]:
    """
    Tally every ballot against every candidate and compute raw and
    tag-boosted scores.

    Missing or malformed entries count as ``unknown``. The returned list
    keeps the order of *candidates*.
    """
    participant_count = len(vote_records)
    matrix = _vote_matrix(candidates, vote_records)

    tallies: dict[Verdict, list[int]] = {}
    for verdict in Verdict:
        per_row = matrix.eq(verdict.value).sum(axis=1)
        tallies[verdict] = [int(n) for n in per_row.reindex(matrix.index, fill_value=0)]

    scored: list[ScoredCandidate] = []
    for row, candidate in enumerate(candidates):
        counts = {v: tallies[v][row] for v in Verdict}
        positive = counts[Verdict.love] + counts[Verdict.like]
        score = sum(VERDICT_WEIGHTS[v] * n for v, n in counts.items())
        scored.append(ScoredCandidate(
            candidate=candidate,
            love_count=counts[Verdict.love],
            like_count=counts[Verdict.like],
            meh_count=counts[Verdict.meh],
            unknown_count=counts[Verdict.unknown],
            nope_count=counts[Verdict.nope],
            positive_count=positive,
            score=score,
            boosted_score=score,
            all_love=counts[Verdict.love] == participant_count,
            all_positive=positive == participant_count,
            none_nope=counts[Verdict.nope] == 0,
            vote_breakdown=_breakdown(counts),
        ))

    affinity = tag_affinity(scored)
    for s in scored:
        tags = normalize_tags(s.candidate.tags)
        if tags:
            s.boosted_score = s.score + sum(affinity.get(t, 0) for t in tags)

    return scored
