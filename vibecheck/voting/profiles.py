from __future__ import annotations

from collections import Counter
from typing import Sequence

from .models import Candidate, IndividualProfile, Verdict, VoteRecord
from .scoring import normalize_tags

TOP_TAGS_LIMIT = 5


def _profile_for(record: VoteRecord, by_id: dict[str, Candidate]) -> IndividualProfile:
    buckets: dict[Verdict, list[Candidate]] = {
        Verdict.love: [],
        Verdict.like: [],
        Verdict.unknown: [],
    }
    for candidate_id, raw in record.choices.items():
        candidate = by_id.get(candidate_id)
        if candidate is None:
            continue
        verdict = Verdict.parse(raw)
        if verdict in buckets:
            buckets[verdict].append(candidate)

    loved = buckets[Verdict.love]
    liked = buckets[Verdict.like]
    want_to_try = buckets[Verdict.unknown]

    # simple occurrence count, not weighted by votes
    tag_counts: Counter[str] = Counter()
    for candidate in loved + liked:
        tag_counts.update(normalize_tags(candidate.tags))

    return IndividualProfile(
        participant_id=record.participant_id,
        name=record.participant_name,
        loved_places=loved,
        liked_places=liked,
        want_to_try_places=want_to_try,
        top_tags=[tag for tag, _ in tag_counts.most_common(TOP_TAGS_LIMIT)],
        total_loved=len(loved),
        total_liked=len(liked),
        total_want_to_try=len(want_to_try),
    )


def derive_individual_profiles(
    candidates: Sequence[Candidate],
    vote_records: Sequence[VoteRecord],
) -> list[IndividualProfile]:
    """One taste profile per ballot; ids missing from *candidates* are skipped."""
    by_id = {c.id: c for c in candidates}
    return [_profile_for(record, by_id) for record in vote_records]
