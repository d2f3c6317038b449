from __future__ import annotations

from typing import Sequence

from .binary import summarize_choices, tally_choices
from .models import (
    AggregateResult,
    Candidate,
    FallbackRequest,
    ParticipantTaste,
    QuizQuestion,
    Suggestion,
    VoteRecord,
    VotingScheme,
)
from .profiles import derive_individual_profiles
from .scoring import score_candidates, tag_affinity, top_tag_affinity
from .tiers import FRESH_IDEAS_SUMMARY, NO_DATA_SUMMARY, build_group_summary, classify_tiers

GROUP_TAGS_LIMIT = 3


def aggregate(
    candidates: Sequence[Candidate],
    vote_records: Sequence[VoteRecord],
) -> AggregateResult:
    """
    Compute the full five-level result for one snapshot of ballots.

    Pure: the same inputs always give the same tiers and summary.
    """
    if not candidates or not vote_records:
        return AggregateResult(
            scheme=VotingScheme.five_level,
            participant_count=len(vote_records),
            group_summary=NO_DATA_SUMMARY,
            individual_profiles=derive_individual_profiles(candidates, vote_records),
            needs_external_fallback=True,
        )

    scored = score_candidates(candidates, vote_records)
    tiers = classify_tiers(scored)
    top_tags = top_tag_affinity(tag_affinity(scored), GROUP_TAGS_LIMIT)

    return AggregateResult(
        scheme=VotingScheme.five_level,
        participant_count=len(vote_records),
        group_summary=build_group_summary(tiers, top_tags),
        shared_favorites=tiers.favorites,
        to_try=tiers.to_try,
        best_bets=tiers.best_bets,
        fallback_picks=tiers.fallback,
        individual_profiles=derive_individual_profiles(candidates, vote_records),
        tag_overlap=top_tags,
        needs_external_fallback=tiers.needs_external_fallback,
    )


def aggregate_ballots(
    scheme: VotingScheme,
    items: Sequence[Candidate] | Sequence[QuizQuestion],
    vote_records: Sequence[VoteRecord],
) -> AggregateResult:
    """Dispatch to the scheme-specific aggregation."""
    if scheme == VotingScheme.binary:
        questions = [q for q in items if isinstance(q, QuizQuestion)]
        tallies = tally_choices(questions, vote_records)
        return AggregateResult(
            scheme=VotingScheme.binary,
            participant_count=len(vote_records),
            group_summary=summarize_choices(tallies, len(vote_records)),
            choice_tallies=tallies,
        )
    candidates = [c for c in items if isinstance(c, Candidate)]
    return aggregate(candidates, vote_records)


def build_fallback_request(
    result: AggregateResult,
    category: str,
    location: str,
    radius_tier: str | None = None,
) -> FallbackRequest:
    tastes = [
        ParticipantTaste(
            name=p.name,
            tags=p.top_tags,
            loved_count=p.total_loved,
            liked_count=p.total_liked,
        )
        for p in result.individual_profiles
    ]
    return FallbackRequest(
        category=category,
        location=location,
        radius_tier=radius_tier,
        top_tags=result.tag_overlap,
        participant_tastes=tastes,
    )


def apply_suggestions(
    result: AggregateResult,
    suggestions: Sequence[Suggestion],
) -> AggregateResult:
    """Return a copy carrying *suggestions*; no suggestions leaves it untouched."""
    if not suggestions:
        return result
    return result.model_copy(update={
        "suggestions": list(suggestions),
        "group_summary": FRESH_IDEAS_SUMMARY,
    })
