from __future__ import annotations

from typing import Sequence

from .models import ClassifiedTiers, ScoredCandidate

BEST_BETS_LIMIT = 5
FALLBACK_LIMIT = 3

FRESH_IDEAS_SUMMARY = (
    "couldn't find common ground on the places shown. "
    "here are some fresh ideas based on your group's taste."
)
NO_DATA_SUMMARY = "nothing to compare yet. once the group has voted on some places, results show up here."


def _by_boosted_score(items: list[ScoredCandidate]) -> list[ScoredCandidate]:
    # sorted() is stable, so ties keep candidate order
    return sorted(items, key=lambda s: s.boosted_score, reverse=True)


def _least_controversial(scored: Sequence[ScoredCandidate]) -> list[ScoredCandidate]:
    ranked = sorted(scored, key=lambda s: (s.nope_count, -s.love_count, -s.like_count))
    return ranked[:FALLBACK_LIMIT]


def classify_tiers(scored: Sequence[ScoredCandidate]) -> ClassifiedTiers:
    """
    Place every scored candidate in at most one tier.

    Precedence is favorites, then to-try, then best bets. Fallback picks
    are only computed when the first three tiers are all empty, and rank
    by least harm (fewest nopes) rather than most reward.
    """
    favorites: list[ScoredCandidate] = []
    to_try: list[ScoredCandidate] = []
    best_bets: list[ScoredCandidate] = []

    for s in scored:
        if s.all_positive and s.love_count > 0:
            favorites.append(s)
        elif s.none_nope and not s.all_positive:
            to_try.append(s)
        elif s.score > 0:
            best_bets.append(s)

    favorites = _by_boosted_score(favorites)
    to_try = _by_boosted_score(to_try)
    best_bets = _by_boosted_score(best_bets)[:BEST_BETS_LIMIT]

    primary_empty = not favorites and not to_try and not best_bets
    fallback = _least_controversial(scored) if primary_empty else []

    needs_external_fallback = primary_empty and all(
        s.nope_count > s.love_count + s.like_count for s in fallback
    )

    return ClassifiedTiers(
        favorites=favorites,
        to_try=to_try,
        best_bets=best_bets,
        fallback=fallback,
        needs_external_fallback=needs_external_fallback,
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def build_group_summary(tiers: ClassifiedTiers, top_tags: Sequence[str]) -> str:
    tags = ", ".join(top_tags)

    if tiers.favorites:
        summary = f"your group has {_plural(len(tiers.favorites), 'shared favorite')}"
        if tags:
            summary += f" and gravitates toward {tags}"
        return f"{summary}. {_plural(len(tiers.to_try), 'more place')} to explore together."

    if tiers.to_try:
        summary = f"no unanimous favorites, but {_plural(len(tiers.to_try), 'place')} interest everyone."
        if tags:
            summary += f" the group leans toward {tags}."
        return summary

    if tiers.best_bets:
        summary = "different tastes, but we found some best bets based on what the group liked most."
        if tags:
            summary += f" popular picks: {tags}."
        return summary

    if tiers.fallback:
        summary = "wildly different taste - here are the least controversial picks."
        if tags:
            summary += f" the group leans toward {tags}."
        return summary

    return "no overlap found. try expanding your search radius or picking a different category."
