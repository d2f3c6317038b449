from __future__ import annotations

from vibecheck.voting.engine import (
    aggregate,
    aggregate_ballots,
    apply_suggestions,
    build_fallback_request,
)
from vibecheck.voting.models import (
    Candidate,
    QuizQuestion,
    Suggestion,
    VoteRecord,
    VotingScheme,
)
from vibecheck.voting.tiers import FRESH_IDEAS_SUMMARY, NO_DATA_SUMMARY


def _records(*ballots: dict[str, str]) -> list[VoteRecord]:
    return [
        VoteRecord(participant_id=f"p{i}", participant_name=f"Person {i}", choices=b)
        for i, b in enumerate(ballots)
    ]


def _ids(items):
    return [s.candidate.id for s in items]


def test_three_people_love_the_only_place():
    candidates = [Candidate(id="a", name="Alpha")]
    result = aggregate(candidates, _records({"a": "love"}, {"a": "love"}, {"a": "love"}))
    assert _ids(result.shared_favorites) == ["a"]
    assert result.to_try == []
    assert "1 shared favorite" in result.group_summary
    assert result.needs_external_fallback is False
    assert result.participant_count == 3


def test_one_love_two_nopes_needs_external_fallback():
    candidates = [Candidate(id="a", name="Alpha")]
    result = aggregate(candidates, _records({"a": "love"}, {"a": "nope"}, {"a": "nope"}))
    assert result.shared_favorites == []
    assert result.to_try == []
    assert result.best_bets == []
    assert _ids(result.fallback_picks) == ["a"]
    assert result.fallback_picks[0].score == -2
    assert result.needs_external_fallback is True
    assert result.group_summary.startswith("wildly different taste")


def test_shared_tag_lifts_neutral_place():
    candidates = [
        Candidate(id="a", name="Trattoria", tags=["italian"]),
        Candidate(id="b", name="Osteria", tags=["italian"]),
        Candidate(id="c", name="Diner"),
    ]
    result = aggregate(candidates, _records(
        {"a": "love", "b": "meh", "c": "meh"},
        {"a": "like", "b": "unknown", "c": "unknown"},
    ))
    assert _ids(result.shared_favorites) == ["a"]
    assert _ids(result.to_try) == ["b", "c"]
    a = result.shared_favorites[0]
    b, c = result.to_try
    assert b.score == c.score == 0
    assert b.boosted_score == 2
    assert c.boosted_score == 0
    assert a.boosted_score > b.boosted_score
    assert result.tag_overlap == ["italian"]


def test_zero_participants():
    result = aggregate([Candidate(id="a", name="Alpha")], [])
    assert result.shared_favorites == result.to_try == result.best_bets == result.fallback_picks == []
    assert result.needs_external_fallback is True
    assert result.group_summary == NO_DATA_SUMMARY


def test_zero_candidates():
    result = aggregate([], _records({"a": "love"}))
    assert result.needs_external_fallback is True
    assert result.group_summary == NO_DATA_SUMMARY
    assert len(result.individual_profiles) == 1
    assert result.individual_profiles[0].loved_places == []


def test_aggregate_is_idempotent():
    candidates = [Candidate(id=c, name=c, tags=["x"] if c in "ab" else []) for c in "abcdef"]
    records = _records(
        {"a": "like", "b": "meh", "c": "nope", "d": "love"},
        {"a": "love", "c": "like", "e": "meh", "f": "nope"},
        {"b": "love", "d": "nope", "e": "unknown"},
    )
    first = aggregate(candidates, records)
    second = aggregate(candidates, records)
    assert first == second


def test_missing_votes_same_as_explicit_unknown():
    candidates = [Candidate(id="a", name="A", tags=["thai"]), Candidate(id="b", name="B")]
    implicit = aggregate(candidates, _records({"a": "love"}, {"a": "like"}))
    explicit = aggregate(candidates, _records({"a": "love", "b": "unknown"}, {"a": "like", "b": "unknown"}))
    assert implicit.group_summary == explicit.group_summary
    assert _ids(implicit.shared_favorites) == _ids(explicit.shared_favorites)
    assert _ids(implicit.to_try) == _ids(explicit.to_try)
    assert implicit.to_try == explicit.to_try
    assert implicit.needs_external_fallback == explicit.needs_external_fallback


def test_binary_scheme_tallies_choices():
    questions = [
        QuizQuestion(id=1, left="spicy", right="mild", dimension="heat"),
        QuizQuestion(id=2, left="sweet", right="savory", dimension="flavor"),
    ]
    records = _records({"1": "spicy", "2": "sweet"}, {"1": "spicy", "2": "salty"})
    result = aggregate_ballots(VotingScheme.binary, questions, records)
    assert result.scheme == VotingScheme.binary
    assert result.needs_external_fallback is False
    first, second = result.choice_tallies
    assert (first.left_count, first.right_count, first.unanswered_count) == (2, 0, 0)
    assert (second.left_count, second.right_count, second.unanswered_count) == (1, 0, 1)
    assert result.group_summary == "2 people answered 2 questions and agreed on 1."


def test_five_level_dispatch_matches_aggregate():
    candidates = [Candidate(id="a", name="Alpha")]
    records = _records({"a": "love"})
    assert aggregate_ballots(VotingScheme.five_level, candidates, records) == aggregate(candidates, records)


def test_fallback_request_carries_group_taste():
    candidates = [
        Candidate(id="a", name="Alpha", tags=["thai"]),
        Candidate(id="b", name="Beta", tags=["bbq"]),
    ]
    result = aggregate(candidates, _records(
        {"a": "love", "b": "nope"},
        {"a": "nope", "b": "like"},
        {"a": "nope", "b": "nope"},
    ))
    assert result.needs_external_fallback is True

    request = build_fallback_request(result, "food", "Austin", "nearby")
    assert request.category == "food"
    assert request.location == "Austin"
    assert request.radius_tier == "nearby"
    assert request.top_tags == ["thai", "bbq"]
    assert [t.name for t in request.participant_tastes] == ["Person 0", "Person 1", "Person 2"]
    assert request.participant_tastes[0].tags == ["thai"]
    assert request.participant_tastes[0].loved_count == 1
    assert request.participant_tastes[1].liked_count == 1


def test_apply_suggestions_overrides_summary():
    result = aggregate([Candidate(id="a", name="Alpha")], _records({"a": "nope"}))
    updated = apply_suggestions(result, [Suggestion(label="food hall", rationale="variety")])
    assert updated.group_summary == FRESH_IDEAS_SUMMARY
    assert updated.suggestions[0].label == "food hall"
    assert updated.needs_external_fallback is True
    assert result.suggestions == []


def test_apply_no_suggestions_keeps_result():
    result = aggregate([Candidate(id="a", name="Alpha")], _records({"a": "nope"}))
    assert apply_suggestions(result, []) is result
