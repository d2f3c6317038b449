from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class VotingScheme(str, Enum):
    five_level = "five_level"
    binary = "binary"


class Verdict(str, Enum):
    love = "love"
    like = "like"
    meh = "meh"
    unknown = "unknown"
    nope = "nope"

    @classmethod
    def parse(cls, value: Any) -> Verdict:
        """Map a raw ballot value to a verdict; anything unrecognised is ``unknown``."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.unknown
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.unknown


class Candidate(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    tags: list[str] = Field(default_factory=list, description="Category labels, e.g. cuisines")
    address: str | None = None
    website: str | None = None
    tel: str | None = None
    hours: str | None = None
    amenity: str | None = None
    lat: float | None = None
    lon: float | None = None
    maps_url: str | None = None


class QuizQuestion(BaseModel):
    id: int
    left: str
    right: str
    dimension: str = ""


class VoteRecord(BaseModel):
    participant_id: str
    participant_name: str
    choices: dict[str, Any] = Field(default_factory=dict)


class ScoredCandidate(BaseModel):
    candidate: Candidate
    love_count: int = 0
    like_count: int = 0
    meh_count: int = 0
    unknown_count: int = 0
    nope_count: int = 0
    positive_count: int = 0
    score: int = 0
    boosted_score: int = 0
    all_love: bool = False
    all_positive: bool = False
    none_nope: bool = True
    vote_breakdown: str = ""


class ClassifiedTiers(BaseModel):
    favorites: list[ScoredCandidate] = Field(default_factory=list)
    to_try: list[ScoredCandidate] = Field(default_factory=list)
    best_bets: list[ScoredCandidate] = Field(default_factory=list)
    fallback: list[ScoredCandidate] = Field(default_factory=list)
    needs_external_fallback: bool = False


class IndividualProfile(BaseModel):
    participant_id: str
    name: str
    loved_places: list[Candidate] = Field(default_factory=list)
    liked_places: list[Candidate] = Field(default_factory=list)
    want_to_try_places: list[Candidate] = Field(default_factory=list)
    top_tags: list[str] = Field(default_factory=list)
    total_loved: int = 0
    total_liked: int = 0
    total_want_to_try: int = 0


class ChoiceTally(BaseModel):
    question_id: int
    left: str
    right: str
    dimension: str = ""
    left_count: int = 0
    right_count: int = 0
    unanswered_count: int = 0


class Suggestion(BaseModel):
    label: str
    rationale: str = ""
    search_hint: str = ""


class ParticipantTaste(BaseModel):
    name: str
    tags: list[str] = Field(default_factory=list)
    loved_count: int = 0
    liked_count: int = 0


class FallbackRequest(BaseModel):
    category: str
    location: str
    radius_tier: str | None = None
    top_tags: list[str] = Field(default_factory=list)
    participant_tastes: list[ParticipantTaste] = Field(default_factory=list)


class AggregateResult(BaseModel):
    scheme: VotingScheme = VotingScheme.five_level
    participant_count: int = 0
    group_summary: str
    shared_favorites: list[ScoredCandidate] = Field(default_factory=list)
    to_try: list[ScoredCandidate] = Field(default_factory=list)
    best_bets: list[ScoredCandidate] = Field(default_factory=list)
    fallback_picks: list[ScoredCandidate] = Field(default_factory=list)
    individual_profiles: list[IndividualProfile] = Field(default_factory=list)
    tag_overlap: list[str] = Field(default_factory=list)
    needs_external_fallback: bool = False
    suggestions: list[Suggestion] = Field(default_factory=list)
    choice_tallies: list[ChoiceTally] = Field(default_factory=list)
    update_reason: str | None = None
    updated_at: float | None = None
