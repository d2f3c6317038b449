from __future__ import annotations

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..voting.models import AggregateResult, Candidate, QuizQuestion, VotingScheme


class SessionStatus(str, Enum):
    lobby = "lobby"
    collecting = "collecting"
    complete = "complete"


class RadiusTier(str, Enum):
    walkable = "walkable"
    nearby = "nearby"
    city = "city"


class Session(BaseModel):
    id: str
    scheme: VotingScheme
    category: str
    location: str | None = None
    location_radius: RadiusTier | None = None
    status: SessionStatus = SessionStatus.lobby
    host_name: str
    places: list[Candidate] = Field(default_factory=list)
    questions: list[QuizQuestion] = Field(default_factory=list)
    results: AggregateResult | None = None
    created_at: float = Field(default_factory=time.time)


class Participant(BaseModel):
    id: str
    session_id: str
    name: str
    choices: dict[str, Any] = Field(default_factory=dict)
    completed: bool = False
    created_at: float = Field(default_factory=time.time)


# ── Request / response bodies ────────────────────────────────────────────


class CreateSessionRequest(BaseModel):
    host_name: str = Field(..., min_length=1, max_length=50)
    category: str = Field(..., min_length=1, max_length=50)
    scheme: VotingScheme = VotingScheme.binary
    location: str | None = Field(default=None, max_length=100)
    location_radius: RadiusTier | None = None


class CreateSessionResponse(BaseModel):
    id: str
    link: str
    participant_id: str


class JoinRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class JoinResponse(BaseModel):
    id: str
    name: str
    session: Session


class SubmitRequest(BaseModel):
    participant_id: str = Field(..., min_length=1)
    choices: dict[str, Any] = Field(default_factory=dict)


class SubmitResponse(BaseModel):
    success: bool = True
    all_completed: bool
    is_update: bool = False


class ParticipantStatus(BaseModel):
    id: str
    name: str
    completed: bool


class SessionStatusResponse(BaseModel):
    session: Session
    participants: list[ParticipantStatus]
    completed_count: int
    waiting_count: int


class VotingOpenedResponse(BaseModel):
    scheme: VotingScheme
    places: list[Candidate] = Field(default_factory=list)
    questions: list[QuizQuestion] = Field(default_factory=list)


class ResultsResponse(BaseModel):
    session: Session
    participants: list[Participant]
    results: AggregateResult | None = None


class CloseResponse(BaseModel):
    success: bool = True
    results: AggregateResult
