from __future__ import annotations

import logging
import random
import time
from typing import Any, Sequence

from ..llm.groq_client import suggest_fresh_ideas
from ..places.osm import fetch_local_places
from ..voting.engine import aggregate_ballots, apply_suggestions, build_fallback_request
from ..voting.models import AggregateResult, VoteRecord, VotingScheme
from .config import DEFAULT_SESSION_CONFIG, SessionConfig
from .events import drop_events, record_event
from .models import (
    CreateSessionRequest,
    CreateSessionResponse,
    Participant,
    ParticipantStatus,
    ResultsResponse,
    Session,
    SessionStatus,
    SessionStatusResponse,
    SubmitResponse,
    VotingOpenedResponse,
)
from .questions import generate_questions
from .store import SessionStore, get_store, new_id

logger = logging.getLogger(__name__)

_RNG = random.Random()


class SessionError(Exception):
    """Base class for lifecycle errors reported back to the caller."""


class SessionNotFound(SessionError):
    pass


class ParticipantNotFound(SessionError):
    pass


class InvalidRequest(SessionError):
    pass


class InvalidTransition(SessionError):
    pass


class PreconditionFailed(SessionError):
    pass


class NoCandidatesFound(SessionError):
    pass


def _require_session(store: SessionStore, session_id: str) -> Session:
    session = store.get_session(session_id)
    if session is None:
        raise SessionNotFound(f"Session {session_id} not found")
    return session


def _clean_name(raw: str, what: str) -> str:
    name = " ".join(raw.split())
    if not name:
        raise InvalidRequest(f"{what} is required")
    return name


def _radius_tier(session: Session) -> str | None:
    return session.location_radius.value if session.location_radius else None


def _vote_records(participants: Sequence[Participant]) -> list[VoteRecord]:
    return [
        VoteRecord(participant_id=p.id, participant_name=p.name, choices=p.choices)
        for p in participants
    ]


# ── Aggregation ──────────────────────────────────────────────────────────


def compute_results(session: Session, participants: Sequence[Participant]) -> AggregateResult:
    """Run the engine over *participants* and, if needed, ask for fresh ideas."""
    items = session.places if session.scheme == VotingScheme.five_level else session.questions
    result = aggregate_ballots(session.scheme, items, _vote_records(participants))

    if (
        session.scheme == VotingScheme.five_level
        and result.needs_external_fallback
        and session.location
    ):
        logger.info("No overlap in session %s, asking for fresh ideas", session.id)
        request = build_fallback_request(
            result, session.category, session.location, _radius_tier(session),
        )
        result = apply_suggestions(result, suggest_fresh_ideas(request))

    return result


def _publish_results(
    store: SessionStore,
    session: Session,
    result: AggregateResult,
    is_update: bool = False,
) -> None:
    session.results = result
    session.status = SessionStatus.complete
    store.save_session(session)
    record_event(session.id, "results_ready", {"is_update": is_update})


# ── Lifecycle ────────────────────────────────────────────────────────────


def create_session(
    body: CreateSessionRequest,
    store: SessionStore | None = None,
) -> CreateSessionResponse:
    store = store or get_store()
    host_name = _clean_name(body.host_name, "Host name")
    category = _clean_name(body.category, "Category")
    location = (body.location or "").strip() or None
    if body.scheme == VotingScheme.five_level and not location:
        raise InvalidRequest("Location is required for place voting")

    session = Session(
        id=new_id(),
        scheme=body.scheme,
        category=category,
        location=location,
        location_radius=body.location_radius,
        host_name=host_name,
    )
    store.add_session(session)

    host = Participant(id=new_id(), session_id=session.id, name=session.host_name)
    store.add_participant(host)

    record_event(session.id, "session_created", {"host_name": host.name})
    logger.info("Created %s session %s for %s", session.scheme.value, session.id, session.category)
    return CreateSessionResponse(
        id=session.id,
        link=f"/session/{session.id}",
        participant_id=host.id,
    )


def get_session_status(session_id: str, store: SessionStore | None = None) -> SessionStatusResponse:
    store = store or get_store()
    session = _require_session(store, session_id)
    participants = store.list_participants(session_id)
    completed = sum(1 for p in participants if p.completed)
    return SessionStatusResponse(
        session=session,
        participants=[
            ParticipantStatus(id=p.id, name=p.name, completed=p.completed)
            for p in participants
        ],
        completed_count=completed,
        waiting_count=len(participants) - completed,
    )


def open_voting(
    session_id: str,
    store: SessionStore | None = None,
    rng: random.Random | None = _RNG,
    config: SessionConfig = DEFAULT_SESSION_CONFIG,
) -> VotingOpenedResponse:
    """Move a session from lobby to collecting, loading the items to vote on."""
    store = store or get_store()
    session = _require_session(store, session_id)

    with store.lock(session_id):
        if session.status == SessionStatus.complete:
            raise InvalidTransition("Voting already finished for this session")

        if session.status == SessionStatus.lobby:
            if session.scheme == VotingScheme.five_level:
                places = fetch_local_places(
                    session.category,
                    session.location or "",
                    config.radius_for(_radius_tier(session)),
                    rng=rng,
                )
                if not places:
                    raise NoCandidatesFound("Could not find places in this area. Try a larger radius.")
                session.places = places
            else:
                session.questions = generate_questions(session.category, rng=rng)

            session.status = SessionStatus.collecting
            store.save_session(session)
            record_event(session.id, "voting_opened", {"scheme": session.scheme.value})
            logger.info("Session %s is collecting votes", session.id)

    return VotingOpenedResponse(
        scheme=session.scheme,
        places=session.places,
        questions=session.questions,
    )


def join_session(session_id: str, name: str, store: SessionStore | None = None) -> Participant:
    store = store or get_store()
    session = _require_session(store, session_id)
    participant = Participant(id=new_id(), session_id=session.id, name=_clean_name(name, "Name"))
    store.add_participant(participant)
    record_event(session.id, "participant_joined", {"name": participant.name, "id": participant.id})
    return participant


def submit_ballot(
    session_id: str,
    participant_id: str,
    choices: dict[str, Any],
    store: SessionStore | None = None,
) -> SubmitResponse:
    """
    Record a participant's ballot and aggregate when the session is ready.

    Results are computed when the last participant completes, and
    recomputed over completed ballots whenever someone votes after the
    session already finished.
    """
    store = store or get_store()
    session = _require_session(store, session_id)

    with store.lock(session_id):
        participant = store.get_participant(session_id, participant_id)
        if participant is None:
            raise ParticipantNotFound(f"Participant {participant_id} not found")
        if session.status == SessionStatus.lobby:
            raise InvalidTransition("Voting has not opened yet")

        participant.choices = dict(choices)
        participant.completed = True
        record_event(session.id, "ballot_submitted", {"participant_name": participant.name})

        participants = store.list_participants(session_id)
        all_completed = all(p.completed for p in participants)
        is_update = session.status == SessionStatus.complete

        if is_update:
            completed = [p for p in participants if p.completed]
            result = compute_results(session, completed).model_copy(update={
                "update_reason": f"{participant.name} joined and voted",
                "updated_at": time.time(),
            })
            _publish_results(store, session, result, is_update=True)
            logger.info("Session %s results updated after %s voted", session.id, participant.name)
        elif all_completed:
            _publish_results(store, session, compute_results(session, participants))
            logger.info("Session %s complete with %d ballots", session.id, len(participants))

    return SubmitResponse(all_completed=all_completed, is_update=is_update)


def close_voting(session_id: str, store: SessionStore | None = None) -> AggregateResult:
    """Finish voting early using only the ballots submitted so far."""
    store = store or get_store()
    session = _require_session(store, session_id)

    with store.lock(session_id):
        if session.status == SessionStatus.complete:
            raise InvalidTransition("Session already complete")

        completed = store.list_participants(session_id, completed_only=True)
        if not completed:
            raise PreconditionFailed("No participants have completed voting yet")

        result = compute_results(session, completed)
        _publish_results(store, session, result)
        logger.info("Session %s closed early with %d ballots", session.id, len(completed))

    return result


def get_results(session_id: str, store: SessionStore | None = None) -> ResultsResponse:
    store = store or get_store()
    session = _require_session(store, session_id)
    return ResultsResponse(
        session=session,
        participants=store.list_participants(session_id),
        results=session.results,
    )


def purge_expired_sessions(
    store: SessionStore | None = None,
    config: SessionConfig = DEFAULT_SESSION_CONFIG,
) -> int:
    store = store or get_store()
    expired = store.purge_older_than(config.max_age_hours * 3600)
    if expired:
        drop_events(set(expired))
        logger.info("Cleaned up %d old sessions", len(expired))
    return len(expired)
