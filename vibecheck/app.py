from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, HTTPException

from .places.cache import get_cache_stats
from .sessions.config import DEFAULT_SESSION_CONFIG
from .sessions.events import get_events
from .sessions.models import (
    CloseResponse,
    CreateSessionRequest,
    CreateSessionResponse,
    JoinRequest,
    JoinResponse,
    ResultsResponse,
    SessionStatusResponse,
    SubmitRequest,
    SubmitResponse,
    VotingOpenedResponse,
)
from .sessions.service import (
    InvalidRequest,
    InvalidTransition,
    NoCandidatesFound,
    ParticipantNotFound,
    PreconditionFailed,
    SessionError,
    SessionNotFound,
    close_voting,
    create_session,
    get_results,
    get_session_status,
    join_session,
    open_voting,
    purge_expired_sessions,
    submit_ballot,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[SessionError], int] = {
    SessionNotFound: 404,
    ParticipantNotFound: 404,
    InvalidRequest: 400,
    PreconditionFailed: 400,
    InvalidTransition: 409,
    NoCandidatesFound: 503,
}


def _http_error(exc: SessionError) -> HTTPException:
    return HTTPException(status_code=_STATUS_CODES.get(type(exc), 400), detail=str(exc))


async def _cleanup_loop() -> None:
    while True:
        try:
            purge_expired_sessions()
        except Exception:
            logger.error("Session cleanup failed", exc_info=True)
        await asyncio.sleep(DEFAULT_SESSION_CONFIG.cleanup_interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(_cleanup_loop())
    yield
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task


app = FastAPI(title="Vibe Check API", version="1.0.0", lifespan=lifespan)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()


# ── Session endpoints ────────────────────────────────────────────────────


@app.post("/api/session", response_model=CreateSessionResponse)
def create(body: CreateSessionRequest) -> CreateSessionResponse:
    try:
        return create_session(body)
    except SessionError as exc:
        raise _http_error(exc)


@app.get("/api/session/{session_id}", response_model=SessionStatusResponse)
def status(session_id: str) -> SessionStatusResponse:
    try:
        return get_session_status(session_id)
    except SessionError as exc:
        raise _http_error(exc)


@app.post("/api/session/{session_id}/generate", response_model=VotingOpenedResponse)
def generate(session_id: str) -> VotingOpenedResponse:
    try:
        return open_voting(session_id)
    except SessionError as exc:
        raise _http_error(exc)


@app.post("/api/session/{session_id}/join", response_model=JoinResponse)
def join(session_id: str, body: JoinRequest) -> JoinResponse:
    try:
        participant = join_session(session_id, body.name)
        return JoinResponse(
            id=participant.id,
            name=participant.name,
            session=get_session_status(session_id).session,
        )
    except SessionError as exc:
        raise _http_error(exc)


@app.post("/api/session/{session_id}/submit", response_model=SubmitResponse)
def submit(session_id: str, body: SubmitRequest) -> SubmitResponse:
    try:
        return submit_ballot(session_id, body.participant_id, body.choices)
    except SessionError as exc:
        raise _http_error(exc)


@app.get("/api/session/{session_id}/results", response_model=ResultsResponse)
def results(session_id: str) -> ResultsResponse:
    try:
        return get_results(session_id)
    except SessionError as exc:
        raise _http_error(exc)


@app.post("/api/session/{session_id}/close", response_model=CloseResponse)
def close(session_id: str) -> CloseResponse:
    try:
        return CloseResponse(results=close_voting(session_id))
    except SessionError as exc:
        raise _http_error(exc)


@app.get("/api/session/{session_id}/events")
def events(session_id: str, since: float = 0.0) -> dict:
    try:
        get_session_status(session_id)
    except SessionError as exc:
        raise _http_error(exc)
    return {"session_id": session_id, "events": get_events(session_id, since)}
