from __future__ import annotations

import secrets
import threading
import time

from .models import Participant, Session


def new_id() -> str:
    return secrets.token_urlsafe(6)


class SessionStore:
    """
    In-memory sessions and participants.

    Every session has its own lock; callers hold it around any
    read-modify-write of a session so aggregation runs never overlap.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._participants: dict[str, list[Participant]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def add_session(self, session: Session) -> None:
        with self._guard:
            self._sessions[session.id] = session
            self._participants[session.id] = []
            self._locks[session.id] = threading.Lock()

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def save_session(self, session: Session) -> None:
        self._sessions[session.id] = session

    def lock(self, session_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def add_participant(self, participant: Participant) -> None:
        with self._guard:
            self._participants.setdefault(participant.session_id, []).append(participant)

    def get_participant(self, session_id: str, participant_id: str) -> Participant | None:
        for p in self._participants.get(session_id, []):
            if p.id == participant_id:
                return p
        return None

    def list_participants(self, session_id: str, completed_only: bool = False) -> list[Participant]:
        participants = list(self._participants.get(session_id, []))
        if completed_only:
            return [p for p in participants if p.completed]
        return participants

    def purge_older_than(self, max_age_seconds: float, now: float | None = None) -> list[str]:
        """Drop sessions created more than *max_age_seconds* ago; returns their ids."""
        cutoff = (now if now is not None else time.time()) - max_age_seconds
        with self._guard:
            expired = [sid for sid, s in self._sessions.items() if s.created_at < cutoff]
            for sid in expired:
                del self._sessions[sid]
                self._participants.pop(sid, None)
                self._locks.pop(sid, None)
        return expired

    def clear(self) -> None:
        with self._guard:
            self._sessions.clear()
            self._participants.clear()
            self._locks.clear()


_store: SessionStore | None = None


def get_store() -> SessionStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store
