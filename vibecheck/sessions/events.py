from __future__ import annotations

import time
from typing import Any

_events: list[dict[str, Any]] = []


def record_event(session_id: str, event_type: str, data: dict[str, Any] | None = None) -> None:
    _events.append({
        "session_id": session_id,
        "type": event_type,
        "timestamp": time.time(),
        **(data or {}),
    })


def get_events(session_id: str, since: float = 0.0) -> list[dict[str, Any]]:
    return [
        e for e in _events
        if e["session_id"] == session_id and e["timestamp"] > since
    ]


def drop_events(session_ids: set[str]) -> None:
    _events[:] = [e for e in _events if e["session_id"] not in session_ids]


def clear_events() -> None:
    _events.clear()
