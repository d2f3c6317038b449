from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from vibecheck.app import app
from vibecheck.sessions.events import clear_events
from vibecheck.sessions.store import get_store
from vibecheck.voting.models import Candidate

client = TestClient(app)

PLACES = [
    Candidate(id="osm_1", name="Trattoria", tags=["italian"]),
    Candidate(id="osm_2", name="Noodle Bar", tags=["thai"]),
]


def _reset():
    get_store().clear()
    clear_events()


def _create_place_session() -> dict:
    resp = client.post("/api/session", json={
        "host_name": "Host",
        "category": "food",
        "scheme": "five_level",
        "location": "Austin",
        "location_radius": "nearby",
    })
    assert resp.status_code == 200
    return resp.json()


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_cache_stats_endpoint():
    resp = client.get("/cache/stats")
    assert resp.status_code == 200
    assert "hit_rate" in resp.json()


@patch("vibecheck.sessions.service.suggest_fresh_ideas", return_value=[])
@patch("vibecheck.sessions.service.fetch_local_places", return_value=PLACES)
def test_full_place_voting_flow(mock_fetch, mock_suggest):
    _reset()
    created = _create_place_session()
    sid = created["id"]

    resp = client.post(f"/api/session/{sid}/generate")
    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()["places"]] == ["osm_1", "osm_2"]

    joined = client.post(f"/api/session/{sid}/join", json={"name": "Guest"}).json()
    assert joined["session"]["status"] == "collecting"

    resp = client.post(f"/api/session/{sid}/submit", json={
        "participant_id": created["participant_id"],
        "choices": {"osm_1": "love", "osm_2": "meh"},
    })
    assert resp.json() == {"success": True, "all_completed": False, "is_update": False}

    status = client.get(f"/api/session/{sid}").json()
    assert status["completed_count"] == 1
    assert status["waiting_count"] == 1

    resp = client.post(f"/api/session/{sid}/submit", json={
        "participant_id": joined["id"],
        "choices": {"osm_1": "like", "osm_2": "unknown"},
    })
    assert resp.json()["all_completed"] is True

    body = client.get(f"/api/session/{sid}/results").json()
    assert body["session"]["status"] == "complete"
    results = body["results"]
    assert [s["candidate"]["id"] for s in results["shared_favorites"]] == ["osm_1"]
    assert [s["candidate"]["id"] for s in results["to_try"]] == ["osm_2"]
    assert results["needs_external_fallback"] is False
    assert len(results["individual_profiles"]) == 2

    events = client.get(f"/api/session/{sid}/events").json()["events"]
    assert events[-1]["type"] == "results_ready"


def test_place_session_without_location_is_rejected():
    _reset()
    resp = client.post("/api/session", json={
        "host_name": "Host", "category": "food", "scheme": "five_level",
    })
    assert resp.status_code == 400


def test_invalid_body_is_rejected():
    resp = client.post("/api/session", json={"host_name": "", "category": "food"})
    assert resp.status_code == 422


def test_unknown_session_is_404():
    _reset()
    assert client.get("/api/session/nope").status_code == 404
    assert client.post("/api/session/nope/join", json={"name": "Sam"}).status_code == 404
    assert client.get("/api/session/nope/events").status_code == 404


def test_submit_in_lobby_is_409():
    _reset()
    created = client.post("/api/session", json={"host_name": "Host", "category": "food"}).json()
    resp = client.post(f"/api/session/{created['id']}/submit", json={
        "participant_id": created["participant_id"], "choices": {},
    })
    assert resp.status_code == 409


@patch("vibecheck.sessions.service.fetch_local_places", return_value=[])
def test_no_places_found_is_503(mock_fetch):
    _reset()
    created = _create_place_session()
    resp = client.post(f"/api/session/{created['id']}/generate")
    assert resp.status_code == 503


@patch("vibecheck.sessions.service.suggest_fresh_ideas", return_value=[])
@patch("vibecheck.sessions.service.fetch_local_places", return_value=PLACES)
def test_close_early(mock_fetch, mock_suggest):
    _reset()
    created = _create_place_session()
    sid = created["id"]
    client.post(f"/api/session/{sid}/generate")
    client.post(f"/api/session/{sid}/join", json={"name": "Guest"})

    assert client.post(f"/api/session/{sid}/close").status_code == 400

    client.post(f"/api/session/{sid}/submit", json={
        "participant_id": created["participant_id"],
        "choices": {"osm_1": "nope", "osm_2": "like"},
    })
    resp = client.post(f"/api/session/{sid}/close")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["results"]["participant_count"] == 1
    assert [s["candidate"]["id"] for s in body["results"]["best_bets"]] == ["osm_2"]

    assert client.post(f"/api/session/{sid}/close").status_code == 409


def test_quiz_flow():
    _reset()
    created = client.post("/api/session", json={"host_name": "Host", "category": "drinks"}).json()
    sid = created["id"]
    questions = client.post(f"/api/session/{sid}/generate").json()["questions"]
    assert len(questions) == 12

    first = questions[0]
    client.post(f"/api/session/{sid}/submit", json={
        "participant_id": created["participant_id"],
        "choices": {str(first["id"]): first["left"]},
    })
    results = client.get(f"/api/session/{sid}/results").json()["results"]
    assert results["scheme"] == "binary"
    tally = next(t for t in results["choice_tallies"] if t["question_id"] == first["id"])
    assert tally["left_count"] == 1


@patch("vibecheck.sessions.service.suggest_fresh_ideas", return_value=[])
@patch("vibecheck.sessions.service.fetch_local_places", return_value=PLACES)
def test_malformed_verdicts_are_recorded_as_unknown(mock_fetch, mock_suggest):
    _reset()
    created = _create_place_session()
    sid = created["id"]
    client.post(f"/api/session/{sid}/generate")

    resp = client.post(f"/api/session/{sid}/submit", json={
        "participant_id": created["participant_id"],
        "choices": {"osm_1": None, "osm_2": 3},
    })
    assert resp.status_code == 200
    assert resp.json()["all_completed"] is True

    results = client.get(f"/api/session/{sid}/results").json()["results"]
    assert [s["candidate"]["id"] for s in results["to_try"]] == ["osm_1", "osm_2"]
    assert all(s["unknown_count"] == 1 for s in results["to_try"])


def test_blank_names_are_rejected():
    _reset()
    resp = client.post("/api/session", json={"host_name": "   ", "category": "food"})
    assert resp.status_code == 400

    created = client.post("/api/session", json={"host_name": "Host", "category": "food"}).json()
    resp = client.post(f"/api/session/{created['id']}/join", json={"name": " \t "})
    assert resp.status_code == 400
    assert len(client.get(f"/api/session/{created['id']}").json()["participants"]) == 1


def test_lifespan_runs_cleanup_and_shuts_down():
    with patch("vibecheck.app.purge_expired_sessions", return_value=0) as purge:
        with TestClient(app) as c:
            assert c.get("/health").status_code == 200
            assert c.get("/cache/stats").status_code == 200
        assert purge.call_count >= 1
