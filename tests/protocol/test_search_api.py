from __future__ import annotations

from fastapi.testclient import TestClient

from tablut.eval import WINNING_VALUE
from tablut.protocol.http.app import MAX_SEARCH_DEPTH, create_app


ESCAPE_POSITION = "W" + "-" * 20 + "K" + "-" * 59 + "B"


def _client() -> TestClient:
    return TestClient(create_app())


def _new_game(client: TestClient, position: str | None = None) -> str:
    game_id = client.post("/api/games").json()["game_id"]
    if position is not None:
        r = client.post(f"/api/games/{game_id}/position", json={"position": position})
        assert r.status_code == 200
    return game_id


def test_search_endpoint_shape() -> None:
    client = _client()
    game_id = _new_game(client)

    r = client.post(f"/api/games/{game_id}/search", json={"depth": 2})
    assert r.status_code == 200
    data = r.json()
    assert {"best_move", "score", "nodes", "depth", "time_ms"}.issubset(data.keys())
    assert data["depth"] == 2
    assert data["best_move"] in client.get(f"/api/games/{game_id}/state").json()["legal_moves"]


def test_search_finds_escape() -> None:
    client = _client()
    game_id = _new_game(client, ESCAPE_POSITION)

    data = client.post(f"/api/games/{game_id}/search", json={"depth": 1}).json()
    assert data["best_move"] == "c3-9"
    assert data["score"] == WINNING_VALUE


def test_search_depth_is_validated() -> None:
    client = _client()
    game_id = _new_game(client)

    r = client.post(f"/api/games/{game_id}/search", json={"depth": MAX_SEARCH_DEPTH + 1})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "unprocessable_entity"
    r = client.post(f"/api/games/{game_id}/search", json={"depth": 0})
    assert r.status_code == 422


def test_ai_move_plays_and_then_conflicts() -> None:
    client = _client()
    game_id = _new_game(client, ESCAPE_POSITION)

    r = client.post(f"/api/games/{game_id}/ai-move", json={"depth": 1})
    assert r.status_code == 200
    state = r.json()
    assert state["last_move"] == "c3-9"
    assert state["winner"] == "white"
    assert state["legal_moves"] == []

    r2 = client.post(f"/api/games/{game_id}/ai-move", json={"depth": 1})
    assert r2.status_code == 409
    assert r2.json()["error"]["code"] == "conflict"


def test_move_limit_endpoint() -> None:
    client = _client()
    game_id = _new_game(client)

    r = client.post(f"/api/games/{game_id}/limit", json={"limit": 1})
    assert r.status_code == 200
    client.post(f"/api/games/{game_id}/move", json={"move": "h5-6"})
    state = client.post(f"/api/games/{game_id}/move", json={"move": "e7-d"}).json()
    assert state["legal_moves"] == []

    r_bad = client.post(f"/api/games/{game_id}/limit", json={"limit": 1})
    assert r_bad.status_code == 400
    assert client.post(f"/api/games/{game_id}/limit", json={"limit": 0}).status_code == 422


def test_perft_endpoint() -> None:
    client = _client()
    r = client.post("/api/perft", json={"depth": 1})
    assert r.status_code == 200
    assert r.json() == {"nodes": 80, "depth": 1}

    r0 = client.post("/api/perft", json={"position": ESCAPE_POSITION, "depth": 0})
    assert r0.json()["nodes"] == 1

    r_bad = client.post("/api/perft", json={"position": "nonsense", "depth": 1})
    assert r_bad.status_code == 400
