"""Tests for the HTTP/WebSocket API."""

from fastapi.testclient import TestClient

from star_empires.server.main import app

client = TestClient(app)


def create_game(**overrides):
    payload = {"humanFaction": "player", "seed": 42, "mapSize": "compact", "difficulty": "medium"}
    payload.update(overrides)
    response = client.post("/api/games", json=payload)
    assert response.status_code == 200
    return response.json()


def test_health_check():
    response = client.get("/api")

    assert response.status_code == 200
    assert response.json()["status"] == "operational"


def test_create_game_returns_initial_state():
    game = create_game()
    state = game["state"]

    assert game["gameId"].startswith("game-")
    assert game["seed"] == 42
    assert state["turn"] == 1
    assert state["status"] == "awaiting_commands"
    assert len(state["planets"]) == 12
    assert state["planets"][0]["owner"] == "player"
    assert state["planets"][-1]["owner"] == "enemy"
    assert state["accounts"]["player"]["energy"] == 100


def test_invalid_create_request_is_rejected():
    response = client.post("/api/games", json={"mapSize": "galactic"})

    assert response.status_code == 422


def test_unknown_game_returns_404():
    assert client.get("/api/games/game-nope/state").status_code == 404
    assert client.post("/api/games/game-nope/turn").status_code == 404
    assert client.delete("/api/games/game-nope").status_code == 404


def test_build_and_cancel():
    game = create_game()
    game_id = game["gameId"]

    response = client.post(f"/api/games/{game_id}/builds", json={"planetId": 0, "kind": "frigate"})
    assert response.json() == {"accepted": True, "errors": []}

    state = client.get(f"/api/games/{game_id}/state").json()["state"]
    entry = state["planets"][0]["buildQueue"][0]
    assert entry["kind"] == "frigate"
    assert state["accounts"]["player"]["minerals"] == 70

    response = client.delete(f"/api/games/{game_id}/builds/0/{entry['id']}")
    assert response.json()["accepted"] is True

    state = client.get(f"/api/games/{game_id}/state").json()["state"]
    assert state["planets"][0]["buildQueue"] == []
    assert state["accounts"]["player"]["minerals"] == 85


def test_rejected_command_reports_reason():
    game_id = create_game()["gameId"]

    response = client.post(
        f"/api/games/{game_id}/builds", json={"planetId": 0, "kind": "dreadnought"}
    )

    assert response.json()["accepted"] is False
    assert response.json()["errors"] == ["Unknown ship kind: dreadnought"]


def test_send_fleet_and_advance_turn():
    game = create_game()
    game_id = game["gameId"]
    home = game["state"]["planets"][0]

    response = client.post(
        f"/api/games/{game_id}/fleets",
        json={"sourceId": 0, "shipIds": [home["ships"][0]["id"]], "destinationId": 1},
    )
    assert response.json()["accepted"] is True

    response = client.post(f"/api/games/{game_id}/turn")
    body = response.json()

    assert response.status_code == 200
    assert body["accepted"] is True
    assert body["turn"] == 2
    assert body["pendingBattle"] is None


def test_battle_decision_without_pending_battle():
    game_id = create_game()["gameId"]

    response = client.post(f"/api/games/{game_id}/battle", json={"decision": "fight"})

    assert response.json()["accepted"] is False
    assert response.json()["errors"] == ["No battle is awaiting a decision"]


def test_score_endpoint():
    game_id = create_game()["gameId"]

    response = client.get(f"/api/games/{game_id}/score")

    assert response.json()["scores"] == {"player": 180, "enemy": 180}


def test_ai_only_game_plays_turns():
    game_id = create_game(humanFaction=None)["gameId"]

    for expected_turn in (2, 3, 4):
        body = client.post(f"/api/games/{game_id}/turn").json()
        assert body["turn"] == expected_turn
        assert body["status"] in ("awaiting_commands", "game_over")


def test_delete_game():
    game_id = create_game()["gameId"]

    assert client.delete(f"/api/games/{game_id}").status_code == 200
    assert client.get(f"/api/games/{game_id}/state").status_code == 404


def test_websocket_connect_and_ping():
    game_id = create_game()["gameId"]

    with client.websocket_connect(f"/ws/games/{game_id}") as websocket:
        message = websocket.receive_json()
        assert message["type"] == "CONNECTED"
        assert message["turn"] == 1

        websocket.send_json({"type": "PING"})
        assert websocket.receive_json() == {"type": "PONG"}
