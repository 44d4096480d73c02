from fastapi.testclient import TestClient

from models import NO_VOTE


def _create_room(client: TestClient):
    response = client.post(
        "/createroom",
        json={
            "room_name": "Sprint1",
            "created_by_identity": "id-a",
            "user_name": "Alice",
            "avatar_url": "a.png",
        },
    )
    assert response.status_code == 200
    return response.json()


def _status(client: TestClient, room_id: int):
    response = client.post("/votestatus", json={"room_id": room_id})
    assert response.status_code == 200
    return response.json()


def test_planning_poker_session_end_to_end(client: TestClient):
    created = _create_room(client)
    assert created == {"room_id": 1, "user_id": 1}
    room_id = created["room_id"]

    joined = client.post(
        "/joinroom",
        json={"room_id": room_id, "user_name": "Bob", "avatar_url": "b.png", "role": 2, "identity": "id-b"},
    )
    assert joined.status_code == 200
    assert joined.json() == {"user_id": 2}

    assert client.post("/vote", json={"user_id": 1, "vote_value": "5"}).json() == {}
    assert client.post("/vote", json={"user_id": 2, "vote_value": "3"}).json() == {}

    status = _status(client, room_id)
    assert status["room"]["current_round_name"] == "Round 1"
    assert status["room"]["current_round_status"] == "open"
    assert [(u["user_name"], u["vote"]) for u in status["users"]] == [("Alice", "5"), ("Bob", "3")]
    first_round_id = status["room"]["current_round_id"]

    assert client.post("/nextround", json={"room_id": room_id}).json() == {}

    status = _status(client, room_id)
    assert status["room"]["current_round_name"] == "Round 2"
    assert status["room"]["current_round_status"] == "open"
    assert status["room"]["current_round_id"] != first_round_id
    assert [u["vote"] for u in status["users"]] == [NO_VOTE, NO_VOTE]


def test_reveal_then_status(client: TestClient):
    room_id = _create_room(client)["room_id"]
    round_id = _status(client, room_id)["room"]["current_round_id"]

    assert client.post("/reveal", json={"round_id": round_id}).json() == {}
    assert client.post("/reveal", json={"round_id": round_id}).status_code == 200

    assert _status(client, room_id)["room"]["current_round_status"] == "revealed"


def test_legacy_field_names_are_accepted(client: TestClient):
    response = client.post(
        "/createroom",
        json={"room_name": "Legacy", "created_by_openid": "openid-1", "user_name": "Alice", "avatar_url": None},
    )
    assert response.status_code == 200

    joined = client.post(
        "/joinroom",
        json={"room_id": response.json()["room_id"], "user_name": "Bob", "avatar_url": "b.png", "role": 1, "open_id": "openid-2"},
    )
    assert joined.status_code == 200


def test_edit_profile_and_change_role(client: TestClient):
    room_id = _create_room(client)["room_id"]
    client.post("/vote", json={"user_id": 1, "vote_value": "8"})

    response = client.post("/editprofile", json={"user_id": 1, "user_name": "Alicia"})
    assert response.status_code == 200
    users = _status(client, room_id)["users"]
    assert users[0]["user_name"] == "Alicia"
    assert users[0]["vote"] == "8"

    response = client.post("/changerole", json={"user_id": 1, "role": 2})
    assert response.status_code == 200
    users = _status(client, room_id)["users"]
    assert users[0]["role"] == 2
    assert users[0]["vote"] == NO_VOTE


def test_edit_profile_without_fields_is_rejected(client: TestClient):
    _create_room(client)

    response = client.post("/editprofile", json={"user_id": 1})

    assert response.status_code == 400
    assert response.json() == {"error": "No fields to update"}


def test_not_found_errors(client: TestClient):
    response = client.post("/votestatus", json={"room_id": 99})
    assert response.status_code == 404
    assert response.json() == {"error": "Room 99 not found"}

    assert client.post("/nextround", json={"room_id": 99}).status_code == 404
    assert client.post("/vote", json={"user_id": 99, "vote_value": "1"}).status_code == 404
    assert client.post("/reveal", json={"round_id": 99}).status_code == 404
    assert client.post("/joinroom", json={"room_id": 99, "user_name": "Bob", "role": 1}).status_code == 404


def test_invalid_body_is_rejected(client: TestClient):
    response = client.post("/createroom", json={"room_name": "", "user_name": "Alice"})

    assert response.status_code == 400
    assert "room_name" in response.json()["error"]


def test_unknown_operation(client: TestClient):
    response = client.post("/deleteroom", json={"room_id": 1})

    assert response.status_code == 404
    assert response.json() == {"error": "Unknown endpoint: /deleteroom"}


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "healthy"}


def test_routing_errors_use_error_shape(client: TestClient):
    nested = client.post("/rooms/1", json={})
    assert nested.status_code == 404
    assert nested.json() == {"error": "Not Found"}

    missing = client.get("/votestatus/1")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Not Found"}

    wrong_method = client.get("/createroom")
    assert wrong_method.status_code == 405
    assert wrong_method.json() == {"error": "Method Not Allowed"}
