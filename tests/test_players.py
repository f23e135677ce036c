"""Tests for player endpoints and roster bookkeeping on player changes."""
import pytest


def player_payload(player_id, name="Lee Sang-hyeok", ingame_name="Faker", role="mid", team_id=None):
    body = {
        "id": player_id,
        "name": name,
        "ingame_name": ingame_name,
        "player_role": role,
        "birthday": "1996-05-07",
    }
    if team_id is not None:
        body["team_id"] = team_id
    return body


def team_payload(team_id, name="T1", ingame_name="T1", current_players=None):
    return {
        "id": team_id,
        "name": name,
        "ingame_name": ingame_name,
        "found_date": "2004-02-12",
        "current_players": current_players or [],
    }


@pytest.mark.asyncio
async def test_player_crud(client, auth_headers):
    r = await client.post("/api/players", json=player_payload(1), headers=auth_headers)
    assert r.status_code == 201
    data = r.json()
    assert data["id"] == 1
    assert data["ingame_name"] == "Faker"
    assert data["team_id"] is None
    assert data["history"] == []

    r = await client.get("/api/players/1", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Lee Sang-hyeok"

    r = await client.put("/api/players/1", json={"player_role": "Mid"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["player_role"] == "Mid"
    assert r.json()["ingame_name"] == "Faker"

    r = await client.delete("/api/players/1", headers=auth_headers)
    assert r.status_code == 200
    r = await client.get("/api/players/1", headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Player not found"


@pytest.mark.asyncio
async def test_create_duplicate_player(client, auth_headers):
    await client.post("/api/players", json=player_payload(1), headers=auth_headers)
    r = await client.post("/api/players", json=player_payload(1), headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Player with ID 1 already exists"


@pytest.mark.asyncio
async def test_create_player_missing_field(client, auth_headers):
    body = player_payload(1)
    del body["birthday"]
    r = await client.post("/api/players", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"].startswith("birthday")


@pytest.mark.asyncio
async def test_invalid_player_id_path(client, auth_headers):
    r = await client.get("/api/players/abc", headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Player ID must be a positive number."


@pytest.mark.asyncio
async def test_create_player_joins_team_roster(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    r = await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["team_id"] == 10

    r = await client.get("/api/teams/10", headers=auth_headers)
    assert r.json()["current_players"] == [1]


@pytest.mark.asyncio
async def test_change_team_moves_between_rosters(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    await client.post("/api/teams", json=team_payload(20, name="Gen.G", ingame_name="GEN"), headers=auth_headers)
    await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)

    r = await client.put("/api/players/1", json={"team_id": 20}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["team_id"] == 20

    old = (await client.get("/api/teams/10", headers=auth_headers)).json()
    new = (await client.get("/api/teams/20", headers=auth_headers)).json()
    assert old["current_players"] == []
    assert new["current_players"] == [1]

    # Same request again changes nothing
    r = await client.put("/api/players/1", json={"team_id": 20}, headers=auth_headers)
    assert r.status_code == 200
    new = (await client.get("/api/teams/20", headers=auth_headers)).json()
    assert new["current_players"] == [1]


@pytest.mark.asyncio
async def test_delete_player_leaves_roster(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)
    await client.post("/api/players", json=player_payload(2, ingame_name="Zeus", role="top", team_id=10), headers=auth_headers)

    r = await client.delete("/api/players/1", headers=auth_headers)
    assert r.status_code == 200
    team = (await client.get("/api/teams/10", headers=auth_headers)).json()
    assert team["current_players"] == [2]


@pytest.mark.asyncio
async def test_batch_skips_existing(client, auth_headers):
    await client.post("/api/players", json=player_payload(1), headers=auth_headers)
    r = await client.post(
        "/api/players/batch",
        json={"players": [player_payload(1), player_payload(2, ingame_name="Oner", role="jungle")]},
        headers=auth_headers,
    )
    assert r.status_code == 201
    assert r.json()["added"] == 1

    r = await client.get("/api/players", headers=auth_headers)
    assert [p["id"] for p in r.json()] == [1, 2]

    r = await client.post("/api/players/batch", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Players array is required"


@pytest.mark.asyncio
async def test_search_role_and_team_filters(client, auth_headers):
    await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)
    await client.post(
        "/api/players",
        json=player_payload(2, name="Moon Hyeon-jun", ingame_name="Oner", role="jungle", team_id=10),
        headers=auth_headers,
    )
    await client.post(
        "/api/players",
        json=player_payload(3, name="Jeong Ji-hoon", ingame_name="Chovy", role="mid", team_id=20),
        headers=auth_headers,
    )

    r = await client.get("/api/players/search/fak", headers=auth_headers)
    assert [p["id"] for p in r.json()] == [1]
    r = await client.get("/api/players/search/hyeon", headers=auth_headers)
    assert [p["id"] for p in r.json()] == [2]

    r = await client.get("/api/players/role/MID", headers=auth_headers)
    assert [p["id"] for p in r.json()] == [1, 3]

    r = await client.get("/api/players/team/10", headers=auth_headers)
    assert [p["player_role"] for p in r.json()] == ["jungle", "mid"]
