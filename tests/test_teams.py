"""Tests for team endpoints and roster membership."""
import pytest

from test_players import player_payload, team_payload


@pytest.mark.asyncio
async def test_team_crud(client, auth_headers):
    r = await client.post("/api/teams", json=team_payload(10, current_players=[1, 2]), headers=auth_headers)
    assert r.status_code == 201
    data = r.json()
    assert data["id"] == 10
    assert data["current_players"] == [1, 2]
    assert data["found_date"] == "2004-02-12"

    r = await client.get("/api/teams", headers=auth_headers)
    assert [t["id"] for t in r.json()] == [10]

    r = await client.put("/api/teams/10", json={"name": "SK Telecom T1"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "SK Telecom T1"
    assert r.json()["current_players"] == [1, 2]

    r = await client.delete("/api/teams/10", headers=auth_headers)
    assert r.status_code == 200
    r = await client.get("/api/teams/10", headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Team not found"


@pytest.mark.asyncio
async def test_create_duplicate_team(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    r = await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Team with ID 10 already exists"


@pytest.mark.asyncio
async def test_create_team_validation(client, auth_headers):
    body = team_payload(10)
    del body["ingame_name"]
    r = await client.post("/api/teams", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"].startswith("Missing required fields")

    r = await client.post("/api/teams", json=team_payload(-3), headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "ID must be a positive number."

    body = team_payload(10)
    body["player_history"] = [{"player_id": 1, "name": "Faker"}]
    r = await client.post("/api/teams", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Entry at index 0 in player_history is missing required fields."


@pytest.mark.asyncio
async def test_update_missing_team(client, auth_headers):
    r = await client.put("/api/teams/99", json={"name": "Ghost"}, headers=auth_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_invalid_team_id_path(client, auth_headers):
    r = await client.get("/api/teams/0", headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Team ID must be a positive number."


@pytest.mark.asyncio
async def test_add_player_to_team(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    await client.post("/api/players", json=player_payload(1), headers=auth_headers)

    r = await client.post("/api/teams/10/players", json={"player_id": 1}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["current_players"] == [1]
    player = (await client.get("/api/players/1", headers=auth_headers)).json()
    assert player["team_id"] == 10

    # Rostering someone already on the team is rejected and leaves the roster unchanged
    r = await client.post("/api/teams/10/players", json={"player_id": 1}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Player is already in this team"
    team = (await client.get("/api/teams/10", headers=auth_headers)).json()
    assert team["current_players"] == [1]


@pytest.mark.asyncio
async def test_add_player_moves_from_previous_team(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    await client.post("/api/teams", json=team_payload(20, name="Gen.G", ingame_name="GEN"), headers=auth_headers)
    await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)

    r = await client.post("/api/teams/20/players", json={"player_id": 1}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["current_players"] == [1]
    old = (await client.get("/api/teams/10", headers=auth_headers)).json()
    assert old["current_players"] == []


@pytest.mark.asyncio
async def test_add_player_errors(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)

    r = await client.post("/api/teams/10/players", json={}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Player ID is required"

    r = await client.post("/api/teams/10/players", json={"player_id": 42}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Player not found"

    r = await client.post("/api/teams/99/players", json={"player_id": 42}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Team not found"


@pytest.mark.asyncio
async def test_remove_player_from_team(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)

    r = await client.delete("/api/teams/10/players/1", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["current_players"] == []
    player = (await client.get("/api/players/1", headers=auth_headers)).json()
    assert player["team_id"] is None

    # Removing an id that is not on the roster is a no-op
    r = await client.delete("/api/teams/10/players/1", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["current_players"] == []


@pytest.mark.asyncio
async def test_delete_team_clears_player_team(client, auth_headers):
    await client.post("/api/teams", json=team_payload(10), headers=auth_headers)
    await client.post("/api/players", json=player_payload(1, team_id=10), headers=auth_headers)

    r = await client.delete("/api/teams/10", headers=auth_headers)
    assert r.status_code == 200
    player = (await client.get("/api/players/1", headers=auth_headers)).json()
    assert player["team_id"] is None
