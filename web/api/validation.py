"""Request validation run before route handlers.

Each check inspects the raw JSON body (or a path parameter) and raises a 400
HTTPException on the first violated constraint, so the handler never runs on a
rejected request.
"""
from __future__ import annotations

from typing import Any, Callable

from fastapi import HTTPException, Request, status

NUMERIC_PLAYER_FIELDS = ("kills", "deaths", "assists", "cs", "gold")
GAME_RESULTS = ("win", "loss")


def _reject(message: str):
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a stat
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


# --- Auth ---


def validate_login(body: dict) -> None:
    if _missing(body.get("username")) or _missing(body.get("password")):
        _reject("Please provide both username and password.")


def validate_registration(body: dict) -> None:
    if any(_missing(body.get(k)) for k in ("username", "email", "password")):
        _reject("Please provide username, email, and password.")


def validate_forgot_password(body: dict) -> None:
    if _missing(body.get("email")):
        _reject("Please provide an email address.")


# --- Teams ---


def validate_team(body: dict) -> None:
    required = ("id", "name", "ingame_name", "found_date", "current_players")
    if any(_missing(body.get(k)) for k in required):
        _reject(
            "Missing required fields: id, name, ingame_name, found_date, and current_players are required."
        )
    if not _is_positive_int(body["id"]):
        _reject("ID must be a positive number.")
    if not isinstance(body["current_players"], list):
        _reject("current_players must be an array of player IDs.")
    if not all(_is_positive_int(pid) for pid in body["current_players"]):
        _reject("current_players must be an array of player IDs.")
    history = body.get("player_history")
    if history is None:
        return
    if not isinstance(history, list):
        _reject("player_history must be an array.")
    for i, entry in enumerate(history):
        fields = ("player_id", "name", "role", "start_date", "end_date")
        if not isinstance(entry, dict) or any(_missing(entry.get(k)) for k in fields):
            _reject(f"Entry at index {i} in player_history is missing required fields.")


# --- Games ---


def validate_game(body: dict) -> None:
    duration, patch, teams = body.get("duration"), body.get("patch"), body.get("teams")
    if _missing(duration) or _missing(patch) or teams is None:
        _reject("Missing required fields: duration, patch, and teams are required.")
    if not _is_number(duration) or duration <= 0:
        _reject("Duration must be a positive number.")
    if not isinstance(teams, list) or len(teams) != 2:
        _reject("Teams must be an array with exactly 2 teams.")

    for i, team in enumerate(teams):
        if (
            not isinstance(team, dict)
            or not _is_positive_int(team.get("team_id"))
            or any(_missing(team.get(k)) for k in ("team_name", "result"))
            or not isinstance(team.get("players"), list)
        ):
            _reject(
                f"Team at index {i} is missing required fields. "
                "Each team must have team_id, team_name, result, and players."
            )
        if team["result"] not in GAME_RESULTS:
            _reject(f'Team at index {i} has invalid result. Must be "win" or "loss".')
        for j, player in enumerate(team["players"]):
            if (
                not isinstance(player, dict)
                or not _is_positive_int(player.get("player_id"))
                or any(_missing(player.get(k)) for k in ("player_name", "role"))
            ):
                _reject(
                    f"Player at index {j} in team {i} is missing required fields. "
                    "Each player must have player_id, player_name, and role."
                )
            for field in NUMERIC_PLAYER_FIELDS:
                if field in player and not _is_number(player[field]):
                    _reject(f"Player at index {j} in team {i} has invalid {field}. Must be a number.")

    wins = sum(1 for team in teams if team["result"] == "win")
    if wins > 1:
        _reject('Only one team can have a "win" result.')
    if wins == 0:
        _reject('Exactly one team must have a "win" result.')


# --- Path parameters ---


def _positive_id(value: str, label: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = 0
    if parsed <= 0:
        _reject(f"{label} ID must be a positive number.")
    return parsed


def validate_team_id(team_id: str) -> int:
    return _positive_id(team_id, "Team")


def validate_game_id(game_id: str) -> int:
    return _positive_id(game_id, "Game")


def validate_player_id(player_id: str) -> int:
    return _positive_id(player_id, "Player")


def validated_body(check: Callable[[dict], None]):
    """Build a route dependency that runs `check` on the JSON body."""

    async def dependency(request: Request) -> None:
        try:
            body = await request.json()
        except ValueError:
            _reject("Request body must be valid JSON.")
        if not isinstance(body, dict):
            _reject("Request body must be a JSON object.")
        check(body)

    return dependency
