"""Team API routes: CRUD and roster membership."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, PositiveInt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import Player, Team, get_async_session
from tracker.services.roster import assign_player, release_team, remove_from_roster
from web.api.validation import validate_player_id, validate_team, validate_team_id, validated_body
from web.auth import require_user

logger = logging.getLogger("lolstats.api.teams")

router = APIRouter(prefix="/api/teams", tags=["teams"], dependencies=[Depends(require_user)])


# --- Pydantic schemas ---


class TeamHistoryEntry(BaseModel):
    player_id: int
    name: str
    role: str
    start_date: date
    end_date: date


class TeamCreate(BaseModel):
    id: PositiveInt
    name: str
    ingame_name: str
    found_date: date
    current_players: list[PositiveInt]
    player_history: list[TeamHistoryEntry] = []


class TeamUpdate(BaseModel):
    name: Optional[str] = None
    ingame_name: Optional[str] = None
    found_date: Optional[date] = None
    current_players: Optional[list[PositiveInt]] = None
    player_history: Optional[list[TeamHistoryEntry]] = None


class RosterAdd(BaseModel):
    player_id: Optional[int] = None


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    ingame_name: str
    found_date: date
    current_players: list[int]
    player_history: list[dict]


async def _get_team_or_404(session: AsyncSession, team_id: int) -> Team:
    team = await session.get(Team, team_id)
    if not team:
        raise HTTPException(404, "Team not found")
    return team


@router.get("", response_model=list[TeamResponse])
async def list_teams(session: AsyncSession = Depends(get_async_session)):
    result = await session.execute(select(Team).order_by(Team.id))
    return result.scalars().all()


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: int = Depends(validate_team_id),
    session: AsyncSession = Depends(get_async_session),
):
    return await _get_team_or_404(session, team_id)


@router.post(
    "",
    response_model=TeamResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(validated_body(validate_team))],
)
async def create_team(body: TeamCreate, session: AsyncSession = Depends(get_async_session)):
    if await session.get(Team, body.id):
        raise HTTPException(400, f"Team with ID {body.id} already exists")
    team = Team(
        id=body.id,
        name=body.name,
        ingame_name=body.ingame_name,
        found_date=body.found_date,
        current_players=list(dict.fromkeys(body.current_players)),
        player_history=[h.model_dump(mode="json") for h in body.player_history],
    )
    session.add(team)
    await session.commit()
    await session.refresh(team)
    logger.info("Team %s (%d) created", team.name, team.id)
    return team


@router.put("/{team_id}", response_model=TeamResponse)
async def update_team(
    body: TeamUpdate,
    team_id: int = Depends(validate_team_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Partial update. The id itself cannot change."""
    team = await _get_team_or_404(session, team_id)
    updates = body.model_dump(exclude_unset=True)
    if "current_players" in updates and body.current_players is not None:
        updates["current_players"] = list(dict.fromkeys(body.current_players))
    if "player_history" in updates and body.player_history is not None:
        updates["player_history"] = [h.model_dump(mode="json") for h in body.player_history]
    for key, value in updates.items():
        if value is not None:
            setattr(team, key, value)
    await session.commit()
    await session.refresh(team)
    return team


@router.delete("/{team_id}")
async def delete_team(
    team_id: int = Depends(validate_team_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Delete a team. Its players are left without a team."""
    team = await _get_team_or_404(session, team_id)
    await release_team(session, team)
    await session.delete(team)
    await session.commit()
    return {"message": "Team deleted successfully"}


# --- Roster ---


@router.post("/{team_id}/players", response_model=TeamResponse)
async def add_player_to_team(
    body: RosterAdd,
    team_id: int = Depends(validate_team_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Put a player on the roster, moving them off their previous team in the same commit."""
    if body.player_id is None:
        raise HTTPException(400, "Player ID is required")
    team = await _get_team_or_404(session, team_id)
    if body.player_id in team.current_players:
        raise HTTPException(400, "Player is already in this team")
    player = await session.get(Player, body.player_id)
    if not player:
        raise HTTPException(404, "Player not found")
    await assign_player(session, player, team.id)
    await session.commit()
    await session.refresh(team)
    logger.info("Player %d joined team %d", player.id, team.id)
    return team


@router.delete("/{team_id}/players/{player_id}", response_model=TeamResponse)
async def remove_player_from_team(
    team_id: int = Depends(validate_team_id),
    player_id: int = Depends(validate_player_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Take a player off the roster. Removing someone not on it changes nothing."""
    team = await _get_team_or_404(session, team_id)
    team.current_players = remove_from_roster(team.current_players, player_id)
    player = await session.get(Player, player_id)
    if player and player.team_id == team.id:
        player.team_id = None
    await session.commit()
    await session.refresh(team)
    return team
