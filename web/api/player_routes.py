"""Player API routes: CRUD, search, batch insert. Team changes keep rosters in step."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import Player, get_async_session
from tracker.services.roster import assign_player, release_player
from web.api.validation import validate_player_id, validate_team_id
from web.auth import AuthUser, require_user

logger = logging.getLogger("lolstats.api.players")

router = APIRouter(prefix="/api/players", tags=["players"], dependencies=[Depends(require_user)])

SEARCH_LIMIT = 10


# --- Pydantic schemas ---


class PlayerHistoryEntry(BaseModel):
    team_id: int
    name: str
    role: str
    start_date: date
    end_date: date


class PlayerCreate(BaseModel):
    id: int = Field(gt=0)
    name: str
    ingame_name: str
    player_role: str
    birthday: date
    team_id: Optional[int] = None
    history: list[PlayerHistoryEntry] = []


class PlayerUpdate(BaseModel):
    name: Optional[str] = None
    ingame_name: Optional[str] = None
    player_role: Optional[str] = None
    birthday: Optional[date] = None
    team_id: Optional[int] = None
    history: Optional[list[PlayerHistoryEntry]] = None


class PlayerBatch(BaseModel):
    players: Optional[list[PlayerCreate]] = None


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    ingame_name: str
    player_role: str
    birthday: date
    team_id: Optional[int]
    history: list[dict]


def _new_player(body: PlayerCreate) -> Player:
    return Player(
        id=body.id,
        name=body.name,
        ingame_name=body.ingame_name,
        player_role=body.player_role,
        birthday=body.birthday,
        team_id=None,
        history=[h.model_dump(mode="json") for h in body.history],
    )


async def _get_player_or_404(session: AsyncSession, player_id: int) -> Player:
    player = await session.get(Player, player_id)
    if not player:
        raise HTTPException(404, "Player not found")
    return player


# --- Queries ---


@router.get("", response_model=list[PlayerResponse])
async def list_players(session: AsyncSession = Depends(get_async_session)):
    """All players, by id."""
    result = await session.execute(select(Player).order_by(Player.id))
    return result.scalars().all()


@router.get("/search/{query}", response_model=list[PlayerResponse])
async def search_players(query: str, session: AsyncSession = Depends(get_async_session)):
    """Case-insensitive match on name or in-game name."""
    pattern = f"%{query}%"
    result = await session.execute(
        select(Player)
        .where(or_(Player.name.ilike(pattern), Player.ingame_name.ilike(pattern)))
        .order_by(Player.id)
        .limit(SEARCH_LIMIT)
    )
    return result.scalars().all()


@router.get("/role/{role}", response_model=list[PlayerResponse])
async def players_by_role(role: str, session: AsyncSession = Depends(get_async_session)):
    result = await session.execute(
        select(Player).where(Player.player_role.ilike(f"%{role}%")).order_by(Player.id)
    )
    return result.scalars().all()


@router.get("/team/{team_id}", response_model=list[PlayerResponse])
async def players_by_team(
    team_id: int = Depends(validate_team_id),
    session: AsyncSession = Depends(get_async_session),
):
    result = await session.execute(
        select(Player).where(Player.team_id == team_id).order_by(Player.player_role, Player.id)
    )
    return result.scalars().all()


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(
    player_id: int = Depends(validate_player_id),
    session: AsyncSession = Depends(get_async_session),
):
    return await _get_player_or_404(session, player_id)


# --- Mutations ---


@router.post("", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED)
async def create_player(body: PlayerCreate, session: AsyncSession = Depends(get_async_session)):
    """Create a player. If team_id names an existing team, the player joins its roster."""
    if await session.get(Player, body.id):
        raise HTTPException(400, f"Player with ID {body.id} already exists")
    player = _new_player(body)
    session.add(player)
    await assign_player(session, player, body.team_id)
    await session.commit()
    await session.refresh(player)
    return player


@router.post("/batch", status_code=status.HTTP_201_CREATED)
async def create_players(body: PlayerBatch, session: AsyncSession = Depends(get_async_session)):
    """Insert players whose ids are not stored yet. Existing ids are skipped."""
    if body.players is None:
        raise HTTPException(400, "Players array is required")
    ids = [p.id for p in body.players]
    result = await session.execute(select(Player.id).where(Player.id.in_(ids)))
    seen = set(result.scalars().all())
    added = 0
    for item in body.players:
        if item.id in seen:
            continue
        seen.add(item.id)
        player = _new_player(item)
        session.add(player)
        await assign_player(session, player, item.team_id)
        added += 1
    await session.commit()
    if added:
        logger.info("%d players have been added", added)
    else:
        logger.info("All players already exist")
    return {"message": "Players added successfully", "added": added}


@router.put("/{player_id}", response_model=PlayerResponse)
async def update_player(
    body: PlayerUpdate,
    player_id: int = Depends(validate_player_id),
    session: AsyncSession = Depends(get_async_session),
):
    """Update a player. A new team_id moves the player between rosters in the same commit."""
    player = await _get_player_or_404(session, player_id)
    updates = body.model_dump(exclude_unset=True)
    if "team_id" in updates:
        team_id = updates.pop("team_id")
        if team_id != player.team_id:
            await assign_player(session, player, team_id)
    if "history" in updates:
        updates["history"] = [h.model_dump(mode="json") for h in body.history or []]
    for key, value in updates.items():
        if value is not None:
            setattr(player, key, value)
    await session.commit()
    await session.refresh(player)
    return player


@router.delete("/{player_id}")
async def delete_player(
    player_id: int = Depends(validate_player_id),
    session: AsyncSession = Depends(get_async_session),
    user: AuthUser = Depends(require_user),
):
    """Delete a player, taking them off their team's roster first."""
    player = await _get_player_or_404(session, player_id)
    await release_player(session, player)
    await session.delete(player)
    await session.commit()
    logger.info("Player %d deleted by %s", player_id, user.username)
    return {"message": "Player deleted successfully"}
