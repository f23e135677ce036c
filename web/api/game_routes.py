"""Game API routes: games are private to the user who recorded them."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tracker.models import Game, PlayerPerformance, TeamPerformance, get_async_session
from tracker.services.stats import game_stats
from web.api.validation import validate_game, validate_game_id, validated_body
from web.auth import AuthUser, require_user

logger = logging.getLogger("lolstats.api.games")

router = APIRouter(prefix="/api/games", tags=["games"], dependencies=[Depends(require_user)])


# --- Pydantic schemas ---


class PlayerPerformanceIn(BaseModel):
    player_id: int
    player_name: str
    team_id: Optional[int] = None  # defaults to the side's team_id
    role: str
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    cs: int = 0
    gold: int = 0


class TeamPerformanceIn(BaseModel):
    team_id: int
    team_name: str
    total_kills: int = 0
    total_deaths: int = 0
    total_assists: int = 0
    dragons: int = 0
    barons: int = 0
    towers: int = 0
    result: Literal["win", "loss"]
    players: list[PlayerPerformanceIn]


class GameIn(BaseModel):
    date: Optional[datetime] = None
    duration: float
    patch: str
    teams: list[TeamPerformanceIn]
    mvp_player_id: Optional[int] = None


class PlayerPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player_id: int
    player_name: str
    team_id: int
    role: str
    kills: int
    deaths: int
    assists: int
    cs: int
    gold: int


class TeamPerformanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_id: int
    team_name: str
    total_kills: int
    total_deaths: int
    total_assists: int
    dragons: int
    barons: int
    towers: int
    result: str
    players: list[PlayerPerformanceResponse]


class GameResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: datetime
    duration: float
    patch: str
    mvp_player_id: Optional[int]
    user_id: int
    created_at: datetime
    updated_at: datetime
    teams: list[TeamPerformanceResponse]


class TeamStat(BaseModel):
    team_id: int
    team_name: str
    total_games: int
    wins: int
    win_rate: float


class PlayerStat(BaseModel):
    player_id: int
    player_name: str
    total_games: int
    avg_kills: float
    avg_deaths: float
    avg_assists: float
    kda: float


class GameStatsResponse(BaseModel):
    total_games: int
    team_stats: list[TeamStat]
    top_players: list[PlayerStat]


def _build_teams(teams: list[TeamPerformanceIn]) -> list[TeamPerformance]:
    rows = []
    for slot, side in enumerate(teams):
        rows.append(
            TeamPerformance(
                slot=slot,
                **side.model_dump(exclude={"players"}),
                players=[
                    PlayerPerformance(**{**p.model_dump(), "team_id": p.team_id or side.team_id})
                    for p in side.players
                ],
            )
        )
    return rows


async def _load_game(session: AsyncSession, game_id: int) -> Optional[Game]:
    result = await session.execute(
        select(Game)
        .where(Game.id == game_id)
        .options(selectinload(Game.teams).selectinload(TeamPerformance.players))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _get_owned_game(session: AsyncSession, game_id: int, user: AuthUser, action: str) -> Game:
    """404 if the game does not exist, 403 if someone else recorded it."""
    game = await _load_game(session, game_id)
    if not game:
        raise HTTPException(404, "Game not found")
    if game.user_id != user.id:
        logger.warning("User %d denied %s on game %d", user.id, action, game_id)
        raise HTTPException(status.HTTP_403_FORBIDDEN, f"Not authorized to {action} this game")
    return game


@router.post(
    "",
    response_model=GameResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(validated_body(validate_game))],
)
async def create_game(
    body: GameIn,
    user: AuthUser = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Record a game. The database assigns the next sequential id."""
    game = Game(
        duration=body.duration,
        patch=body.patch,
        mvp_player_id=body.mvp_player_id,
        user_id=user.id,
        teams=_build_teams(body.teams),
    )
    if body.date is not None:
        game.date = body.date
    session.add(game)
    await session.commit()
    logger.info("Game %d recorded by %s", game.id, user.username)
    return await _load_game(session, game.id)


@router.get("", response_model=list[GameResponse])
async def list_games(
    user: AuthUser = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """The caller's games, newest first."""
    result = await session.execute(
        select(Game)
        .where(Game.user_id == user.id)
        .order_by(Game.created_at.desc(), Game.id.desc())
        .options(selectinload(Game.teams).selectinload(TeamPerformance.players))
    )
    return result.scalars().all()


@router.get("/stats", response_model=GameStatsResponse)
async def get_game_stats(
    user: AuthUser = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Game count, team win rates and top 5 players by KDA across the caller's games."""
    return await game_stats(session, user.id)


@router.get("/{game_id}", response_model=GameResponse)
async def get_game(
    game_id: int = Depends(validate_game_id),
    user: AuthUser = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    return await _get_owned_game(session, game_id, user, "access")


@router.put(
    "/{game_id}",
    response_model=GameResponse,
    dependencies=[Depends(validated_body(validate_game))],
)
async def update_game(
    body: GameIn,
    game_id: int = Depends(validate_game_id),
    user: AuthUser = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    """Replace a game's details and both team performances."""
    game = await _get_owned_game(session, game_id, user, "update")
    game.duration = body.duration
    game.patch = body.patch
    game.mvp_player_id = body.mvp_player_id
    if body.date is not None:
        game.date = body.date
    game.teams = _build_teams(body.teams)
    game.updated_at = datetime.now(timezone.utc)
    await session.commit()
    return await _load_game(session, game_id)


@router.delete("/{game_id}")
async def delete_game(
    game_id: int = Depends(validate_game_id),
    user: AuthUser = Depends(require_user),
    session: AsyncSession = Depends(get_async_session),
):
    game = await _get_owned_game(session, game_id, user, "delete")
    await session.delete(game)
    await session.commit()
    logger.info("Game %d deleted by %s", game_id, user.username)
    return {"message": "Game deleted successfully"}
