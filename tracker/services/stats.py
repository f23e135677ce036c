"""Per-user game statistics: team win rates and top players by KDA."""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import Game, PlayerPerformance, TeamPerformance

TOP_PLAYERS_LIMIT = 5


def kda(kills: float, deaths: float, assists: float) -> float:
    """(kills + assists) / deaths. With zero deaths the KDA is the kill count."""
    if deaths == 0:
        return float(kills)
    return (kills + assists) / deaths


def win_rate(wins: int, games: int) -> float:
    """Wins as a percentage of games played."""
    if games == 0:
        return 0.0
    return wins / games * 100


def rank_teams(rows: Iterable[dict]) -> list[dict]:
    """Add win_rate to each team row and sort descending. Ties keep input order."""
    teams = []
    for row in rows:
        team = dict(row)
        team["win_rate"] = win_rate(team["wins"], team["total_games"])
        teams.append(team)
    teams.sort(key=lambda t: t["win_rate"], reverse=True)
    return teams


def rank_players(rows: Iterable[dict], limit: int = TOP_PLAYERS_LIMIT) -> list[dict]:
    """Turn per-player totals into averages + KDA, return the top `limit` by KDA. Ties keep input order."""
    players = []
    for row in rows:
        games = row["total_games"]
        players.append({
            "player_id": row["player_id"],
            "player_name": row["player_name"],
            "total_games": games,
            "avg_kills": row["total_kills"] / games,
            "avg_deaths": row["total_deaths"] / games,
            "avg_assists": row["total_assists"] / games,
            "kda": kda(row["total_kills"], row["total_deaths"], row["total_assists"]),
        })
    players.sort(key=lambda p: p["kda"], reverse=True)
    return players[:limit]


async def _first_names(session: AsyncSession, query) -> dict[int, str]:
    """Map id -> name from (id, name) rows, keeping the first name seen."""
    result = await session.execute(query)
    names: dict[int, str] = {}
    for key, name in result.all():
        names.setdefault(key, name)
    return names


async def team_stats(session: AsyncSession, user_id: int) -> list[dict]:
    result = await session.execute(
        select(
            TeamPerformance.team_id,
            func.count().label("total_games"),
            func.sum(case((TeamPerformance.result == "win", 1), else_=0)).label("wins"),
        )
        .join(Game, TeamPerformance.game_id == Game.id)
        .where(Game.user_id == user_id)
        .group_by(TeamPerformance.team_id)
        .order_by(func.min(TeamPerformance.id))
    )
    names = await _first_names(
        session,
        select(TeamPerformance.team_id, TeamPerformance.team_name)
        .join(Game, TeamPerformance.game_id == Game.id)
        .where(Game.user_id == user_id)
        .order_by(TeamPerformance.id),
    )
    rows = [
        {
            "team_id": team_id,
            "team_name": names.get(team_id, ""),
            "total_games": total,
            "wins": int(wins or 0),
        }
        for team_id, total, wins in result.all()
    ]
    return rank_teams(rows)


async def top_players(session: AsyncSession, user_id: int, limit: int = TOP_PLAYERS_LIMIT) -> list[dict]:
    result = await session.execute(
        select(
            PlayerPerformance.player_id,
            func.count().label("total_games"),
            func.sum(PlayerPerformance.kills).label("total_kills"),
            func.sum(PlayerPerformance.deaths).label("total_deaths"),
            func.sum(PlayerPerformance.assists).label("total_assists"),
        )
        .join(TeamPerformance, PlayerPerformance.game_team_id == TeamPerformance.id)
        .join(Game, TeamPerformance.game_id == Game.id)
        .where(Game.user_id == user_id)
        .group_by(PlayerPerformance.player_id)
        .order_by(func.min(PlayerPerformance.id))
    )
    names = await _first_names(
        session,
        select(PlayerPerformance.player_id, PlayerPerformance.player_name)
        .join(TeamPerformance, PlayerPerformance.game_team_id == TeamPerformance.id)
        .join(Game, TeamPerformance.game_id == Game.id)
        .where(Game.user_id == user_id)
        .order_by(PlayerPerformance.id),
    )
    rows = [
        {
            "player_id": player_id,
            "player_name": names.get(player_id, ""),
            "total_games": total,
            "total_kills": kills or 0,
            "total_deaths": deaths or 0,
            "total_assists": assists or 0,
        }
        for player_id, total, kills, deaths, assists in result.all()
    ]
    return rank_players(rows, limit)


async def game_stats(session: AsyncSession, user_id: int) -> dict:
    """Total games, team win rates and top players for one user's games."""
    total = await session.scalar(select(func.count()).select_from(Game).where(Game.user_id == user_id))
    return {
        "total_games": total or 0,
        "team_stats": await team_stats(session, user_id),
        "top_players": await top_players(session, user_id),
    }
