"""Roster bookkeeping: keep Team.current_players and Player.team_id in step.

The async helpers only stage changes on the session; the caller commits once so
the team and player writes land in the same transaction.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import Player, Team


def add_to_roster(roster: list[int], player_id: int) -> list[int]:
    """Return a new roster containing player_id. Already present: unchanged copy."""
    roster = list(roster or [])
    if player_id not in roster:
        roster.append(player_id)
    return roster


def remove_from_roster(roster: list[int], player_id: int) -> list[int]:
    """Return a new roster without player_id. Absent id is a no-op."""
    return [pid for pid in (roster or []) if pid != player_id]


async def assign_player(session: AsyncSession, player: Player, team_id: Optional[int]) -> None:
    """Move a player to team_id (None = no team), updating both rosters."""
    if player.team_id is not None and player.team_id != team_id:
        old_team = await session.get(Team, player.team_id)
        if old_team:
            old_team.current_players = remove_from_roster(old_team.current_players, player.id)
    if team_id is not None:
        new_team = await session.get(Team, team_id)
        if new_team:
            new_team.current_players = add_to_roster(new_team.current_players, player.id)
    player.team_id = team_id


async def release_player(session: AsyncSession, player: Player) -> None:
    """Take a player off their team's roster (before deleting the player)."""
    await assign_player(session, player, None)


async def release_team(session: AsyncSession, team: Team) -> None:
    """Clear team_id on every player still pointing at the team (before deleting the team)."""
    result = await session.execute(select(Player).where(Player.team_id == team.id))
    for player in result.scalars().all():
        player.team_id = None
