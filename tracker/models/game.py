"""Game and per-game performance models."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Game(Base):
    """Recorded game. Always exactly two TeamPerformance rows, owned by the creating user."""

    __tablename__ = "games"

    # Sequential id assigned by the database
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    duration: Mapped[float] = mapped_column(Float, nullable=False)  # minutes
    patch: Mapped[str] = mapped_column(String(16), nullable=False)
    mvp_player_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="games")
    teams: Mapped[list["TeamPerformance"]] = relationship(
        "TeamPerformance",
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="TeamPerformance.slot",
    )


class TeamPerformance(Base):
    """One side of a game."""

    __tablename__ = "game_teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(ForeignKey("games.id"), nullable=False, index=True)
    slot: Mapped[int] = mapped_column(Integer, nullable=False)  # 0 or 1, request order
    team_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    team_name: Mapped[str] = mapped_column(String(128), nullable=False)
    total_kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_deaths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_assists: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dragons: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    barons: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    towers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    result: Mapped[str] = mapped_column(String(8), nullable=False)  # win, loss

    game: Mapped["Game"] = relationship("Game", back_populates="teams")
    players: Mapped[list["PlayerPerformance"]] = relationship(
        "PlayerPerformance",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="PlayerPerformance.id",
    )


class PlayerPerformance(Base):
    """A player's line in a game."""

    __tablename__ = "game_players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_team_id: Mapped[int] = mapped_column(ForeignKey("game_teams.id"), nullable=False, index=True)
    player_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    player_name: Mapped[str] = mapped_column(String(128), nullable=False)
    team_id: Mapped[int] = mapped_column(Integer, nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    kills: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    deaths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assists: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gold: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    team: Mapped["TeamPerformance"] = relationship("TeamPerformance", back_populates="players")
