"""Team model."""
from __future__ import annotations

from datetime import date

from sqlalchemy import JSON, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base


class Team(Base):
    """Team with its current roster of player ids."""

    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    ingame_name: Mapped[str] = mapped_column(String(16), nullable=False)  # tag, e.g. T1, G2
    found_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Player ids; not enforced against the players table. Reassign the list to persist changes.
    current_players: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # [{player_id, name, role, start_date, end_date}]
    player_history: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
