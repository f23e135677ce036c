"""Player model."""
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import JSON, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tracker.models.base import Base


class Player(Base):
    """Professional player. `id` is the business id supplied on creation and never changes."""

    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    ingame_name: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    player_role: Mapped[str] = mapped_column(String(32), nullable=False)  # top, jungle, mid, adc, support
    birthday: Mapped[date] = mapped_column(Date, nullable=False)
    # Current team; plain column, the team's roster is the other side of the link
    team_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    # [{team_id, name, role, start_date, end_date}]
    history: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
