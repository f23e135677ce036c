"""Database models."""
from tracker.models.base import Base, get_async_session, init_db
from tracker.models.user import User
from tracker.models.player import Player
from tracker.models.team import Team
from tracker.models.game import Game, PlayerPerformance, TeamPerformance

__all__ = [
    "Base",
    "User",
    "Player",
    "Team",
    "Game",
    "TeamPerformance",
    "PlayerPerformance",
    "get_async_session",
    "init_db",
]
