"""Configuration for the LoL stats tracker."""
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{Path(__file__).parent / 'lolstats.db'}",
)

# HTTP server
PORT = int(os.getenv("PORT", "5000"))


# Allowed frontend origins (comma-separated). Empty means any origin.
def _parse_origins(value: str) -> list[str]:
    origins = [x.strip().rstrip("/") for x in value.split(",") if x.strip()]
    return origins or ["*"]


FRONTEND_URL = os.getenv("FRONTEND_URL", "")
ALLOWED_ORIGINS = _parse_origins(FRONTEND_URL)

# Web auth
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production-use-long-random-string")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_HOURS = 2

# Directory with teams.json / players.json imported on first start (disabled when empty)
SEED_DATA_DIR = os.getenv("SEED_DATA_DIR", "")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
