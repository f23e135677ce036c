"""Import initial teams and players from static JSON files."""
from __future__ import annotations

import json
import logging
import re
from datetime import date
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import Player, Team

logger = logging.getLogger("lolstats.seed")

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

_DATE_FIELDS = {
    Player: ("birthday",),
    Team: ("found_date",),
}


def snake_keys(record: dict) -> dict:
    """Convert camelCase keys (ingameName, foundDate) to the model's snake_case."""
    return {_CAMEL_RE.sub("_", k).lower(): v for k, v in record.items()}


def parse_date(value) -> date:
    """Accept date objects, YYYY-MM-DD or full ISO timestamps."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def build_record(model, record: dict):
    """Instantiate model from a JSON record, ignoring keys it has no column for."""
    fields = snake_keys(record)
    columns = set(model.__table__.columns.keys())
    values = {k: v for k, v in fields.items() if k in columns}
    for key in _DATE_FIELDS.get(model, ()):
        if values.get(key) is not None:
            values[key] = parse_date(values[key])
    for key in ("history", "player_history"):
        if key in values:
            values[key] = [snake_keys(entry) for entry in values[key] or []]
    return model(**values)


def _load(path: Path, key: str) -> list[dict]:
    if not path.exists():
        logger.warning("Seed file %s not found, skipping", path)
        return []
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    return data.get(key) or []


async def _import_collection(session: AsyncSession, model, records: list[dict], label: str) -> int:
    existing = await session.scalar(select(func.count()).select_from(model))
    if existing:
        logger.info("%s already exist, skipping import", label.capitalize())
        return 0
    if not records:
        return 0
    logger.info("Importing %s...", label)
    session.add_all([build_record(model, r) for r in records])
    await session.flush()
    logger.info("%d %s imported successfully", len(records), label)
    return len(records)


async def import_data(session: AsyncSession, data_dir: str | Path) -> dict[str, int]:
    """Import teams.json and players.json into empty tables. Returns counts imported.

    A malformed file or a failed insert is logged and rolled back; nothing is
    imported and the caller keeps running.
    """
    data_dir = Path(data_dir)
    try:
        teams = await _import_collection(session, Team, _load(data_dir / "teams.json", "teams"), "teams")
        players = await _import_collection(session, Player, _load(data_dir / "players.json", "players"), "players")
        await session.commit()
    except (ValueError, TypeError, AttributeError, SQLAlchemyError):
        await session.rollback()
        logger.exception("Error importing data from %s", data_dir)
        return {"teams": 0, "players": 0}
    logger.info("Data import completed")
    return {"teams": teams, "players": players}
