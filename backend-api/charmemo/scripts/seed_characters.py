"""
Seed the character catalog from a JSON file

    python -m charmemo.scripts.seed_characters characters.json [--replace]

Each entry: {"name": ..., "icon": ..., "order": ..., "nameEn"?: ..., "nameZh"?: ...}.
Characters are matched by name; existing ones are updated in place.
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from sqlalchemy import delete, select

from charmemo.core.config import get_settings
from charmemo.core.database import create_engine_from_settings, create_session_factory, create_tables
from charmemo.models import Character

logger = logging.getLogger(__name__)


def load_entries(path: Path) -> list:
    entries = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        raise ValueError(f"{path} must contain a JSON list")
    for i, entry in enumerate(entries):
        missing = [k for k in ("name", "icon", "order") if k not in entry]
        if missing:
            raise ValueError(f"entry {i} is missing {', '.join(missing)}")
    return entries


async def seed(session_factory, entries: list, replace: bool = False) -> dict:
    """Insert or update catalog rows; returns counts"""
    counts = {"created": 0, "updated": 0, "deleted": 0}
    async with session_factory() as db:
        if replace:
            result = await db.execute(delete(Character))
            counts["deleted"] = result.rowcount
        rows = await db.execute(select(Character))
        existing = {c.name: c for c in rows.scalars().all()}
        for entry in entries:
            character = existing.get(entry["name"])
            if character is None:
                db.add(
                    Character(
                        name=entry["name"],
                        name_en=entry.get("nameEn"),
                        name_zh=entry.get("nameZh"),
                        icon=entry["icon"],
                        order=int(entry["order"]),
                    )
                )
                counts["created"] += 1
                continue
            character.icon = entry["icon"]
            character.order = int(entry["order"])
            character.name_en = entry.get("nameEn")
            character.name_zh = entry.get("nameZh")
            character.version = character.version + 1
            counts["updated"] += 1
        await db.commit()
    return counts


async def main(path: Path, replace: bool) -> None:
    settings = get_settings()
    engine = create_engine_from_settings(settings)
    try:
        await create_tables(engine)
        counts = await seed(create_session_factory(engine), load_entries(path), replace=replace)
        logger.info(
            f"seeded characters: {counts['created']} created, {counts['updated']} updated, {counts['deleted']} deleted"
        )
    finally:
        await engine.dispose()


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Seed the character catalog")
    parser.add_argument("path", type=Path)
    parser.add_argument("--replace", action="store_true", help="delete the current catalog first")
    args = parser.parse_args()
    asyncio.run(main(args.path, args.replace))
