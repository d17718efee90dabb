# scripts/seed_watchlist.py
"""
Seed development watchlists.
Run: python scripts/seed_watchlist.py
"""
from __future__ import annotations

import asyncio
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import select
from db.session import get_db
from models.watchlist import Watchlist

SEED_WATCHLISTS = [
    {
        "name": "Malware & Phishing",
        "description": "Known malware families and phishing campaigns",
        "terms": ["malware", "phishing", "trojan"],
    },
    {
        "name": "Data Loss",
        "description": "Large or unexpected outbound transfers",
        "terms": ["exfiltration", "transfer", "upload"],
    },
]


async def seed():
    async for db in get_db():
        for data in SEED_WATCHLISTS:
            stmt = select(Watchlist).where(Watchlist.name == data["name"])
            result = await db.execute(stmt)
            watchlist = result.scalar_one_or_none()

            if watchlist:
                print(f"Watchlist already exists: {watchlist.id} ({watchlist.name})")
                continue

            watchlist = Watchlist(**data)
            db.add(watchlist)
            await db.flush()
            print(f"Created watchlist: {watchlist.id} ({watchlist.name})")

        print("✅ Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
