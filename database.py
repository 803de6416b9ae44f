"""
database.py — async SQLite persistence via aiosqlite.

Tables:
  artworks            — the museum catalog the recognizer matches against
  recognition_events  — one row per successful image recognition (analytics)

The DB file is created automatically on first run.
"""
from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiosqlite

from catalog.base import CatalogEntry

logger = logging.getLogger(__name__)

# Store the DB in a dedicated data/ directory so Docker volume mounts work
# correctly (mount ./data:/app/data) and the file survives container restarts.
_DATA_DIR = Path(os.getenv("DATA_DIR", "data"))
_DATA_DIR.mkdir(parents=True, exist_ok=True)

DB_PATH = str(_DATA_DIR / "museum.db")
_lock = asyncio.Lock()          # serialise schema creation


# ── Schema ────────────────────────────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS artworks (
    id          TEXT    PRIMARY KEY,
    title       TEXT    NOT NULL,
    artist      TEXT    NOT NULL DEFAULT '',
    description TEXT    NOT NULL DEFAULT '',
    period      TEXT    NOT NULL DEFAULT '',
    style       TEXT    NOT NULL DEFAULT '',
    year        INTEGER,
    image_url   TEXT,
    created_at  TEXT    NOT NULL
);

-- Written fire-and-forget by analytics.dispatch(); never read on the request path
CREATE TABLE IF NOT EXISTS recognition_events (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    artwork_id    TEXT    NOT NULL,
    session_id    TEXT,
    meta_title    TEXT    NOT NULL DEFAULT '',
    meta_artist   TEXT    NOT NULL DEFAULT '',
    confidence    TEXT    NOT NULL DEFAULT '',
    recognized_at TEXT    NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_recognition_artwork ON recognition_events (artwork_id);
CREATE INDEX IF NOT EXISTS idx_recognition_at      ON recognition_events (recognized_at);
"""


async def init_db() -> None:
    """Create tables if they don't exist. Safe to call multiple times."""
    async with _lock:
        async with aiosqlite.connect(DB_PATH) as db:
            await db.executescript(_SCHEMA)
            await db.commit()
    logger.info("Database initialised at %s", DB_PATH)


# ── Artwork operations ────────────────────────────────────────────────────────

async def upsert_artwork(entry: CatalogEntry) -> None:
    """Insert an artwork, or overwrite the existing row with the same id."""
    if not entry.id:
        raise ValueError("Artwork id is required.")
    now = datetime.now(timezone.utc).isoformat()
    async with aiosqlite.connect(DB_PATH) as db:
        await db.execute(
            """INSERT INTO artworks
               (id, title, artist, description, period, style, year, image_url, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                   title = excluded.title,
                   artist = excluded.artist,
                   description = excluded.description,
                   period = excluded.period,
                   style = excluded.style,
                   year = excluded.year,
                   image_url = excluded.image_url""",
            (entry.id, entry.title, entry.artist, entry.description, entry.period,
             entry.style, entry.year, entry.image_url, now),
        )
        await db.commit()


async def get_all_artworks() -> list[CatalogEntry]:
    """Return every artwork in insertion order."""
    async with aiosqlite.connect(DB_PATH) as db:
        db.row_factory = aiosqlite.Row
        async with db.execute("SELECT * FROM artworks ORDER BY rowid") as cursor:
            rows = await cursor.fetchall()
    return [CatalogEntry.from_record(dict(r)) for r in rows]


async def artwork_count() -> int:
    async with aiosqlite.connect(DB_PATH) as db:
        async with db.execute("SELECT COUNT(*) FROM artworks") as cursor:
            row = await cursor.fetchone()
    return row[0] if row else 0


# ── Recognition analytics ─────────────────────────────────────────────────────

async def log_recognition_event(event) -> None:
    """Record a RecognitionEvent (see analytics.py)."""
    now = datetime.now(timezone.utc).isoformat()
    async with aiosqlite.connect(DB_PATH) as db:
        await db.execute(
            """INSERT INTO recognition_events
               (artwork_id, session_id, meta_title, meta_artist, confidence, recognized_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (event.artwork_id, event.session_id, event.metadata.title,
             event.metadata.artist, event.metadata.confidence, now),
        )
        await db.commit()


async def get_recognition_stats(top_n: int = 5) -> dict:
    """Summary for operators: totals, distinct sessions, most-recognized artworks."""
    async with aiosqlite.connect(DB_PATH) as db:
        async with db.execute("SELECT COUNT(*) FROM recognition_events") as cur:
            total = (await cur.fetchone())[0]
        async with db.execute(
            "SELECT COUNT(DISTINCT session_id) FROM recognition_events WHERE session_id IS NOT NULL"
        ) as cur:
            sessions = (await cur.fetchone())[0]
        async with db.execute(
            """SELECT artwork_id, COUNT(*) AS n FROM recognition_events
               GROUP BY artwork_id ORDER BY n DESC, artwork_id LIMIT ?""",
            (top_n,),
        ) as cur:
            top = [{"artwork_id": r[0], "count": r[1]} for r in await cur.fetchall()]

    return {
        "total_recognitions": total,
        "unique_sessions":    sessions,
        "top_artworks":       top,
    }
