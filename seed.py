"""
seed.py — load artworks into the catalog database.

Usage:
    python seed.py                 # bundled sample collection
    python seed.py artworks.json   # a JSON list of artwork objects

Each object needs at least an id ("id", "artworkId" or "_id") and a title;
artist, description, period, style, year/yearCreated and image_url are
optional. Re-running with the same ids updates rows in place.
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Mapping

import config

# .env may set DATA_DIR; load it before database.py computes its paths
config.load_settings()

import database as db  # noqa: E402
from catalog.base import CatalogEntry  # noqa: E402

logger = logging.getLogger(__name__)

SAMPLE_ARTWORKS: list[dict] = [
    {
        "id": "starry-night",
        "title": "The Starry Night",
        "artist": "Vincent van Gogh",
        "year": 1889,
        "description": "A swirling night sky over a small French village. "
                       "One of the most recognizable paintings in art history.",
        "period": "Post-Impressionism",
    },
    {
        "id": "iris-painting",
        "title": "Irises",
        "artist": "Vincent van Gogh",
        "year": 1890,
        "description": "A vibrant painting of purple irises. Created during van Gogh's stay "
                       "in Saint-Paul-de-Mausole asylum.",
        "period": "Post-Impressionism",
    },
    {
        "id": "sunflowers",
        "title": "Sunflowers",
        "artist": "Vincent van Gogh",
        "year": 1888,
        "description": "A series of still life paintings depicting sunflowers in a vase. "
                       "A symbol of joy and hope.",
        "period": "Post-Impressionism",
    },
    {
        "id": "persistence-of-memory",
        "title": "The Persistence of Memory",
        "artist": "Salvador Dalí",
        "year": 1931,
        "description": "Surrealist masterpiece featuring melting clocks. "
                       "Questions the nature of time itself.",
        "period": "Surrealism",
    },
    {
        "id": "girl-with-pearl",
        "title": "Girl with a Pearl Earring",
        "artist": "Johannes Vermeer",
        "year": 1665,
        "description": "Iconic portrait with mysterious lighting and exotic turban.",
        "period": "Dutch Golden Age",
    },
]


def load_records(path: Path) -> list[dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of artworks")
    return data


async def seed_artworks(records: Iterable[Mapping]) -> int:
    """Upsert every record with an id and a title. Returns how many were written."""
    await db.init_db()
    written = 0
    for record in records:
        entry = CatalogEntry.from_record(record)
        if not entry.id or not entry.title:
            logger.warning("Skipping artwork without id/title: %r", dict(record))
            continue
        await db.upsert_artwork(entry)
        written += 1
    logger.info("Seeded %d artworks into %s", written, db.DB_PATH)
    return written


def main() -> None:
    logging.basicConfig(format="%(asctime)s [%(levelname)s] %(name)s: %(message)s", level=logging.INFO)
    records = load_records(Path(sys.argv[1])) if len(sys.argv) > 1 else SAMPLE_ARTWORKS
    asyncio.run(seed_artworks(records))


if __name__ == "__main__":
    main()
