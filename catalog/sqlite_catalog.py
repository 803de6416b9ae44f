"""
SQLite catalog — reads the artworks table through database.py.

An optional fallback store (main.py passes the bundled sample collection)
answers when the database cannot be read or holds no artworks yet, so a
fresh install still has something to match against.
"""
from __future__ import annotations

import logging
from typing import Optional

import database as db
from catalog.base import CatalogEntry, CatalogStore

logger = logging.getLogger(__name__)


class SqliteCatalog(CatalogStore):

    def __init__(self, fallback: Optional[CatalogStore] = None):
        self.fallback = fallback

    @property
    def name(self) -> str:
        return "sqlite"

    async def list_all(self) -> list[CatalogEntry]:
        try:
            entries = await db.get_all_artworks()
        except Exception as exc:
            if self.fallback is None:
                raise
            logger.warning("[%s] Catalog read failed (%s) — using %s fallback",
                           self.name, exc, self.fallback.name)
            return await self.fallback.list_all()

        if not entries and self.fallback is not None:
            logger.warning("[%s] No artworks in database — using %s fallback",
                           self.name, self.fallback.name)
            return await self.fallback.list_all()

        logger.info("[%s] Fetched %d artworks", self.name, len(entries))
        return entries
