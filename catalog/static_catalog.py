"""
In-memory catalog — a fixed list of entries.

main.py uses it with seed.SAMPLE_ARTWORKS as the fallback behind the SQLite
catalog. Tests use it directly.
"""
from __future__ import annotations

from typing import Iterable, Mapping

from catalog.base import CatalogEntry, CatalogStore


class StaticCatalog(CatalogStore):

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries = tuple(entries)

    @classmethod
    def from_records(cls, records: Iterable[Mapping]) -> "StaticCatalog":
        """Build from raw artwork dicts; records without an id or title are dropped."""
        entries = [CatalogEntry.from_record(r) for r in records]
        return cls(e for e in entries if e.id and e.title)

    @property
    def name(self) -> str:
        return "static"

    async def list_all(self) -> list[CatalogEntry]:
        return list(self._entries)
