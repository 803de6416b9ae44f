"""
Abstract base for artwork catalogs.
The recognizer only ever reads the full list; where the artworks come from
(SQLite, a JSON file, a test fixture) is the catalog's business.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    title: str
    artist: str
    description: str
    period: str
    style: str = ""
    year: Optional[int] = None
    image_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CatalogEntry":
        """
        Build an entry from a loosely-shaped dict (DB row, seed JSON).
        Missing or null text fields become "".
        Accepts "id", "artworkId" or "_id" as the identifier.
        """
        def text(key: str) -> str:
            value = record.get(key)
            return str(value) if value is not None else ""

        raw_id = record.get("id") or record.get("artworkId") or record.get("_id") or ""
        year = record.get("year", record.get("yearCreated"))
        try:
            year = int(year) if year not in (None, "") else None
        except (TypeError, ValueError):
            year = None     # free-text dates like "c. 1503"
        return cls(
            id=str(raw_id),
            title=text("title"),
            artist=text("artist"),
            description=text("description"),
            period=text("period"),
            style=text("style"),
            year=year,
            image_url=record.get("image_url") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


class CatalogStore(ABC):
    """All catalogs must implement this interface."""

    @abstractmethod
    async def list_all(self) -> list[CatalogEntry]:
        """Return every artwork in the catalog. Read-only."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable catalog name for logs."""
        ...
