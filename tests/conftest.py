"""
Shared pytest fixtures.

Every test that touches the database gets a clean temporary DATA_DIR via the
`tmp_data_dir` fixture so tests are fully isolated from each other and from
the real museum.db. Provider and catalog fakes used across test modules
live here too.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# ── Make the project root importable without installing the package ────────────
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from catalog.base import CatalogEntry           # noqa: E402
from providers.base import TextProvider          # noqa: E402


@pytest.fixture(autouse=True)
def tmp_data_dir(tmp_path, monkeypatch):
    """
    Redirect DATA_DIR to a fresh tmp directory for every test.
    This gives each test a clean SQLite file and prevents cross-test pollution.
    """
    data = tmp_path / "data"
    data.mkdir()
    monkeypatch.setenv("DATA_DIR", str(data))

    # Patch the module-level DB_PATH that was already computed at import time
    import database
    monkeypatch.setattr(database, "DB_PATH", str(data / "museum.db"))
    monkeypatch.setattr(database, "_DATA_DIR", data)

    # Also reset the internal lock so tests don't share state
    import asyncio
    monkeypatch.setattr(database, "_lock", asyncio.Lock())

    yield data


# ── Fakes ──────────────────────────────────────────────────────────────────────

def make_provider(
    name: str,
    model: str = "model",
    text: Optional[str] = None,
    side_effect=None,
) -> TextProvider:
    """A TextProvider mock whose generate() returns `text` or raises `side_effect`."""
    p = MagicMock(spec=TextProvider)
    p.name = name
    p.model_id = model
    p.full_name = f"{name}/{model}"
    p.generate = AsyncMock(return_value=text, side_effect=side_effect)
    return p


def metadata_json(**overrides) -> str:
    data = {
        "title": "Starry Night",
        "artist": "Vincent van Gogh",
        "style": "Post-Impressionism",
        "period": "Late 19th century",
        "description": "a swirling night sky",
        "confidence": "high",
    }
    data.update(overrides)
    return json.dumps(data)


def make_entry(**kwargs) -> CatalogEntry:
    defaults = dict(
        id="starry-night",
        title="The Starry Night",
        artist="Vincent van Gogh",
        description="a night scene with stars",
        period="Post-Impressionism",
    )
    defaults.update(kwargs)
    return CatalogEntry(**defaults)
