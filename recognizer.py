"""
recognizer.py — the public recognize() entry point.

Flow:
  image (base64) → artwork_analyzer (vision providers) → ArtworkMetadata
                 → catalog.list_all() → artwork_matcher → ranked matches
                 → analytics event (background)

Outcomes:
  RecognitionResult  — at least one catalog entry scored above 0
  NoMatch            — metadata extracted, nothing in the catalog matched
  RecognitionFailed  — raised; empty image, or providers, parsing or the catalog failed
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

import analytics
from artwork_analyzer import ArtworkMetadata, analyse_artwork_image
from artwork_matcher import ScoredMatch, find_matching_artworks
from catalog.base import CatalogStore
from providers.gateway import ProviderGateway

logger = logging.getLogger(__name__)


class RecognitionFailed(RuntimeError):
    """Recognition could not complete. The underlying error is __cause__."""


@dataclass(frozen=True)
class RecognitionResult:
    top_match: ScoredMatch
    all_matches: list[ScoredMatch]
    metadata: ArtworkMetadata


@dataclass(frozen=True)
class NoMatch:
    metadata: ArtworkMetadata


def strip_data_url_prefix(value: str) -> str:
    """'data:image/jpeg;base64,AAAA' → 'AAAA'. Plain base64 is returned unchanged."""
    if "base64," in value:
        return value.split("base64,", 1)[1]
    return value


class Recognizer:

    def __init__(
        self,
        gateway: ProviderGateway,
        catalog: CatalogStore,
        analytics_sink: Optional[analytics.AnalyticsSink] = None,
    ):
        self.gateway = gateway
        self.catalog = catalog
        self.analytics_sink = analytics_sink

    async def recognize(
        self,
        image_b64: str,
        session_id: Optional[str] = None,
    ) -> Union[RecognitionResult, NoMatch]:
        """
        Identify the artwork in image_b64 (data-URL prefix already stripped).

        Raises:
            RecognitionFailed: on an empty image, or any provider, parsing or
                catalog error.
        """
        if not image_b64 or not image_b64.strip():
            logger.error("❌ Image recognition failed: empty image payload")
            raise RecognitionFailed("Image recognition failed: empty image")

        logger.info("📸 Recognition request — image size %.2f KB", len(image_b64) / 1024)
        try:
            metadata = await analyse_artwork_image(self.gateway, image_b64)
            entries = await self.catalog.list_all()
            matches = find_matching_artworks(metadata, entries)
        except Exception as exc:
            logger.error("❌ Image recognition failed: %s", exc, exc_info=True)
            raise RecognitionFailed("Image recognition failed") from exc

        if not matches:
            logger.info("No catalog match for '%s' by %s", metadata.title, metadata.artist)
            return NoMatch(metadata=metadata)

        top = matches[0]
        for i, m in enumerate(matches[:3], start=1):
            logger.info("   Match #%d: %s by %s (score %d, id %s)",
                        i, m.entry.title, m.entry.artist, m.match_score, m.entry.id)

        if self.analytics_sink is not None:
            analytics.dispatch(
                self.analytics_sink,
                analytics.RecognitionEvent(
                    artwork_id=top.entry.id, metadata=metadata, session_id=session_id,
                ),
            )

        return RecognitionResult(top_match=top, all_matches=matches, metadata=metadata)
