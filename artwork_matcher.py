"""
artwork_matcher.py — rank catalog entries against extracted ArtworkMetadata.

Scoring (all comparisons case-insensitive, additive from 0):

  entry title == metadata title            +100
  else entry title contains metadata title  +50
  entry artist == metadata artist           +80
  entry artist contains metadata artist     +40   (also fires on an exact match)
  entry period contains metadata style      +30
  per keyword in entry description          +10
  per keyword in entry title                +15

Keywords are title, artist, style and every whitespace-separated word of the
description, lowercased, longer than 2 characters, de-duplicated.

The sum is scaled by confidence: high ×1.5, medium ×1.2, anything else ×1.0.
Entries scoring 0 are dropped; the rest are returned best first, ties kept in
catalog order. This is a keyword heuristic, not semantic search: wording
matters.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from artwork_analyzer import ArtworkMetadata
from catalog.base import CatalogEntry

logger = logging.getLogger(__name__)

TITLE_EXACT       = 100
TITLE_PARTIAL     = 50
ARTIST_EXACT      = 80
ARTIST_PARTIAL    = 40
PERIOD_STYLE      = 30
KEYWORD_IN_DESC   = 10
KEYWORD_IN_TITLE  = 15
MIN_KEYWORD_LEN   = 3

CONFIDENCE_MULTIPLIERS = {"high": 1.5, "medium": 1.2}


@dataclass(frozen=True)
class ScoredMatch:
    entry: CatalogEntry
    score: float            # unrounded, used for ordering
    match_score: int        # reported value

    def to_dict(self) -> dict:
        """Entry fields plus matchScore, as sent to the frontend."""
        data = self.entry.to_dict()
        data["matchScore"] = self.match_score
        return data


def confidence_multiplier(confidence: str) -> float:
    return CONFIDENCE_MULTIPLIERS.get(confidence, 1.0)


def round_half_up(value: float) -> int:
    # 22.5 → 23 (round() would give 22)
    return int(math.floor(value + 0.5))


def build_keywords(metadata: ArtworkMetadata) -> list[str]:
    """Lowercased, de-duplicated search keywords in first-seen order."""
    candidates = [metadata.title, metadata.artist, metadata.style]
    candidates += metadata.description.lower().split()

    keywords: list[str] = []
    seen: set[str] = set()
    for term in candidates:
        term = term.lower()
        if len(term) < MIN_KEYWORD_LEN or term in seen:
            continue
        seen.add(term)
        keywords.append(term)
    return keywords


def raw_score(metadata: ArtworkMetadata, entry: CatalogEntry, keywords: Sequence[str]) -> int:
    """Pre-multiplier score of one entry."""
    title = metadata.title.lower()
    artist = metadata.artist.lower()
    style = metadata.style.lower()

    entry_title = entry.title.lower()
    entry_artist = entry.artist.lower()
    entry_description = entry.description.lower()
    entry_period = entry.period.lower()

    score = 0
    if entry_title == title:
        score += TITLE_EXACT
    elif title in entry_title:
        score += TITLE_PARTIAL

    if entry_artist == artist:
        score += ARTIST_EXACT
    if artist in entry_artist:
        score += ARTIST_PARTIAL

    if style in entry_period:
        score += PERIOD_STYLE

    for term in keywords:
        if term in entry_description:
            score += KEYWORD_IN_DESC
        if term in entry_title:
            score += KEYWORD_IN_TITLE
    return score


def score_entry(metadata: ArtworkMetadata, entry: CatalogEntry, keywords: Sequence[str]) -> float:
    return raw_score(metadata, entry, keywords) * confidence_multiplier(metadata.confidence)


def find_matching_artworks(
    metadata: ArtworkMetadata,
    entries: Sequence[CatalogEntry],
) -> list[ScoredMatch]:
    """
    Score every entry and return those with a positive score, best first.
    An empty catalog gives an empty list.
    """
    keywords = build_keywords(metadata)
    logger.debug("Keywords: %s (%d total)", ", ".join(keywords[:8]), len(keywords))

    scored = []
    for entry in entries:
        score = score_entry(metadata, entry, keywords)
        if score > 0:
            scored.append(ScoredMatch(entry=entry, score=score, match_score=round_half_up(score)))

    # stable sort: equal scores keep catalog order
    scored.sort(key=lambda m: m.score, reverse=True)
    logger.info(
        "Matched '%s' against %d artworks → %d candidates", metadata.title, len(entries), len(scored)
    )
    return scored
