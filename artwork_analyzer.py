"""
artwork_analyzer.py — turn a photo into ArtworkMetadata.

The canonical home of ArtworkMetadata. The vision call itself goes through
the provider gateway; this module owns the prompt and the parsing rules.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass

from providers.gateway import ProviderGateway

logger = logging.getLogger(__name__)


class MetadataParseError(ValueError):
    """The provider answer could not be read as an artwork JSON object."""


ARTWORK_PROMPT = """Analyze this artwork image and extract the following information in JSON format:
{
  "title": "artwork title or 'Unknown' if not identifiable",
  "artist": "artist name or 'Unknown'",
  "style": "art style or period",
  "period": "historical period or era",
  "description": "brief description of what you see",
  "confidence": "high/medium/low - confidence in identification"
}

If you recognize a famous artwork (like Mona Lisa, Starry Night, etc), use the actual title.
If it's a generic artwork or not identifiable, provide descriptive keywords.
Respond ONLY with valid JSON, no additional text."""

METADATA_DEFAULTS = {
    "title":       "Unknown Artwork",
    "artist":      "Unknown Artist",
    "style":       "Contemporary",
    "period":      "Modern",
    "description": "An artwork",
    "confidence":  "medium",
}

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class ArtworkMetadata:
    """What the vision model thinks the photo shows."""
    title: str
    artist: str
    style: str
    period: str
    description: str
    confidence: str       # high | medium | low (anything else is treated as low)

    def to_dict(self) -> dict:
        return asdict(self)


def extract_json_block(raw: str) -> str:
    """Return the inside of a ``` / ```json fence if there is one, else the text."""
    match = _FENCE_RE.search(raw)
    if match:
        return match.group(1).strip()
    return raw.strip()


def _field_text(value, default: str) -> str:
    """
    Text for one metadata field. Lists of names are joined with spaces,
    numbers are kept as written; objects, booleans and empties get the default.
    """
    if isinstance(value, str):
        return value or default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        parts = [_field_text(v, "") for v in value if not isinstance(v, (list, dict))]
        return " ".join(p for p in parts if p.strip()) or default
    return default


def parse_metadata(raw: str) -> ArtworkMetadata:
    """
    Parse a provider answer into ArtworkMetadata, filling defaults for any
    field that is missing, null or empty.
    Raises MetadataParseError when the answer is not a JSON object.
    """
    text = extract_json_block(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("Non-JSON vision response: %s", raw[:300])
        raise MetadataParseError(f"JSON parse error: {exc}") from exc

    if not isinstance(data, dict):
        raise MetadataParseError(f"Expected a JSON object, got {type(data).__name__}")

    fields = {}
    for key, default in METADATA_DEFAULTS.items():
        value = data.get(key)
        fields[key] = _field_text(value, default)
    return ArtworkMetadata(**fields)


async def analyse_artwork_image(gateway: ProviderGateway, image_b64: str) -> ArtworkMetadata:
    """
    Ask the vision providers to identify the artwork in image_b64
    (plain base64, data-URL prefix already removed).

    NoProviderAvailable and MetadataParseError propagate to the caller.
    """
    response = await gateway.generate(ARTWORK_PROMPT, image_b64)
    logger.debug("[%s] Raw vision response: %s", response.provider_name, response.text[:500])

    metadata = parse_metadata(response.text)
    logger.info(
        "[%s] Identified '%s' by %s (style=%s, confidence=%s)",
        response.provider_name, metadata.title, metadata.artist,
        metadata.style, metadata.confidence,
    )
    return metadata
