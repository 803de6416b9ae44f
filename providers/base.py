"""
Shared types and base class for all generation providers.

Every provider answers the same question: given a prompt and (optionally) a
base64-encoded image, return the model's raw text. Prompt building and
response parsing live with the callers (artwork_analyzer, translator).
"""
from __future__ import annotations

import base64
import binascii
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


# ── Errors ─────────────────────────────────────────────────────────────────────

class ProviderError(Exception):
    """Base class for provider-layer failures."""


class NoProviderAvailable(ProviderError):
    """Every configured provider failed, or none are configured."""


# ── Shared result type ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProviderResponse:
    """Text returned by the first provider that answered."""
    text: str
    provider_name: str          # e.g. "google/gemini-1.5-flash"
    latency_ms: int             # wall-clock time for the successful call


# ── Image helpers ──────────────────────────────────────────────────────────────

def decode_image(image_b64: str) -> bytes:
    """Decode a base64 payload (no data-URL prefix). Raises ValueError."""
    try:
        return base64.b64decode(image_b64, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 image payload: {exc}") from exc


def detect_mime(image_bytes: bytes) -> str:
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if image_bytes[:4] == b"GIF8":
        return "image/gif"
    if image_bytes[:4] == b"RIFF":
        return "image/webp"
    return "image/jpeg"


# ── Abstract base ──────────────────────────────────────────────────────────────

class TextProvider(ABC):
    """Base class all generation providers must implement."""

    name: str           # e.g. "openai"
    model_id: str       # e.g. "gpt-4o-mini"

    @abstractmethod
    async def generate(self, prompt: str, image_b64: Optional[str] = None) -> str:
        """Run one generation call. Returns the raw response text (may be empty)."""
        ...

    @property
    def full_name(self) -> str:
        return f"{self.name}/{self.model_id}"
