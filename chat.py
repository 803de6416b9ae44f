"""
chat.py — the museum guide assistant ("ask about this artwork").

Uses the same provider gateway as recognition and translation. Providers are
called with a single prompt, so the conversation history is flattened into a
transcript ahead of the new message.

History items may use the Gemini shape the frontend sends:
    {"role": "user" | "model", "parts": [{"text": "..."}]}
or the simpler {"role": ..., "content": "..."} / {"role": ..., "text": "..."}.
Items without any text are skipped.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from providers.gateway import ProviderGateway

logger = logging.getLogger(__name__)

_SYSTEM = (
    "You are a friendly, knowledgeable museum guide. Answer the visitor's "
    "questions about artworks, artists and art history clearly and concisely."
)

_ROLE_LABELS = {"user": "Visitor", "model": "Guide", "assistant": "Guide"}


def _item_text(item: Any) -> str:
    if not isinstance(item, dict):
        return ""
    parts = item.get("parts")
    if isinstance(parts, list):
        texts = [p.get("text", "") if isinstance(p, dict) else str(p) for p in parts]
        return " ".join(t for t in texts if isinstance(t, str) and t.strip()).strip()
    for key in ("content", "text"):
        value = item.get(key)
        if isinstance(value, str):
            return value.strip()
    return ""


def build_prompt(message: str, history: Optional[Iterable[Any]] = None) -> str:
    lines = [_SYSTEM, ""]
    for item in history or ():
        text = _item_text(item)
        if not text:
            continue
        role = str(item.get("role", "user")).lower()
        lines.append(f"{_ROLE_LABELS.get(role, 'Visitor')}: {text}")
    lines.append(f"Visitor: {message.strip()}")
    lines.append("Guide:")
    return "\n".join(lines)


async def chat(
    gateway: ProviderGateway,
    message: str,
    history: Optional[Iterable[Any]] = None,
) -> str:
    """
    Answer a visitor message, given the earlier turns of the conversation.

    Raises:
        ValueError: message is blank.
        NoProviderAvailable: every provider failed.
    """
    if not message or not message.strip():
        raise ValueError("Missing message in request body.")

    response = await gateway.generate(build_prompt(message, history))
    reply = response.text.strip()
    logger.info("[%s] Chat reply — %d chars", response.provider_name, len(reply))
    return reply
