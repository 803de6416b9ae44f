"""
translator.py — translate guide text for visitors.

Uses the same provider gateway as image recognition, so translation follows
the configured provider order and falls back the same way.
"""
from __future__ import annotations

import logging

from providers.gateway import ProviderGateway

logger = logging.getLogger(__name__)

_TRANSLATE_PROMPT = (
    "Translate the following text to {target} (just the translation, no explanation):\n"
    '"""{text}"""'
)


def build_prompt(text: str, target: str) -> str:
    return _TRANSLATE_PROMPT.format(target=target, text=text)


def _strip_quotes(text: str) -> str:
    # Some models echo the triple-quote wrapper back
    text = text.strip()
    if text.startswith('"""') and text.endswith('"""') and len(text) >= 6:
        text = text[3:-3].strip()
    return text


async def translate(gateway: ProviderGateway, text: str, target: str) -> str:
    """
    Translate text into the target language (a name like "French" or a code like "fr").

    Raises:
        ValueError: text or target is blank.
        NoProviderAvailable: every provider failed.
    """
    if not text or not text.strip():
        raise ValueError("Missing text to translate.")
    if not target or not target.strip():
        raise ValueError("Missing target language.")

    response = await gateway.generate(build_prompt(text, target.strip()))
    translated = _strip_quotes(response.text)
    logger.info("[%s] Translated %d chars → %s", response.provider_name, len(text), target)
    return translated
