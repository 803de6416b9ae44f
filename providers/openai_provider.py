"""
OpenAI provider — chat completions with an optional inline image.

gpt-4o-mini is the default: vision-capable and roughly 30x cheaper than
gpt-4o for this kind of short JSON answer.
"""
from __future__ import annotations

import logging
from typing import Optional

from openai import AsyncOpenAI

from providers.base import TextProvider, decode_image, detect_mime

logger = logging.getLogger(__name__)


def build_messages(prompt: str, image_b64: Optional[str]) -> list[dict]:
    """User message in the OpenAI content-parts format (shared with OpenRouter)."""
    if not image_b64:
        return [{"role": "user", "content": prompt}]
    mime = detect_mime(decode_image(image_b64))
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime};base64,{image_b64}", "detail": "high"},
                },
            ],
        }
    ]


class OpenAIProvider(TextProvider):

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        self.name = "openai"
        self.model_id = model
        self._client = AsyncOpenAI(api_key=api_key)

    async def generate(self, prompt: str, image_b64: Optional[str] = None) -> str:
        response = await self._client.chat.completions.create(
            model=self.model_id,
            max_tokens=1024,
            temperature=0,
            messages=build_messages(prompt, image_b64),
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
