"""
Anthropic provider — Claude messages API.

Claude makes a useful fallback for artwork recognition: different training
data, and it is good at reading wall labels and signatures in the photo.
"""
from __future__ import annotations

import logging
from typing import Optional

import anthropic

from providers.base import TextProvider, decode_image, detect_mime

logger = logging.getLogger(__name__)


class AnthropicProvider(TextProvider):

    def __init__(self, api_key: str, model: str = "claude-3-haiku-20240307"):
        self.name = "anthropic"
        self.model_id = model
        self._client = anthropic.AsyncAnthropic(api_key=api_key)

    async def generate(self, prompt: str, image_b64: Optional[str] = None) -> str:
        content: list[dict] = []
        if image_b64:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": detect_mime(decode_image(image_b64)),
                    "data": image_b64,
                },
            })
        content.append({"type": "text", "text": prompt})

        message = await self._client.messages.create(
            model=self.model_id,
            max_tokens=1024,
            messages=[{"role": "user", "content": content}],
        )
        # Concatenate text blocks; tool/other block types are ignored
        return "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
