"""
OpenRouter provider — any OpenAI-compatible endpoint behind a bearer key.

OpenRouter (https://openrouter.ai) is the default target, but OPENROUTER_BASE_URL
can point the same client at Groq, a self-hosted vLLM, or any other service
that speaks the chat-completions protocol.

OpenRouter model IDs look like: "openai/gpt-4o-mini", "anthropic/claude-3-haiku",
"google/gemini-flash-1.5", "meta-llama/llama-3.2-90b-vision-instruct".
"""
from __future__ import annotations

import logging
from typing import Optional

import openai

from providers.base import TextProvider
from providers.openai_provider import build_messages

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(TextProvider):
    """Provider for any OpenRouter-hosted (or OpenAI-compatible) model."""

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None):
        self.name     = "openrouter"
        self.model_id = model
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or OPENROUTER_BASE_URL,
            default_headers={"X-Title": "Museum Companion"},
        )

    @property
    def full_name(self) -> str:
        # "openai/gpt-4o-mini" → "openrouter/gpt-4o-mini"
        return f"openrouter/{self.model_id.split('/')[-1]}"

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
