"""
Google Gemini provider — uses the google-genai SDK.

Default model is gemini-1.5-flash: cheap, fast and good enough at naming
well-known paintings. Any other Gemini model id can be set via GEMINI_MODEL.
"""
from __future__ import annotations

import logging
from typing import Optional

from google import genai
from google.genai import types as genai_types

from providers.base import TextProvider, decode_image, detect_mime

logger = logging.getLogger(__name__)


class GeminiProvider(TextProvider):

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash"):
        self.name     = "google"
        self.model_id = model
        self._client  = genai.Client(api_key=api_key)

    async def generate(self, prompt: str, image_b64: Optional[str] = None) -> str:
        contents: list = []
        if image_b64:
            image_bytes = decode_image(image_b64)
            contents.append(
                genai_types.Part.from_bytes(data=image_bytes, mime_type=detect_mime(image_bytes))
            )
        contents.append(prompt)

        response = await self._client.aio.models.generate_content(
            model=self.model_id,
            contents=contents,
            config=genai_types.GenerateContentConfig(temperature=0, max_output_tokens=1024),
        )
        return response.text or ""
