"""
Provider Gateway — one generate() call, many providers behind it.

Providers are tried strictly in the configured order (PROVIDER_ORDER), one at
a time, so a healthy primary is never billed alongside its fallbacks. Each
attempt is bounded by the gateway timeout. A provider that raises, times out
or returns blank text is logged and skipped; the first non-blank answer wins.

The gateway keeps no state between calls and is safe to share across
concurrent requests.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional, Sequence

from config import ProviderConfig, Settings
from providers.base import NoProviderAvailable, ProviderResponse, TextProvider

logger = logging.getLogger(__name__)


class ProviderGateway:

    def __init__(self, providers: Sequence[TextProvider], timeout: Optional[float] = 30.0):
        self._providers = list(providers)
        self.timeout = timeout

    @property
    def provider_names(self) -> list[str]:
        return [p.full_name for p in self._providers]

    def __len__(self) -> int:
        return len(self._providers)

    async def generate(self, prompt: str, image_b64: Optional[str] = None) -> ProviderResponse:
        """
        Return the text of the first provider that answers.

        Raises:
            NoProviderAvailable: no providers configured, or all of them failed.
        """
        if not self._providers:
            raise NoProviderAvailable("No generation providers configured.")

        for provider in self._providers:
            t0 = time.monotonic()
            try:
                text = await asyncio.wait_for(
                    provider.generate(prompt, image_b64), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                logger.error("[%s] Timed out after %ss", provider.full_name, self.timeout)
                continue
            except Exception as exc:
                logger.error("[%s] Failed: %s", provider.full_name, exc)
                continue

            if not text or not text.strip():
                logger.warning("[%s] Empty response — trying next provider", provider.full_name)
                continue

            latency_ms = int((time.monotonic() - t0) * 1000)
            logger.info("[%s] OK — latency=%dms", provider.full_name, latency_ms)
            return ProviderResponse(text=text, provider_name=provider.full_name, latency_ms=latency_ms)

        raise NoProviderAvailable(
            f"All {len(self._providers)} generation providers failed: {', '.join(self.provider_names)}"
        )


# ── Factory ────────────────────────────────────────────────────────────────────

def _make_provider(cfg: ProviderConfig) -> TextProvider:
    if cfg.name == "google":
        from providers.gemini_provider import GeminiProvider
        return GeminiProvider(cfg.api_key, cfg.model_id)
    if cfg.name == "openai":
        from providers.openai_provider import OpenAIProvider
        return OpenAIProvider(cfg.api_key, cfg.model_id)
    if cfg.name == "anthropic":
        from providers.anthropic_provider import AnthropicProvider
        return AnthropicProvider(cfg.api_key, cfg.model_id)
    if cfg.name == "openrouter":
        from providers.openrouter_provider import OpenRouterProvider
        return OpenRouterProvider(cfg.api_key, cfg.model_id, base_url=cfg.base_url)
    raise ValueError(f"Unknown provider '{cfg.name}'")


def build_providers(settings: Settings) -> list[TextProvider]:
    """
    Instantiate every configured provider that has a key and is enabled,
    preserving the configured priority order.
    """
    providers: list[TextProvider] = []
    for cfg in settings.providers:
        if not cfg.api_key:
            logger.info("Skipped provider %s (no API key)", cfg.name)
            continue
        if not cfg.enabled:
            logger.info("Skipped provider %s (disabled by ENABLE_%s)", cfg.name, cfg.name.upper())
            continue
        try:
            p = _make_provider(cfg)
        except Exception as exc:
            logger.warning("Could not load %s/%s: %s", cfg.name, cfg.model_id, exc)
            continue
        providers.append(p)
        logger.info("Loaded provider: %s", p.full_name)

    if not providers:
        logger.warning(
            "No generation providers available — set GOOGLE_API_KEY, OPENAI_API_KEY, "
            "ANTHROPIC_API_KEY or OPENROUTER_API_KEY"
        )
    return providers


def build_gateway(settings: Settings) -> ProviderGateway:
    return ProviderGateway(build_providers(settings), timeout=settings.provider_timeout)
