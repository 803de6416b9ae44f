"""
Tests for translator.py.

Covers:
  - build_prompt(): target language and quoted text
  - translate(): provider answer stripped, echoed triple quotes removed
  - translate(): blank input rejected before any provider call
  - translate(): gateway failure propagates
"""
from __future__ import annotations

import pytest

import translator
from providers.base import NoProviderAvailable
from providers.gateway import ProviderGateway

from conftest import make_provider


class TestBuildPrompt:
    def test_contains_target_and_text(self):
        prompt = translator.build_prompt("The Starry Night", "Spanish")
        assert "to Spanish" in prompt
        assert '"""The Starry Night"""' in prompt
        assert "just the translation" in prompt


@pytest.mark.asyncio
class TestTranslate:
    async def test_returns_stripped_text(self):
        p = make_provider("google", text="  La noche estrellada \n")
        result = await translator.translate(ProviderGateway([p]), "The Starry Night", "Spanish")
        assert result == "La noche estrellada"

    async def test_removes_echoed_quotes(self):
        p = make_provider("google", text='"""La noche estrellada"""')
        result = await translator.translate(ProviderGateway([p]), "The Starry Night", "es")
        assert result == "La noche estrellada"

    async def test_text_only_call(self):
        p = make_provider("google", text="Bonjour")
        await translator.translate(ProviderGateway([p]), "Hello", "French")
        assert p.generate.await_args.args[1] is None

    async def test_blank_text_rejected(self):
        p = make_provider("google", text="x")
        with pytest.raises(ValueError, match="text"):
            await translator.translate(ProviderGateway([p]), "   ", "French")
        p.generate.assert_not_awaited()

    async def test_blank_target_rejected(self):
        with pytest.raises(ValueError, match="target"):
            await translator.translate(ProviderGateway([]), "Hello", "")

    async def test_gateway_failure_propagates(self):
        p = make_provider("google", side_effect=Exception("down"))
        with pytest.raises(NoProviderAvailable):
            await translator.translate(ProviderGateway([p]), "Hello", "French")
