"""
Tests for chat.py.

Covers:
  - build_prompt(): guide instructions, history transcript, new message last
  - build_prompt(): Gemini "parts" and plain "content" history shapes, junk skipped
  - chat(): reply stripped, text-only provider call
  - chat(): blank message rejected before any provider call
  - chat(): gateway failure propagates
"""
from __future__ import annotations

import pytest

import chat
from providers.base import NoProviderAvailable
from providers.gateway import ProviderGateway

from conftest import make_provider


class TestBuildPrompt:
    def test_message_without_history(self):
        prompt = chat.build_prompt("Who painted this?")
        assert "museum guide" in prompt
        assert prompt.endswith("Visitor: Who painted this?\nGuide:")

    def test_gemini_history_shape(self):
        history = [
            {"role": "user", "parts": [{"text": "Tell me about Irises"}]},
            {"role": "model", "parts": [{"text": "Van Gogh painted it in 1889."}]},
        ]
        prompt = chat.build_prompt("Where?", history)
        assert "Visitor: Tell me about Irises\nGuide: Van Gogh painted it in 1889.\nVisitor: Where?" in prompt

    def test_content_history_shape(self):
        history = [{"role": "assistant", "content": "Hello, visitor."}]
        assert "Guide: Hello, visitor." in chat.build_prompt("Hi", history)

    def test_items_without_text_skipped(self):
        history = ["junk", {"role": "user"}, {"role": "user", "parts": []}, None]
        prompt = chat.build_prompt("Hi", history)
        assert prompt.count("Visitor:") == 1


@pytest.mark.asyncio
class TestChat:
    async def test_returns_stripped_reply(self):
        p = make_provider("google", text="  Post-Impressionism.\n")
        reply = await chat.chat(ProviderGateway([p]), "What style is it?", [])
        assert reply == "Post-Impressionism."

    async def test_text_only_call(self):
        p = make_provider("google", text="Sure")
        await chat.chat(ProviderGateway([p]), "Hello")
        assert p.generate.await_args.args[1] is None

    async def test_blank_message_rejected(self):
        p = make_provider("google", text="x")
        with pytest.raises(ValueError, match="message"):
            await chat.chat(ProviderGateway([p]), "  ")
        p.generate.assert_not_awaited()

    async def test_gateway_failure_propagates(self):
        p = make_provider("google", side_effect=Exception("down"))
        with pytest.raises(NoProviderAvailable):
            await chat.chat(ProviderGateway([p]), "Hello")
