"""
Tests for server.py — HTTP handlers via aiohttp's TestClient.

Covers:
  - POST /api/images/recognize: 400 / 200 / 404 / 500 mapping
  - data-URL prefix stripped before the provider sees the image
  - provider identity and raw errors never leak into responses
  - POST /api/translate: 200 / 400 / 500
  - POST /api/ai-chat: 200 / 400 / 500, history forwarded
  - GET /api/analytics/summary: 200 / 503 / 500
  - GET /health
"""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from aiohttp import test_utils

from catalog.static_catalog import StaticCatalog
from providers.gateway import ProviderGateway
from recognizer import Recognizer
from server import NO_MATCH_HINT, build_web_app

from conftest import make_entry, make_provider, metadata_json


def make_app(provider, entries=None, stats_source=None):
    catalog = StaticCatalog([make_entry()] if entries is None else entries)
    gateway = ProviderGateway([provider])
    return build_web_app(Recognizer(gateway, catalog), gateway, catalog, stats_source=stats_source)


def client_for(app) -> test_utils.TestClient:
    return test_utils.TestClient(test_utils.TestServer(app))


@pytest.mark.asyncio
class TestRecognizeEndpoint:
    async def test_missing_image_is_400(self):
        async with client_for(make_app(make_provider("google"))) as client:
            resp = await client.post("/api/images/recognize", json={})
            assert resp.status == 400
            assert (await resp.json())["error"] == "imageBase64 is required"

    @pytest.mark.parametrize("image", ["data:image/jpeg;base64,", "data:image/png;base64,  "])
    async def test_prefix_only_image_is_400(self, image):
        provider = make_provider("google", text=metadata_json())
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/images/recognize", json={"imageBase64": image})
            assert resp.status == 400
            assert (await resp.json())["error"] == "imageBase64 is required"
        provider.generate.assert_not_awaited()

    async def test_non_json_body_is_400(self):
        async with client_for(make_app(make_provider("google"))) as client:
            resp = await client.post("/api/images/recognize", data="not json")
            assert resp.status == 400

    async def test_match_returns_artwork(self):
        provider = make_provider("google", text=metadata_json())
        async with client_for(make_app(provider)) as client:
            resp = await client.post(
                "/api/images/recognize",
                json={"imageBase64": "data:image/jpeg;base64,aW1n"},
                headers={"X-Session-Id": "sess-1"},
            )
            assert resp.status == 200
            body = await resp.json()

        assert body["success"] is True
        assert body["artwork"]["id"] == "starry-night"
        assert body["artwork"]["matchScore"] == 360
        assert body["matchScore"] == 360
        assert body["metadata"]["title"] == "Starry Night"
        assert len(body["allMatches"]) == 1
        # prefix removed before the vision call
        assert provider.generate.await_args.args[1] == "aW1n"

    async def test_no_match_is_404_with_metadata(self):
        provider = make_provider("google", text=metadata_json())
        async with client_for(make_app(provider, entries=[])) as client:
            resp = await client.post("/api/images/recognize", json={"imageBase64": "aW1n"})
            assert resp.status == 404
            body = await resp.json()

        assert body["error"] == "No matching artwork found"
        assert body["metadata"]["artist"] == "Vincent van Gogh"
        assert body["suggestions"] == NO_MATCH_HINT

    async def test_failure_is_500_without_details(self):
        provider = make_provider("google", side_effect=Exception("secret-key-123 rejected"))
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/images/recognize", json={"imageBase64": "aW1n"})
            assert resp.status == 500
            text = await resp.text()

        assert "Image recognition failed" in text
        assert "secret-key-123" not in text
        assert "google" not in text


@pytest.mark.asyncio
class TestTranslateEndpoint:
    async def test_translates(self):
        provider = make_provider("google", text="Bonjour")
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/translate", json={"text": "Hello", "target": "French"})
            assert resp.status == 200
            assert await resp.json() == {"translated": "Bonjour"}

    async def test_missing_fields_is_400(self):
        async with client_for(make_app(make_provider("google"))) as client:
            resp = await client.post("/api/translate", json={"text": "Hello"})
            assert resp.status == 400

    async def test_provider_failure_is_500(self):
        provider = make_provider("google", side_effect=Exception("down"))
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/translate", json={"text": "Hello", "target": "fr"})
            assert resp.status == 500
            assert (await resp.json())["error"] == "Failed to translate text."


@pytest.mark.asyncio
class TestChatEndpoint:
    async def test_replies(self):
        provider = make_provider("google", text="It was painted in 1889.")
        history = [{"role": "user", "parts": [{"text": "Tell me about Starry Night"}]}]
        async with client_for(make_app(provider)) as client:
            resp = await client.post(
                "/api/ai-chat", json={"message": "When was it painted?", "history": history},
            )
            assert resp.status == 200
            assert await resp.json() == {"reply": "It was painted in 1889."}

        prompt = provider.generate.await_args.args[0]
        assert "Tell me about Starry Night" in prompt
        assert "When was it painted?" in prompt

    async def test_history_optional(self):
        provider = make_provider("google", text="Hello!")
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/ai-chat", json={"message": "Hi", "history": "junk"})
            assert resp.status == 200

    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"message": "   "}, {"message": 5}])
    async def test_missing_message_is_400(self, body):
        provider = make_provider("google", text="x")
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/ai-chat", json=body)
            assert resp.status == 400
            assert (await resp.json())["error"] == "Missing message in request body."
        provider.generate.assert_not_awaited()

    async def test_provider_failure_is_500(self):
        provider = make_provider("google", side_effect=Exception("quota exceeded"))
        async with client_for(make_app(provider)) as client:
            resp = await client.post("/api/ai-chat", json={"message": "Hi"})
            assert resp.status == 500
            text = await resp.text()
        assert "Failed to get AI response." in text
        assert "quota" not in text


@pytest.mark.asyncio
class TestAnalyticsSummaryEndpoint:
    async def test_returns_summary(self):
        summary = {"total_recognitions": 3, "unique_sessions": 2,
                   "top_artworks": [{"artwork_id": "starry-night", "count": 3}]}
        source = AsyncMock(return_value=summary)
        app = make_app(make_provider("google"), stats_source=source)
        async with client_for(app) as client:
            resp = await client.get("/api/analytics/summary")
            assert resp.status == 200
            assert await resp.json() == summary

    async def test_not_configured_is_503(self):
        async with client_for(make_app(make_provider("google"))) as client:
            resp = await client.get("/api/analytics/summary")
            assert resp.status == 503

    async def test_source_failure_is_500(self):
        source = AsyncMock(side_effect=RuntimeError("db locked"))
        app = make_app(make_provider("google"), stats_source=source)
        async with client_for(app) as client:
            resp = await client.get("/api/analytics/summary")
            assert resp.status == 500
            assert "db locked" not in await resp.text()


@pytest.mark.asyncio
class TestHealth:
    async def test_health_reports_catalog_size(self):
        async with client_for(make_app(make_provider("google"))) as client:
            resp = await client.get("/health")
            assert resp.status == 200
            assert await resp.text() == "OK — 1 artworks in catalog"
