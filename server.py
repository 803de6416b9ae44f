"""
server.py — HTTP API for the museum companion frontend.

Runs as an aiohttp web server in the asyncio event loop started by main.py.

Endpoints:
  POST /api/images/recognize  → identify an artwork from a photo
                                body: {"imageBase64": "..."}  (data-URL prefix allowed)
                                header: X-Session-Id (optional, for analytics)
  POST /api/translate         → {"text": "...", "target": "French"} → {"translated": "..."}
  POST /api/ai-chat           → {"message": "...", "history": [...]} → {"reply": "..."}
  GET  /api/analytics/summary → recognition totals, unique sessions, top artworks
  GET  /health                → plain-text health check (for uptime monitors / nginx)

Responses never contain provider names or raw provider errors; those are
only logged.
"""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from aiohttp import web

from catalog.base import CatalogStore
from config import Settings
from providers.gateway import ProviderGateway
from recognizer import NoMatch, RecognitionFailed, Recognizer, strip_data_url_prefix
import chat
import translator

logger = logging.getLogger(__name__)

RECOGNIZER = web.AppKey("recognizer", Recognizer)
GATEWAY    = web.AppKey("gateway", ProviderGateway)
CATALOG    = web.AppKey("catalog", CatalogStore)
STATS      = web.AppKey("stats", object)

StatsSource = Callable[[], Awaitable[dict]]

NO_MATCH_HINT = "Try scanning a different angle or a clearer image"


async def _json_body(request: web.Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# ── Request handlers ───────────────────────────────────────────────────────────

async def handle_recognize(request: web.Request) -> web.Response:
    body = await _json_body(request)
    image = body.get("imageBase64")
    if isinstance(image, str):
        image = strip_data_url_prefix(image).strip()
    if not image or not isinstance(image, str):
        return web.json_response({"error": "imageBase64 is required"}, status=400)

    recognizer = request.app[RECOGNIZER]
    try:
        outcome = await recognizer.recognize(
            image,
            session_id=request.headers.get("X-Session-Id"),
        )
    except RecognitionFailed:
        # Cause already logged by the recognizer
        return web.json_response({"error": "Image recognition failed"}, status=500)

    if isinstance(outcome, NoMatch):
        return web.json_response(
            {
                "error": "No matching artwork found",
                "metadata": outcome.metadata.to_dict(),
                "suggestions": NO_MATCH_HINT,
            },
            status=404,
        )

    top = outcome.top_match
    return web.json_response({
        "success":    True,
        "artwork":    top.to_dict(),
        "metadata":   outcome.metadata.to_dict(),
        "allMatches": [m.to_dict() for m in outcome.all_matches],
        "matchScore": top.match_score,
    })


async def handle_translate(request: web.Request) -> web.Response:
    body = await _json_body(request)
    text, target = body.get("text"), body.get("target")
    if not text or not target:
        return web.json_response({"error": "Missing text or target language."}, status=400)

    try:
        translated = await translator.translate(request.app[GATEWAY], str(text), str(target))
    except Exception as exc:
        logger.error("Translate error: %s", exc)
        return web.json_response({"error": "Failed to translate text."}, status=500)
    return web.json_response({"translated": translated})


async def handle_chat(request: web.Request) -> web.Response:
    body = await _json_body(request)
    message = body.get("message")
    if not message or not isinstance(message, str) or not message.strip():
        return web.json_response({"error": "Missing message in request body."}, status=400)
    history = body.get("history")
    if not isinstance(history, list):
        history = []

    try:
        reply = await chat.chat(request.app[GATEWAY], message, history)
    except Exception as exc:
        logger.error("AI chat error: %s", exc)
        return web.json_response({"error": "Failed to get AI response."}, status=500)
    return web.json_response({"reply": reply})


async def handle_stats(request: web.Request) -> web.Response:
    """Recognition totals and most-recognized artworks."""
    source = request.app[STATS]
    if source is None:
        return web.json_response({"error": "Analytics not configured."}, status=503)
    try:
        summary = await source()
    except Exception as exc:
        logger.error("Analytics summary error: %s", exc)
        return web.json_response({"error": "Failed to load analytics."}, status=500)
    return web.json_response(summary)


async def handle_health(request: web.Request) -> web.Response:
    """Health check — returns 200 OK. Use with uptime monitors."""
    total = len(await request.app[CATALOG].list_all())
    return web.Response(
        text=f"OK — {total} artworks in catalog",
        content_type="text/plain",
    )


# ── App factory ────────────────────────────────────────────────────────────────

def build_web_app(
    recognizer: Recognizer,
    gateway: ProviderGateway,
    catalog: CatalogStore,
    stats_source: Optional[StatsSource] = None,
) -> web.Application:
    app = web.Application(client_max_size=20 * 1024 * 1024)   # phone photos as base64
    app[RECOGNIZER] = recognizer
    app[GATEWAY] = gateway
    app[CATALOG] = catalog
    app[STATS] = stats_source
    app.router.add_post("/api/images/recognize", handle_recognize)
    app.router.add_post("/api/translate",        handle_translate)
    app.router.add_post("/api/ai-chat",          handle_chat)
    app.router.add_get("/api/analytics/summary", handle_stats)
    app.router.add_get("/health",                handle_health)
    return app


async def start_server(app: web.Application, settings: Settings) -> web.AppRunner:
    """Start the web server. Returns runner so caller can shut it down cleanly."""
    runner = web.AppRunner(app, access_log=logger)
    await runner.setup()
    site = web.TCPSite(runner, settings.server_host, settings.server_port)
    await site.start()
    logger.info("🖼  API listening on %s:%d", settings.server_host, settings.server_port)
    return runner
