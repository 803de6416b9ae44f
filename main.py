"""
main.py — Single entry point.

Runs the recognition API in one asyncio event loop — no threads, no
subprocesses.

Architecture:
  asyncio event loop
    └── aiohttp web server
          ├── Recognizer  → ProviderGateway (vision providers, in priority order)
          │               → SqliteCatalog   (artworks table, sample collection as fallback)
          │               → analytics       (recognition_events, background)
          ├── translator, chat → ProviderGateway
          └── analytics summary → recognition_events
"""
import asyncio
import logging
import signal
import sys

import config

# Settings are read once, before database.py computes its DATA_DIR paths
settings = config.load_settings()
settings.data_dir.mkdir(parents=True, exist_ok=True)

logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    level=logging.INFO,
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(str(settings.data_dir / "server.log"), encoding="utf-8"),
    ],
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


async def run() -> None:
    import analytics
    import database as _db
    from catalog.sqlite_catalog import SqliteCatalog
    from catalog.static_catalog import StaticCatalog
    from providers.gateway import build_gateway
    from recognizer import Recognizer
    from seed import SAMPLE_ARTWORKS
    from server import build_web_app, start_server

    # ── Database bootstrap (must happen before anything else) ─────────────────
    try:
        await _db.init_db()
        logger.info("Database ready at %s (%d artworks)", _db.DB_PATH, await _db.artwork_count())
    except Exception as exc:
        logger.critical("FATAL: database init failed: %s", exc, exc_info=True)
        raise

    gateway = build_gateway(settings)
    logger.info("Provider order: %s", " → ".join(gateway.provider_names) or "none")

    catalog = SqliteCatalog(fallback=StaticCatalog.from_records(SAMPLE_ARTWORKS))
    recognizer = Recognizer(gateway, catalog, analytics_sink=_db.log_recognition_event)
    app = build_web_app(recognizer, gateway, catalog, stats_source=_db.get_recognition_stats)
    runner = await start_server(app, settings)

    stop_event = asyncio.Event()

    def _stop(*_):
        logger.info("Shutdown signal received.")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _stop)
        except (NotImplementedError, RuntimeError):
            # Windows doesn't support add_signal_handler for all signals
            pass

    logger.info("✅ Server is running. Press Ctrl+C to stop.")
    try:
        await stop_event.wait()
    finally:
        logger.info("Shutting down…")
        await runner.cleanup()
        await analytics.drain()

    logger.info("Goodbye.")


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
