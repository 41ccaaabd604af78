#!/usr/bin/env python3
"""
BODACC Watcher - Entry point

Usage:
    python3 main.py             # Status API + background monitoring
    python3 main.py --no-api    # Background monitoring only
    python3 main.py --once      # Single polling cycle, then exit
"""

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager, suppress
from fastapi import FastAPI

from config import API_TITLE, API_DESCRIPTION, API_VERSION, LOG_FORMAT, Settings, load_settings
from exceptions import ConfigError
from monitor import BodaccWatcher, monitor_and_process
from api_endpoints import root, get_status, start_monitoring, stop_monitoring, process_now, get_stats, start_background_monitor

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(settings.log_file),
            logging.StreamHandler()
        ]
    )


def create_app(watcher: BodaccWatcher, auto_start: bool = True) -> FastAPI:
    """
    Build the FastAPI app around a watcher

    Args:
        watcher: Watcher driven by the routes
        auto_start: Start the monitor loop on application startup
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        log_banner(watcher.settings)
        if auto_start:
            logger.info("🔄 Auto-starting monitoring...")
            start_background_monitor(app)

        yield

        # Shutdown
        watcher.status.is_running = False
        task = app.state.monitor_task
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        logger.info("=" * 70)
        logger.info(f"🛑 {API_TITLE} Stopped")
        logger.info(f"Total announcements sent: {watcher.status.total_notified}")
        logger.info("=" * 70)

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan
    )
    app.state.watcher = watcher
    app.state.monitor_task = None

    # === Register Routes ===
    app.add_api_route("/", root, methods=["GET"])
    app.add_api_route("/status", get_status, methods=["GET"])
    app.add_api_route("/start", start_monitoring, methods=["POST"])
    app.add_api_route("/stop", stop_monitoring, methods=["POST"])
    app.add_api_route("/process-now", process_now, methods=["POST"])
    app.add_api_route("/stats", get_stats, methods=["GET"])

    return app


def log_banner(settings: Settings) -> None:
    logger.info("=" * 70)
    logger.info(f"🚀 {API_TITLE} Started")
    logger.info("=" * 70)
    logger.info(f"Companies: {', '.join(settings.companies)}")
    logger.info(f"Poll Interval: {settings.poll_interval_ms} ms")
    logger.info(f"Max Results Per Company: {settings.max_results}")
    logger.info(f"State File: {settings.state_file_path}")
    logger.info("=" * 70)


async def run_headless(watcher: BodaccWatcher) -> None:
    log_banner(watcher.settings)
    watcher.status.is_running = True
    await monitor_and_process(watcher)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=API_DESCRIPTION)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--once", action="store_true", help="Run a single polling cycle and exit")
    mode.add_argument("--no-api", action="store_true", help="Run the monitor loop without the status API")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"❌ {e}")
        return 1

    try:
        setup_logging(settings)
    except OSError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"❌ Cannot open log file {settings.log_file}: {e}")
        return 1

    watcher = BodaccWatcher.from_settings(settings)

    if args.once:
        log_banner(settings)
        watcher.run_cycle()
        return 0

    if args.no_api:
        try:
            asyncio.run(run_headless(watcher))
        except KeyboardInterrupt:
            logger.info("🛑 Interrupted")
        return 0

    import uvicorn
    uvicorn.run(create_app(watcher), host=settings.api_host, port=settings.api_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
