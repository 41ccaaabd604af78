#!/usr/bin/env python3
"""
FastAPI route handlers
"""

import asyncio
import logging
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from config import API_TITLE, API_VERSION
from monitor import BodaccWatcher, monitor_and_process

logger = logging.getLogger(__name__)


def _watcher(request: Request) -> BodaccWatcher:
    return request.app.state.watcher


def start_background_monitor(app) -> None:
    """Flag the watcher as running and schedule the monitor loop"""
    watcher: BodaccWatcher = app.state.watcher
    watcher.status.is_running = True
    task = getattr(app.state, "monitor_task", None)
    if task is not None and not task.done():
        task.cancel()
    app.state.monitor_task = asyncio.create_task(monitor_and_process(watcher))


async def root():
    """Root endpoint with API information"""
    return {
        "message": API_TITLE,
        "version": API_VERSION,
        "endpoints": {
            "/status": "Get current monitoring status",
            "/start": "Start continuous monitoring",
            "/stop": "Stop monitoring",
            "/process-now": "Run one polling cycle immediately",
            "/stats": "Get per-company seen counts from the state file"
        }
    }


async def get_status(request: Request):
    """Get current monitoring status"""
    watcher = _watcher(request)
    status = watcher.status.to_dict()
    status["companies"] = list(watcher.settings.companies)
    status["poll_interval_ms"] = watcher.settings.poll_interval_ms
    return status


async def start_monitoring(request: Request):
    """Start continuous monitoring"""
    watcher = _watcher(request)
    if watcher.status.is_running:
        return JSONResponse(
            status_code=400,
            content={"error": "Monitoring is already running"}
        )

    start_background_monitor(request.app)
    logger.info("✅ Monitoring started")
    return {
        "message": "Monitoring started successfully",
        "poll_interval_ms": watcher.settings.poll_interval_ms
    }


async def stop_monitoring(request: Request):
    """Stop monitoring"""
    watcher = _watcher(request)
    if not watcher.status.is_running:
        return JSONResponse(
            status_code=400,
            content={"error": "Monitoring is not running"}
        )

    watcher.status.is_running = False
    logger.info("Monitoring stopped by user request")
    return {
        "message": "Monitoring stopped successfully",
        "total_notified": watcher.status.total_notified
    }


async def process_now(request: Request):
    """Run one polling cycle immediately (manual trigger)"""
    watcher = _watcher(request)
    if watcher.busy:
        raise HTTPException(status_code=409, detail="A polling cycle is already running")

    logger.info("🚀 Manual cycle triggered")
    report = await asyncio.to_thread(watcher.run_cycle)
    if report is None:
        raise HTTPException(status_code=409, detail="A polling cycle is already running")

    return {
        "message": "Cycle completed",
        "notified": report.notified,
        "failed": report.failed,
        "total_notified": report.total_notified,
        "state_saved": report.persisted
    }


async def get_stats(request: Request):
    """Get per-company statistics from the persisted state"""
    watcher = _watcher(request)
    state = await asyncio.to_thread(watcher.store.load)
    return {
        "state_file": watcher.store.path,
        "updated_at": state.updated_at,
        "seen": {company: len(ids) for company, ids in state.seen.items()},
        "monitor": {
            "is_running": watcher.status.is_running,
            "cycles_completed": watcher.status.cycles_completed,
            "total_notified": watcher.status.total_notified,
            "last_check": watcher.status.last_check
        }
    }
