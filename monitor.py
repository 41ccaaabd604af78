#!/usr/bin/env python3
"""
Polling cycle and background monitoring task
"""

import asyncio
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from bodacc_client import BodaccClient
from config import Settings
from dedup import select_new, sort_records
from discord_client import DiscordNotifier
from embed_builder import EmbedBuilder
from models import CycleReport, MonitorStatus, WatcherState
from state_store import StateStore

logger = logging.getLogger(__name__)


class BodaccWatcher:
    """
    Runs polling cycles: fetch → sort → filter → format → send → remember

    Companies are processed one after another. Ids are only added to the
    seen set once their embeds were accepted by Discord, and the state is
    saved once per cycle whatever happened to individual companies.
    """

    def __init__(self, settings: Settings, source: BodaccClient, notifier: DiscordNotifier,
                 store: StateStore, builder: Optional[EmbedBuilder] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings
        self.source = source
        self.notifier = notifier
        self.store = store
        self.builder = builder or EmbedBuilder()
        self.sleep = sleep
        self.status = MonitorStatus()
        self._cycle_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "BodaccWatcher":
        source = BodaccClient(settings.bodacc_api_url, timeout=settings.request_timeout)
        notifier = DiscordNotifier(
            settings.webhook_url,
            username=settings.webhook_username,
            avatar_url=settings.webhook_avatar_url,
            timeout=settings.request_timeout,
        )
        return cls(settings, source, notifier, StateStore(settings.state_file_path))

    @property
    def busy(self) -> bool:
        return self._cycle_lock.locked()

    def process_company(self, state: WatcherState, company: str) -> int:
        """
        Notify the new announcements of one company

        Args:
            state: In-memory state for the current cycle
            company: Company name

        Returns:
            Number of announcements sent

        Raises:
            SourceUnavailable: if BODACC could not be queried
            SinkUnavailable: if Discord rejected a message; the seen set is left untouched
        """
        records = self.source.fetch_records(company, self.settings.max_results)
        records = sort_records(records)

        seen = state.seen_for(company)
        new_records = select_new(records, seen)
        if not new_records:
            logger.info(f"[{company}] Nothing new.")
            return 0

        embeds = self.builder.build_embeds(new_records)
        self.notifier.deliver(embeds)

        seen.update(r.record_id for r in new_records)
        logger.info(f"[{company}] {len(new_records)} new announcement(s) sent to Discord.")
        return len(new_records)

    def run_cycle(self) -> Optional[CycleReport]:
        """
        Run one pass over every configured company

        Returns:
            CycleReport, or None if another cycle was already running
        """
        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("⏳ A cycle is already running, skipping this one")
            return None

        try:
            self.status.cycle_in_progress = True
            report = CycleReport(started_at=datetime.now(timezone.utc).isoformat())
            self.status.last_check = report.started_at

            state = self.store.load()
            companies = self.settings.companies
            for index, company in enumerate(companies):
                try:
                    report.notified[company] = self.process_company(state, company)
                except Exception as e:
                    logger.error(f"[{company}] ❌ {e}")
                    report.failed[company] = str(e)
                    self.status.record_error(str(e), company=company)

                if index < len(companies) - 1 and self.settings.company_delay_seconds > 0:
                    self.sleep(self.settings.company_delay_seconds)

            report.persisted = self.store.save(state)
            if not report.persisted:
                self.status.record_error(f"Could not save state to {self.store.path}")

            self.status.cycles_completed += 1
            self.status.last_cycle_new = report.total_notified
            self.status.total_notified += report.total_notified
            logger.info(
                f"✅ Cycle done: {report.total_notified} sent, "
                f"{len(report.failed)} failed compan{'y' if len(report.failed) == 1 else 'ies'}"
            )
            return report
        finally:
            self.status.cycle_in_progress = False
            self._cycle_lock.release()


async def monitor_and_process(watcher: BodaccWatcher):
    """
    Background task that runs a cycle every poll interval

    The first cycle starts immediately. Intervals are measured from cycle
    start; a cycle that overruns delays the next one instead of overlapping.
    """
    interval = watcher.settings.poll_interval_seconds
    logger.info(f"🔄 Starting continuous monitoring (every {interval:g}s)...")

    while watcher.status.is_running:
        started = time.monotonic()
        try:
            await asyncio.to_thread(watcher.run_cycle)
        except Exception as e:
            error_msg = f"Error in monitoring loop: {e}"
            logger.exception(error_msg)
            watcher.status.record_error(error_msg)

        if not watcher.status.is_running:
            break

        elapsed = time.monotonic() - started
        await asyncio.sleep(max(0.0, interval - elapsed))

    logger.info("🛑 Monitoring stopped")
