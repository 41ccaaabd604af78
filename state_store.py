#!/usr/bin/env python3
"""
Watcher state persistence (seen record ids per company)
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Any, Dict

from models import SeenSet, WatcherState

logger = logging.getLogger(__name__)


class StateStore:
    """
    Loads and saves WatcherState as a JSON document

    File layout:
        {"updatedAt": "<iso timestamp or null>", "seen": {"<company>": ["<recordid>", ...]}}
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> WatcherState:
        """
        Read the persisted state

        Returns:
            WatcherState, empty when the file is missing or unreadable
        """
        if not os.path.exists(self.path):
            logger.info(f"📭 No state file at {self.path}, starting with an empty state")
            return WatcherState()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Could not read state file {self.path}: {e}. Starting with an empty state")
            return WatcherState()

        return self._from_document(raw)

    def _from_document(self, raw: Any) -> WatcherState:
        if not isinstance(raw, dict):
            logger.warning(f"⚠️ Unexpected state document in {self.path}, ignoring it")
            return WatcherState()

        seen = {}
        raw_seen = raw.get("seen") or {}
        if isinstance(raw_seen, dict):
            for company, ids in raw_seen.items():
                if not isinstance(ids, list):
                    logger.warning(f"[{company}] Ignoring malformed seen list in state file")
                    continue
                seen[str(company)] = SeenSet(str(i) for i in ids if i is not None)

        updated_at = raw.get("updatedAt")
        return WatcherState(
            updated_at=str(updated_at) if updated_at else None,
            seen=seen,
        )

    @staticmethod
    def to_document(state: WatcherState) -> Dict[str, Any]:
        return {
            "updatedAt": state.updated_at,
            "seen": {company: ids.to_list() for company, ids in state.seen.items()},
        }

    def save(self, state: WatcherState) -> bool:
        """
        Stamp and persist the state

        The document is written to a temporary file in the same directory
        and moved over the previous one, so an interrupted write leaves the
        last good state readable.

        Returns:
            True if the state was written, False otherwise
        """
        state.updated_at = datetime.now(timezone.utc).isoformat()
        document = self.to_document(state)

        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
            logger.info(f"💾 Saved state to {self.path}")
            return True
        except OSError as e:
            logger.error(f"❌ Error saving state to {self.path}: {e}")
            return False
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
