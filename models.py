#!/usr/bin/env python3
"""
Data models and type definitions
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional

MAX_RECENT_ERRORS = 10


@dataclass
class AnnouncementRecord:
    """
    One BODACC announcement as returned by the search API

    Only the fields needed for ordering and deduplication are typed;
    everything else stays in the open `fields` mapping.
    """
    record_id: str
    publication_date: Optional[str] = None
    sequence_number: int = 0
    dataset_id: str = ""
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: Any) -> "AnnouncementRecord":
        """Build a record from one entry of the API `records` array, never raising"""
        if not isinstance(raw, dict):
            raw = {}

        fields = raw.get("fields")
        if not isinstance(fields, dict):
            fields = {}

        record_id = raw.get("recordid")
        record_id = str(record_id).strip() if record_id is not None else ""

        publication_date = fields.get("dateparution")
        if publication_date is not None:
            publication_date = str(publication_date)

        dataset_id = raw.get("datasetid")

        return cls(
            record_id=record_id,
            publication_date=publication_date or None,
            sequence_number=_to_int(fields.get("numeroannonce")),
            dataset_id=str(dataset_id) if dataset_id is not None else "",
            fields=fields,
        )


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class SeenSet:
    """Insertion-ordered set of record ids already notified for one company"""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: Dict[str, None] = dict.fromkeys(ids)

    def add(self, record_id: str) -> None:
        self._ids[record_id] = None

    def update(self, ids: Iterable[str]) -> None:
        for record_id in ids:
            self.add(record_id)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def to_list(self) -> List[str]:
        return list(self._ids)


@dataclass
class WatcherState:
    """Persisted watcher state: last save time plus seen ids per company"""
    updated_at: Optional[str] = None
    seen: Dict[str, SeenSet] = field(default_factory=dict)

    def seen_for(self, company: str) -> SeenSet:
        if company not in self.seen:
            self.seen[company] = SeenSet()
        return self.seen[company]


@dataclass
class CycleReport:
    """Outcome of one polling cycle"""
    started_at: str
    notified: Dict[str, int] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)
    persisted: bool = False

    @property
    def total_notified(self) -> int:
        return sum(self.notified.values())


@dataclass
class MonitorStatus:
    """Runtime counters exposed by the status API"""
    is_running: bool = False
    cycle_in_progress: bool = False
    last_check: Optional[str] = None
    cycles_completed: int = 0
    total_notified: int = 0
    last_cycle_new: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)

    def record_error(self, error: str, company: Optional[str] = None) -> None:
        entry = {"timestamp": datetime.now(timezone.utc).isoformat(), "error": error}
        if company:
            entry["company"] = company
        self.errors.append(entry)
        # Keep only last 10 errors
        self.errors = self.errors[-MAX_RECENT_ERRORS:]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "cycle_in_progress": self.cycle_in_progress,
            "last_check": self.last_check,
            "cycles_completed": self.cycles_completed,
            "total_notified": self.total_notified,
            "last_cycle_new": self.last_cycle_new,
            "recent_errors": self.errors[-5:],
        }
