#!/usr/bin/env python3
"""
Record ordering and deduplication
Decides which fetched records have not been notified yet
"""

import logging
from typing import Container, List

from models import AnnouncementRecord

logger = logging.getLogger(__name__)


def sort_records(records: List[AnnouncementRecord]) -> List[AnnouncementRecord]:
    """
    Order records newest first

    Publication dates are fixed-width ISO strings, so string comparison is
    enough. Equal dates fall back to the announcement number, highest first.
    The sort is stable: fully equal keys keep their input order.

    Args:
        records: Records as returned by the API

    Returns:
        New sorted list
    """
    return sorted(
        records,
        key=lambda r: (r.publication_date or "", r.sequence_number),
        reverse=True,
    )


def select_new(records: List[AnnouncementRecord], seen: Container[str]) -> List[AnnouncementRecord]:
    """
    Keep records that can be notified

    Args:
        records: Ordered records
        seen: Ids already notified for this company

    Returns:
        Records with a non-empty id not in `seen`, in input order
    """
    new_records = []
    for record in records:
        if not record.record_id:
            logger.debug("Skipping record without recordid")
            continue
        if record.record_id in seen:
            continue
        new_records.append(record)
    return new_records
