#!/usr/bin/env python3
"""
Deposit Sub-document Handler
Handles: fields.depot -> accounts filing details
"""

import logging
from typing import Any, Dict, List, Optional

from .base import parse_json_maybe, text

logger = logging.getLogger(__name__)


class DepotSection:
    """
    Extracts filing/deposit details (type, closing date, description)
    """

    def __init__(self):
        self.parsed = 0
        self.failures = 0

    def reset(self):
        """Reset counters for a new batch"""
        self.parsed = 0
        self.failures = 0

    def extract_depot(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Extract the deposit block from a record

        Args:
            fields: Record `fields` mapping

        Returns:
            The decoded `depot` mapping, or None if absent or malformed
        """
        raw = fields.get("depot")
        if not raw:
            return None

        depot = parse_json_maybe(raw)
        if depot is None:
            self.failures += 1
            return None

        self.parsed += 1
        return depot

    @staticmethod
    def description_lines(depot: Optional[Dict[str, Any]]) -> List[str]:
        """
        Description lines for a deposit

        Nothing is emitted unless the deposit has a type.
        """
        if not depot:
            return []

        deposit_type = text(depot.get("typeDepot"))
        if not deposit_type:
            return []

        closing_date = text(depot.get("dateCloture"))
        line = f"**Dépôt :** {deposit_type}"
        if closing_date:
            line += f" ({closing_date})"

        lines = [line]
        descriptif = text(depot.get("descriptif"))
        if descriptif:
            lines.append(descriptif)
        return lines

    def get_stats(self) -> Dict[str, int]:
        return {"parsed": self.parsed, "failures": self.failures}
