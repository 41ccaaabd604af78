#!/usr/bin/env python3
"""
Amendment Sub-document Handler
Handles: fields.modificationsgenerales -> general amendment details
"""

import logging
from typing import Any, Dict, List, Optional

from .base import parse_json_maybe, text

logger = logging.getLogger(__name__)


class ModificationsSection:
    """Extracts the amendment description of a modification notice"""

    def __init__(self):
        self.parsed = 0
        self.failures = 0

    def reset(self):
        """Reset counters for a new batch"""
        self.parsed = 0
        self.failures = 0

    def extract_modifications(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raw = fields.get("modificationsgenerales")
        if not raw:
            return None

        modifications = parse_json_maybe(raw)
        if modifications is None:
            self.failures += 1
            return None

        self.parsed += 1
        return modifications

    @staticmethod
    def description_lines(modifications: Optional[Dict[str, Any]]) -> List[str]:
        descriptif = text((modifications or {}).get("descriptif"))
        if not descriptif:
            return []
        return [f"**Modif. :** {descriptif}"]

    def get_stats(self) -> Dict[str, int]:
        return {"parsed": self.parsed, "failures": self.failures}
