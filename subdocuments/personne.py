#!/usr/bin/env python3
"""
Person Sub-document Handler
Handles: fields.listepersonnes -> {"personne": {...}}
"""

import logging
from typing import Any, Dict, Optional

from .base import dig, parse_json_maybe, text

logger = logging.getLogger(__name__)


class PersonneSection:
    """
    Extracts the registered person or company from `listepersonnes`
    Supplies fallbacks for name, head office address and registry number
    """

    def __init__(self):
        self.parsed = 0
        self.failures = 0

    def reset(self):
        """Reset counters for a new batch"""
        self.parsed = 0
        self.failures = 0

    def extract_personne(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Extract the person block from a record

        Args:
            fields: Record `fields` mapping

        Returns:
            The `personne` mapping, or None if absent or malformed
        """
        raw = fields.get("listepersonnes")
        if not raw:
            return None

        liste = parse_json_maybe(raw)
        if liste is None:
            self.failures += 1
            return None

        personne = liste.get("personne")
        # Several persons come back as a list; the first one is the main party
        if isinstance(personne, list):
            personne = next((p for p in personne if isinstance(p, dict)), None)
        if not isinstance(personne, dict):
            return None

        self.parsed += 1
        return personne

    @staticmethod
    def denomination(personne: Optional[Dict[str, Any]]) -> str:
        return text(dig(personne, "denomination")) or text(dig(personne, "nom"))

    @staticmethod
    def city(personne: Optional[Dict[str, Any]]) -> str:
        return text(dig(personne, "adresseSiegeSocial", "ville"))

    @staticmethod
    def postal_code(personne: Optional[Dict[str, Any]]) -> str:
        return text(dig(personne, "adresseSiegeSocial", "codePostal"))

    @staticmethod
    def registry_number(personne: Optional[Dict[str, Any]]) -> str:
        return text(dig(personne, "numeroImmatriculation", "numeroIdentification"))

    def get_stats(self) -> Dict[str, int]:
        return {"parsed": self.parsed, "failures": self.failures}
