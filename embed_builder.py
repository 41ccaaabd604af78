#!/usr/bin/env python3
"""
Embed Builder
Turns BODACC records into Discord embeds using the sub-document handlers
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from config import BODACC_SITE_URL
from models import AnnouncementRecord
from subdocuments import (
    PLACEHOLDER,
    DepotSection,
    ModificationsSection,
    PersonneSection,
    first_text,
)

logger = logging.getLogger(__name__)

# Discord embed limits
TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096
FIELD_VALUE_LIMIT = 1024


def truncate(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return value[:limit - 1] + "…"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class EmbedBuilder:
    """
    Builds Discord embeds from announcement records
    Missing or malformed data degrades to placeholders, never to an exception
    """

    def __init__(self, site_url: str = BODACC_SITE_URL, clock: Optional[Callable[[], str]] = None):
        self.site_url = site_url
        self.clock = clock or _utc_now_iso

        self.personne_handler = PersonneSection()
        self.depot_handler = DepotSection()
        self.modifications_handler = ModificationsSection()

    def build_embed(self, record: AnnouncementRecord) -> Dict[str, Any]:
        """
        Build one embed

        Args:
            record: Announcement record

        Returns:
            Embed dictionary (title, url, description, timestamp, fields, footer)
        """
        f = record.fields if isinstance(record.fields, dict) else {}

        # 1. Registered person (name, head office, registry fallbacks)
        personne = self.personne_handler.extract_personne(f)

        # 2. Title and link
        denomination = first_text(f.get("commercant"), PersonneSection.denomination(personne))
        family = first_text(f.get("familleavis_lib"), default="Annonce")
        title = truncate(f"{denomination} — {family}", TITLE_LIMIT)
        url = first_text(f.get("url_complete"), default=self.site_url)

        # 3. Display fields
        city = first_text(f.get("ville"), PersonneSection.city(personne))
        postal_code = first_text(f.get("cp"), PersonneSection.postal_code(personne))
        registry = first_text(f.get("registre"), PersonneSection.registry_number(personne))
        notice_type = first_text(f.get("publicationavis_facette"), f.get("typeavis_lib"), f.get("typeavis"))
        department = f"{first_text(f.get('departement_nom_officiel'))} ({first_text(f.get('numerodepartement'))})"

        # 4. Description from amendment and deposit details
        modifications = self.modifications_handler.extract_modifications(f)
        depot = self.depot_handler.extract_depot(f)
        lines = ModificationsSection.description_lines(modifications) + DepotSection.description_lines(depot)

        embed = {
            "title": title,
            "url": url,
            "timestamp": self.clock(),
            "fields": [
                self._field("Type / Publication", notice_type),
                self._field("Date parution", first_text(f.get("dateparution"))),
                self._field("Ville / CP", f"{city} {postal_code}"),
                self._field("Tribunal", first_text(f.get("tribunal"))),
                self._field("Registre / RCS", registry),
                self._field("Département", department),
            ],
            "footer": {"text": f"BODACC • dataset: {record.dataset_id or PLACEHOLDER}"},
        }
        if lines:
            embed["description"] = truncate("\n".join(lines), DESCRIPTION_LIMIT)
        return embed

    @staticmethod
    def _field(name: str, value: str) -> Dict[str, Any]:
        return {"name": name, "value": truncate(value or PLACEHOLDER, FIELD_VALUE_LIMIT), "inline": True}

    def build_embeds(self, records: List[AnnouncementRecord]) -> List[Dict[str, Any]]:
        """
        Build embeds for a batch of records, keeping their order

        Args:
            records: Records to format

        Returns:
            List of embeds, one per record
        """
        self.personne_handler.reset()
        self.depot_handler.reset()
        self.modifications_handler.reset()

        embeds = [self.build_embed(record) for record in records]

        stats = self.get_stats()
        if stats["failures"]:
            logger.warning(f"⚠️ {stats['failures']} sub-document(s) could not be parsed, placeholders used")
        logger.debug(f"Built {len(embeds)} embeds: {stats}")
        return embeds

    def get_stats(self) -> Dict[str, int]:
        """
        Get parse statistics from all sub-document handlers

        Returns:
            Dictionary with parsed/failure totals
        """
        handlers = (self.personne_handler, self.depot_handler, self.modifications_handler)
        return {
            "parsed": sum(h.get_stats()["parsed"] for h in handlers),
            "failures": sum(h.get_stats()["failures"] for h in handlers),
        }


# === Convenience function ===
def build_embed(record: AnnouncementRecord) -> Dict[str, Any]:
    """Build a single embed with a fresh EmbedBuilder"""
    return EmbedBuilder().build_embed(record)
