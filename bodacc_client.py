#!/usr/bin/env python3
"""
BODACC search API client operations
"""

import logging
from typing import List, Optional
from urllib.parse import quote

import requests

from config import BODACC_API_URL, BODACC_DATASET, REQUEST_TIMEOUT
from exceptions import SourceUnavailable
from models import AnnouncementRecord

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves as-is
_URI_COMPONENT_SAFE = "-_.!~*'()"

FACET_PARAMS = (
    "disjunctive.typeavis=true"
    "&disjunctive.familleavis=true"
    "&disjunctive.publicationavis=true"
    "&disjunctive.region_min=true"
    "&disjunctive.nom_dep_min=true"
    "&disjunctive.numerodepartement=true"
)


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_bodacc_url(company: str, max_results: int, base_url: str = BODACC_API_URL) -> str:
    """
    Build the search URL for one company

    The company name goes both in `commercant_search` and inside the
    `#search(commercant,"...")` full text expression.
    """
    name = encode_component(company)
    q = encode_component(f'#search(commercant,"{company}")')
    return (
        f"{base_url}?{FACET_PARAMS}"
        f"&sort=dateparution"
        f"&commercant_search={name}"
        f"&rows={max_results}"
        f"&dataset={BODACC_DATASET}"
        f"&q={q}"
        f"&timezone=Europe%2FBerlin"
        f"&lang=fr"
    )


class BodaccClient:
    """Fetches announcement records for a company name"""

    def __init__(self, base_url: str = BODACC_API_URL, timeout: int = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_records(self, company: str, max_results: int) -> List[AnnouncementRecord]:
        """
        Fetch the latest announcements for a company

        Args:
            company: Company name used as search term
            max_results: Maximum number of records requested

        Returns:
            List of AnnouncementRecord, empty if nothing matched

        Raises:
            SourceUnavailable: on network error, non-2xx status or a non-JSON body
        """
        url = build_bodacc_url(company, max_results, self.base_url)
        logger.debug(f"[{company}] GET {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise SourceUnavailable(None, reason=str(e))

        if not response.ok:
            raise SourceUnavailable(response.status_code, response.text, response.reason or "")

        try:
            data = response.json()
        except ValueError:
            raise SourceUnavailable(response.status_code, response.text, "invalid JSON response")

        raw_records = data.get("records") if isinstance(data, dict) else None
        if not isinstance(raw_records, list):
            return []

        records = [AnnouncementRecord.from_api(raw) for raw in raw_records]
        logger.debug(f"[{company}] Fetched {len(records)} records")
        return records
