#!/usr/bin/env python3
"""
Discord webhook client operations
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from config import EMBEDS_PER_MESSAGE, REQUEST_TIMEOUT, WEBHOOK_AVATAR_URL, WEBHOOK_USERNAME
from exceptions import SinkUnavailable

logger = logging.getLogger(__name__)


def chunk_embeds(embeds: List[Dict[str, Any]], size: int = EMBEDS_PER_MESSAGE) -> List[List[Dict[str, Any]]]:
    """Split embeds into consecutive batches of at most `size` items"""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [embeds[i:i + size] for i in range(0, len(embeds), size)]


class DiscordNotifier:
    """Posts embeds to a Discord webhook, 10 per message"""

    def __init__(self, webhook_url: str, username: str = WEBHOOK_USERNAME,
                 avatar_url: str = WEBHOOK_AVATAR_URL, timeout: int = REQUEST_TIMEOUT,
                 batch_size: int = EMBEDS_PER_MESSAGE, session: Optional[requests.Session] = None):
        self.webhook_url = webhook_url
        self.username = username
        self.avatar_url = avatar_url
        self.timeout = timeout
        self.batch_size = batch_size
        self.session = session or requests.Session()

    def build_payload(self, embeds: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "username": self.username,
            "avatar_url": self.avatar_url,
            "embeds": embeds,
        }

    def deliver(self, embeds: List[Dict[str, Any]]) -> int:
        """
        Send embeds in order, one request per batch

        Batches already sent stay sent if a later one fails. There is no
        retry here; the next polling cycle retries the whole set.

        Args:
            embeds: Embeds to send, in display order

        Returns:
            Number of messages posted

        Raises:
            SinkUnavailable: on the first failed request
        """
        batches = chunk_embeds(embeds, self.batch_size)
        for number, batch in enumerate(batches, start=1):
            try:
                response = self.session.post(
                    self.webhook_url,
                    headers={"Content-Type": "application/json"},
                    json=self.build_payload(batch),
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                raise SinkUnavailable(None, reason=str(e))

            if not response.ok:
                raise SinkUnavailable(response.status_code, response.text, response.reason or "")

            logger.debug(f"Discord message {number}/{len(batches)} sent ({len(batch)} embeds)")

        return len(batches)
