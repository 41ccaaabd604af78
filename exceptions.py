#!/usr/bin/env python3
"""
Error types raised by the watcher
"""

from typing import Optional

EXCERPT_LENGTH = 500


class WatcherError(Exception):
    """Base class for watcher errors"""


class ConfigError(WatcherError):
    """Required configuration is missing or invalid (fatal at startup)"""


class _HttpServiceError(WatcherError):
    service = "HTTP service"

    def __init__(self, status_code: Optional[int], body: str = "", reason: str = ""):
        self.status_code = status_code
        self.body = (body or "")[:EXCERPT_LENGTH]
        self.reason = reason
        if status_code is None:
            message = f"{self.service} error: {reason}"
        else:
            message = f"{self.service} error: {status_code} {reason}".rstrip()
            if self.body:
                message += f" – {self.body}"
        super().__init__(message)


class SourceUnavailable(_HttpServiceError):
    """The BODACC search API did not answer with a usable response"""
    service = "Bodacc fetch"


class SinkUnavailable(_HttpServiceError):
    """The Discord webhook rejected a message or could not be reached"""
    service = "Discord webhook"
