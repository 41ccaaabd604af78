#!/usr/bin/env python3
"""
Configuration settings for BODACC Watcher
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from exceptions import ConfigError

# === BODACC Configuration ===
BODACC_API_URL = "https://www.bodacc.fr/api/records/1.0/search/"
BODACC_DATASET = "annonces-commerciales"
BODACC_SITE_URL = "https://www.bodacc.fr/"

# === Discord Configuration ===
WEBHOOK_USERNAME = "BODACC Watcher"
WEBHOOK_AVATAR_URL = "https://static.data.gouv.fr/images/2015-07-01/d24a62fce1194aa18e662d696c2faa7b/nbouton_bodacc-500.png"
EMBEDS_PER_MESSAGE = 10  # Discord rejects more than 10 embeds per message

# === Monitoring Configuration ===
POLL_INTERVAL_MS = 300000  # 5 minutes
MAX_RESULTS_PER_COMPANY = 10
COMPANY_DELAY_MS = 300  # Pause between two companies within a cycle
REQUEST_TIMEOUT = 30

# === File Output Configuration ===
STATE_FILE_PATH = "bodacc_seen_multi.json"

# === API Configuration ===
API_HOST = "0.0.0.0"
API_PORT = 8006
API_TITLE = "BODACC Watcher API"
API_DESCRIPTION = "Polls BODACC for tracked companies and pushes new announcements to Discord"
API_VERSION = "1.0.0"

# === Logging Configuration ===
LOG_FILE = "bodacc_watcher.log"
LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


@dataclass(frozen=True)
class Settings:
    """Immutable process configuration, built once at startup"""
    webhook_url: str
    companies: Tuple[str, ...]
    poll_interval_ms: int = POLL_INTERVAL_MS
    max_results: int = MAX_RESULTS_PER_COMPANY
    state_file_path: str = STATE_FILE_PATH
    bodacc_api_url: str = BODACC_API_URL
    company_delay_ms: int = COMPANY_DELAY_MS
    request_timeout: int = REQUEST_TIMEOUT
    webhook_username: str = WEBHOOK_USERNAME
    webhook_avatar_url: str = WEBHOOK_AVATAR_URL
    api_host: str = API_HOST
    api_port: int = API_PORT
    log_file: str = LOG_FILE
    log_level: str = LOG_LEVEL

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    @property
    def company_delay_seconds(self) -> float:
        return self.company_delay_ms / 1000.0


def parse_companies(raw: Optional[str]) -> Tuple[str, ...]:
    """
    Split the comma separated COMPANIES value

    Entries are stripped, empty ones dropped and duplicates removed while
    keeping the order of first occurrence.
    """
    companies = []
    for part in (raw or "").split(","):
        name = part.strip()
        if name and name not in companies:
            companies.append(name)
    return tuple(companies)


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment

    Args:
        environ: Mapping to read from. Defaults to os.environ after loading .env

    Returns:
        Settings instance

    Raises:
        ConfigError: when the webhook URL or the company list is missing,
            or a numeric value is invalid
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    webhook_url = (environ.get("DISCORD_WEBHOOK_URL") or "").strip()
    if not webhook_url:
        raise ConfigError("Missing environment variable: DISCORD_WEBHOOK_URL")

    companies = parse_companies(environ.get("COMPANIES"))
    if not companies:
        raise ConfigError("No company configured in COMPANIES")

    return Settings(
        webhook_url=webhook_url,
        companies=companies,
        poll_interval_ms=_positive_int(environ, "POLL_INTERVAL_MS", POLL_INTERVAL_MS),
        max_results=_positive_int(environ, "MAX_RESULTS_PER_COMPANY", MAX_RESULTS_PER_COMPANY),
        state_file_path=environ.get("STATE_FILE_PATH") or STATE_FILE_PATH,
        bodacc_api_url=environ.get("BODACC_API_URL") or BODACC_API_URL,
        company_delay_ms=_non_negative_delay(environ),
        request_timeout=_positive_int(environ, "REQUEST_TIMEOUT", REQUEST_TIMEOUT),
        webhook_username=environ.get("WEBHOOK_USERNAME") or WEBHOOK_USERNAME,
        webhook_avatar_url=environ.get("WEBHOOK_AVATAR_URL") or WEBHOOK_AVATAR_URL,
        api_host=environ.get("API_HOST") or API_HOST,
        api_port=_positive_int(environ, "API_PORT", API_PORT),
        log_file=environ.get("LOG_FILE") or LOG_FILE,
        log_level=(environ.get("LOG_LEVEL") or LOG_LEVEL).upper(),
    )


def _non_negative_delay(env: Mapping[str, str]) -> int:
    # 0 disables the throttle, so it is allowed here
    raw = env.get("COMPANY_DELAY_MS")
    if raw is None or not raw.strip():
        return COMPANY_DELAY_MS
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"COMPANY_DELAY_MS must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigError(f"COMPANY_DELAY_MS must not be negative, got {value}")
    return value
