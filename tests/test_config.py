import pytest

from config import (
    MAX_RESULTS_PER_COMPANY,
    POLL_INTERVAL_MS,
    STATE_FILE_PATH,
    load_settings,
    parse_companies,
)
from exceptions import ConfigError

WEBHOOK = "https://discord.test/api/webhooks/1/abc"


def test_defaults_applied():
    settings = load_settings({"DISCORD_WEBHOOK_URL": WEBHOOK, "COMPANIES": "ACME"})

    assert settings.companies == ("ACME",)
    assert settings.poll_interval_ms == POLL_INTERVAL_MS
    assert settings.max_results == MAX_RESULTS_PER_COMPANY
    assert settings.state_file_path == STATE_FILE_PATH
    assert settings.poll_interval_seconds == 300.0
    assert settings.company_delay_seconds == 0.3


def test_values_read_from_environment():
    settings = load_settings({
        "DISCORD_WEBHOOK_URL": WEBHOOK,
        "COMPANIES": "ACME, Globex Corp",
        "POLL_INTERVAL_MS": "60000",
        "MAX_RESULTS_PER_COMPANY": "25",
        "STATE_FILE_PATH": "/data/state.json",
        "COMPANY_DELAY_MS": "0",
        "LOG_LEVEL": "debug",
    })

    assert settings.companies == ("ACME", "Globex Corp")
    assert settings.poll_interval_ms == 60000
    assert settings.max_results == 25
    assert settings.state_file_path == "/data/state.json"
    assert settings.company_delay_ms == 0
    assert settings.log_level == "DEBUG"


def test_missing_webhook_is_fatal():
    with pytest.raises(ConfigError, match="DISCORD_WEBHOOK_URL"):
        load_settings({"COMPANIES": "ACME"})


@pytest.mark.parametrize("companies", [None, "", " , ,"])
def test_empty_company_list_is_fatal(companies):
    env = {"DISCORD_WEBHOOK_URL": WEBHOOK}
    if companies is not None:
        env["COMPANIES"] = companies
    with pytest.raises(ConfigError, match="COMPANIES"):
        load_settings(env)


@pytest.mark.parametrize("name,value", [
    ("POLL_INTERVAL_MS", "soon"),
    ("POLL_INTERVAL_MS", "0"),
    ("MAX_RESULTS_PER_COMPANY", "-3"),
    ("COMPANY_DELAY_MS", "-1"),
])
def test_invalid_numbers_rejected(name, value):
    with pytest.raises(ConfigError, match=name):
        load_settings({"DISCORD_WEBHOOK_URL": WEBHOOK, "COMPANIES": "ACME", name: value})


def test_parse_companies_strips_and_dedupes():
    assert parse_companies(" ACME ,Globex,, ACME ,Initech ") == ("ACME", "Globex", "Initech")


def test_settings_are_immutable():
    settings = load_settings({"DISCORD_WEBHOOK_URL": WEBHOOK, "COMPANIES": "ACME"})
    with pytest.raises(Exception):
        settings.max_results = 99
