import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from lodge_rates.booking.models import Defaulted, Matched
from lodge_rates.booking.transform import UnitTypeTable
from lodge_rates.core.config import (
    DEFAULT_RATES_API_URL,
    get_settings,
    parse_allowed_origins,
)


def _reset_settings_cache():
    try:
        get_settings.cache_clear()
    except AttributeError:
        pass


@pytest.fixture()
def clean_env(monkeypatch):
    for key in (
        "RATES_API_URL",
        "RATES_TIMEOUT",
        "RATES_VERIFY_TLS",
        "UNIT_TYPE_IDS",
        "DEFAULT_UNIT_TYPE_ID",
        "INCLUDE_TRACE",
        "ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(key, raising=False)
    _reset_settings_cache()
    yield monkeypatch
    _reset_settings_cache()


def test_defaults_match_current_upstream(clean_env):
    settings = get_settings()

    assert str(settings.rates_api_url) == DEFAULT_RATES_API_URL
    assert settings.rates_timeout == 30.0
    assert settings.rates_verify_tls is False
    assert settings.include_trace is True
    assert settings.unit_type_ids == {
        "Standard Room": -2147483637,
        "Deluxe Suite": -2147483456,
    }
    assert settings.allowed_origins == ("*",)


def test_environment_overrides(clean_env):
    clean_env.setenv("RATES_VERIFY_TLS", "true")
    clean_env.setenv("RATES_TIMEOUT", "5")
    clean_env.setenv("UNIT_TYPE_IDS", '{"Family Chalet": 42}')
    clean_env.setenv("DEFAULT_UNIT_TYPE_ID", "7")
    clean_env.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")

    settings = get_settings()
    table = UnitTypeTable.from_settings(settings)

    assert settings.rates_verify_tls is True
    assert settings.rates_timeout == 5.0
    assert table.lookup("Family Chalet") == Matched(42)
    assert table.lookup("Standard Room") == Defaulted(7)
    assert settings.allowed_origins == ("https://a.example", "https://b.example")


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, ("*",)),
        ("", ("*",)),
        ("*", ("*",)),
        ('"https://a.example"', ("https://a.example",)),
        ('["https://a.example", " "]', ("https://a.example",)),
        ("https://a.example https://b.example", ("https://a.example", "https://b.example")),
    ],
)
def test_parse_allowed_origins(raw, expected):
    assert parse_allowed_origins(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("'https://a.example', \"https://b.example\"", ("https://a.example", "https://b.example")),
        ("42", ("*",)),
        ("[]", ("*",)),
    ],
)
def test_parse_allowed_origins_edge_cases(raw, expected):
    assert parse_allowed_origins(raw) == expected
