# tests/test_config.py
from math_calendar.config import DEFAULT_MODEL, load_settings
from math_calendar.db import DEFAULT_DB_PATH


def test_defaults():
    settings = load_settings({})
    assert settings.gemini_api_key == ""
    assert settings.gemini_enabled is False
    assert settings.gemini_model == DEFAULT_MODEL
    assert settings.gemini_timeout == 30
    assert settings.db_path == DEFAULT_DB_PATH
    assert settings.api_url == "http://localhost:3001"
    assert settings.minimal_api is False
    assert settings.port == 3001


def test_overrides():
    settings = load_settings({
        "GEMINI_API_KEY": "  abc  ",
        "GEMINI_MODEL": "gemini-pro",
        "GEMINI_TIMEOUT": "5",
        "MATH_CALENDAR_DB": "/tmp/cal.db",
        "MATH_CALENDAR_API_URL": "http://calendar.test",
        "MATH_CALENDAR_MINIMAL_API": "true",
        "PORT": "8080",
    })
    assert settings.gemini_api_key == "abc"
    assert settings.gemini_enabled is True
    assert settings.gemini_model == "gemini-pro"
    assert settings.gemini_timeout == 5
    assert settings.db_path == "/tmp/cal.db"
    assert settings.api_url == "http://calendar.test"
    assert settings.minimal_api is True
    assert settings.port == 8080


def test_bad_numbers_fall_back():
    settings = load_settings({"PORT": "eighty", "GEMINI_TIMEOUT": ""})
    assert settings.port == 3001
    assert settings.gemini_timeout == 30


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    assert load_settings().gemini_api_key == "from-env"
