"""Environment-driven settings for the CLI and the HTTP service."""
import os
from dataclasses import dataclass

from math_calendar.db import DEFAULT_DB_PATH

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_URL = "http://localhost:3001"
DEFAULT_PORT = 3001
DEFAULT_TIMEOUT = 30

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class Settings:
    gemini_api_key: str = ""
    gemini_model: str = DEFAULT_MODEL
    gemini_timeout: int = DEFAULT_TIMEOUT
    db_path: str = DEFAULT_DB_PATH
    api_url: str = DEFAULT_API_URL
    minimal_api: bool = False
    port: int = DEFAULT_PORT

    @property
    def gemini_enabled(self) -> bool:
        return bool(self.gemini_api_key)


def _int(value: str | None, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def load_settings(env: dict | None = None) -> Settings:
    if env is None:
        env = os.environ
    return Settings(
        gemini_api_key=(env.get("GEMINI_API_KEY") or "").strip(),
        gemini_model=env.get("GEMINI_MODEL") or DEFAULT_MODEL,
        gemini_timeout=_int(env.get("GEMINI_TIMEOUT"), DEFAULT_TIMEOUT),
        db_path=os.path.expanduser(env.get("MATH_CALENDAR_DB") or DEFAULT_DB_PATH),
        api_url=env.get("MATH_CALENDAR_API_URL") or DEFAULT_API_URL,
        minimal_api=(env.get("MATH_CALENDAR_MINIMAL_API") or "").strip().lower() in _TRUTHY,
        port=_int(env.get("PORT"), DEFAULT_PORT),
    )
