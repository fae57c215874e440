"""Durable per-device progress: completed days and unlocked badges."""
import json
import logging
import re
import sqlite3

from math_calendar.db import get_connection

logger = logging.getLogger(__name__)

PROGRESS_KEY = "mathCalendarProgress"
BADGE_KEY = "badge-{threshold}"

_DAY_KEY = re.compile(r"(\d{1,2})-(\d{1,2})")


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    try:
        row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
    finally:
        conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> bool:
    """Write one value. Failures are logged and reported as False, never raised."""
    try:
        conn = get_connection(db_path)
        try:
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
                (key, value, value),
            )
            conn.commit()
        finally:
            conn.close()
    except sqlite3.Error as e:
        logger.warning("Could not persist %s: %s", key, e)
        return False
    return True


def day_key(month_id: int, day: int) -> str:
    return f"{month_id}-{day}"


def parse_progress(raw: str | None) -> dict[tuple[int, int], bool]:
    """Decode the stored JSON object. Anything unreadable becomes no progress."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored progress is not valid JSON; starting fresh")
        return {}
    if not isinstance(data, dict):
        logger.warning("Stored progress is not a JSON object; starting fresh")
        return {}
    progress = {}
    for key, value in data.items():
        m = _DAY_KEY.fullmatch(str(key))
        if m and value is True:
            progress[(int(m.group(1)), int(m.group(2)))] = True
    return progress


def dump_progress(progress: dict[tuple[int, int], bool]) -> str:
    return json.dumps({day_key(m, d): True for (m, d), done in sorted(progress.items()) if done})


class ProgressStore:
    """Completed (month, day) pairs, written through to the key/value table on every change."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.progress = self.load_all()
        self.badges: dict[int, bool] = {}

    def load_all(self) -> dict[tuple[int, int], bool]:
        try:
            raw = get_setting(self.db_path, PROGRESS_KEY)
        except sqlite3.Error as e:
            logger.warning("Could not read progress: %s", e)
            return {}
        return parse_progress(raw)

    def get(self, month_id: int, day: int) -> bool:
        return self.progress.get((month_id, day), False)

    def set(self, month_id: int, day: int, value: bool = True) -> None:
        """Mark a day complete. Progress only moves forward."""
        if value is not True:
            raise ValueError("progress can only be marked complete")
        if self.get(month_id, day):
            return
        self.progress[(month_id, day)] = True
        set_setting(self.db_path, PROGRESS_KEY, dump_progress(self.progress))

    def completed_count(self) -> int:
        return sum(1 for done in self.progress.values() if done)

    def has_badge(self, threshold: int) -> bool:
        if threshold not in self.badges:
            try:
                stored = get_setting(self.db_path, BADGE_KEY.format(threshold=threshold))
            except sqlite3.Error as e:
                logger.warning("Could not read badge %s: %s", threshold, e)
                stored = None
            self.badges[threshold] = stored == "true"
        return self.badges[threshold]

    def unlock_badge(self, threshold: int) -> None:
        self.badges[threshold] = True
        set_setting(self.db_path, BADGE_KEY.format(threshold=threshold), "true")
