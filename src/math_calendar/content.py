"""Month metadata and daily questions: bundled dataset and read-endpoint hydration."""
import json
import logging
from pathlib import Path

import requests

from math_calendar.errors import ValidationError
from math_calendar.models import DayQuestion, Month

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"


def parse_month(raw: dict) -> Month:
    month_id = int(raw["id"])
    if not 1 <= month_id <= 12:
        raise ValidationError(f"month id must be 1-12, got {month_id}")
    return Month(
        id=month_id,
        name=str(raw["name"]),
        mathematician=str(raw.get("mathematician", "")),
        theme=str(raw.get("theme", "")),
    )


def parse_question(raw: dict) -> DayQuestion:
    """Build a DayQuestion from either long keys or the short t/q/a keys."""
    topic = raw.get("topic", raw.get("t"))
    question = raw.get("question", raw.get("q"))
    answer = raw.get("answer", raw.get("a"))
    choices = raw.get("choices")
    if topic is None or question is None or answer is None or not isinstance(choices, list):
        raise ValueError("question record needs topic, question, choices and answer")
    return DayQuestion(
        topic=str(topic),
        question=str(question),
        choices=tuple(str(c) for c in choices),
        answer=str(answer),
    )


def parse_data(raw: dict) -> dict[int, list[DayQuestion]]:
    data = {}
    for month_key, days in raw.items():
        try:
            month_id = int(month_key)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"bad month key {month_key!r}") from e
        if not 1 <= month_id <= 12:
            raise ValidationError(f"month id must be 1-12, got {month_id}")
        if not isinstance(days, list):
            raise ValidationError(f"month {month_id}: days must be a list")
        parsed = []
        for i, day in enumerate(days, 1):
            try:
                parsed.append(parse_question(day))
            except (ValueError, TypeError, AttributeError) as e:
                raise ValidationError(f"month {month_id} day {i}: {e}") from e
        data[month_id] = parsed
    return data


class ContentStore:
    """Read-only dataset: months in order plus each month's ordered questions."""

    def __init__(self, months: list[Month], data: dict[int, list[DayQuestion]]):
        self.months = sorted(months, key=lambda m: m.id)
        self.data = data

    def get_month(self, month_id: int) -> Month | None:
        for m in self.months:
            if m.id == month_id:
                return m
        return None

    def get_day(self, month_id: int, day: int) -> DayQuestion | None:
        days = self.data.get(month_id) or []
        if day < 1 or day > len(days):
            return None
        return days[day - 1]

    def days_in(self, month_id: int) -> list[DayQuestion]:
        return self.data.get(month_id) or []

    def total_count(self) -> int:
        return sum(len(days) for days in self.data.values())

    def merged(self, months: list[Month] | None = None,
               data: dict[int, list[DayQuestion]] | None = None) -> "ContentStore":
        """Return a new store with the given months/data replacing this one's."""
        new_months = list(self.months)
        if months:
            new_months = months
        new_data = dict(self.data)
        if data:
            new_data.update(data)
        return ContentStore(new_months, new_data)

    def to_payload(self, include_data: bool = True) -> dict:
        payload = {
            "months": [
                {"id": m.id, "name": m.name, "mathematician": m.mathematician, "theme": m.theme}
                for m in self.months
            ],
        }
        if include_data:
            payload["data"] = {
                str(month_id): [
                    {"topic": d.topic, "question": d.question, "choices": list(d.choices), "answer": d.answer}
                    for d in days
                ]
                for month_id, days in sorted(self.data.items())
            }
        return payload


def store_from_payload(payload: dict, fallback: ContentStore) -> ContentStore:
    """Apply a read-endpoint payload over a fallback store. ``data`` is optional."""
    if not isinstance(payload, dict):
        raise ValidationError("content payload must be a JSON object")
    try:
        months = [parse_month(m) for m in payload.get("months") or []]
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"bad month record: {e}") from e
    raw_data = payload.get("data")
    data = parse_data(raw_data) if isinstance(raw_data, dict) else None
    return fallback.merged(months=months, data=data)


def load_bundled_content() -> ContentStore:
    """Load months.json and days.json shipped with the package."""
    months_raw = json.loads((CONTENT_DIR / "months.json").read_text(encoding="utf-8"))
    days_raw = json.loads((CONTENT_DIR / "days.json").read_text(encoding="utf-8"))
    months = [parse_month(m) for m in months_raw["months"]]
    return ContentStore(months, parse_data(days_raw["data"]))


def fetch_content(base_url: str, fallback: ContentStore, timeout: int = 10) -> ContentStore:
    """Hydrate content from ``GET {base_url}/api/months``; keep the fallback on any failure."""
    url = base_url.rstrip("/") + "/api/months"
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        store = store_from_payload(r.json(), fallback)
    except (requests.RequestException, ValueError) as e:
        logger.info("Using bundled data (API not available): %s", e)
        return fallback
    logger.debug("Data hydrated from %s", url)
    return store
