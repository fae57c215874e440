from datetime import date

import pytest

from math_calendar.content import ContentStore, load_bundled_content
from math_calendar.db import init_db
from math_calendar.models import DayQuestion, Month
from math_calendar.progress import ProgressStore
from math_calendar.view import CalendarView

TODAY = date(2026, 3, 10)


class NoShuffle:
    """Keeps choices in dataset order so tests know which letter is which."""

    def shuffle(self, items):
        pass


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_calendar.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    init_db(tmp_db)
    return ProgressStore(tmp_db)


@pytest.fixture
def bundled():
    return load_bundled_content()


@pytest.fixture
def view(bundled, store):
    return CalendarView(bundled, store, today=TODAY, rng=NoShuffle())


@pytest.fixture
def tiny_content():
    months = [Month(1, "January", "Srinivasa Ramanujan", "Number Properties")]
    data = {1: [
        DayQuestion("Addition", "What is 1 + 1?", ("1", "2", "3"), "2"),
        DayQuestion("Subtraction", "What is 5 - 3?", ("2", "3"), "2"),
    ]}
    return ContentStore(months, data)
