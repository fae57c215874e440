"""Progress dashboard: derived stats and badge unlocks."""
import logging
from datetime import date

from math_calendar.content import ContentStore
from math_calendar.models import DerivedStats
from math_calendar.progress import ProgressStore
from math_calendar.streak import (
    BADGE_THRESHOLDS, compute_achievements, compute_streak, completion_percent,
)

logger = logging.getLogger(__name__)


def get_progress_label(percent: int) -> str:
    if percent >= 100:
        return "YEAR COMPLETE"
    elif percent >= 50:
        return "OVER HALFWAY"
    elif percent >= 10:
        return "ON YOUR WAY"
    return "JUST STARTING"


def get_progress_color(percent: int) -> str:
    if percent >= 100:
        return "magenta"
    elif percent >= 50:
        return "green"
    elif percent >= 10:
        return "yellow"
    return "cyan"


def get_derived_stats(store: ProgressStore, content: ContentStore, today: date) -> DerivedStats:
    completed = store.completed_count()
    total = content.total_count()
    return DerivedStats(
        completed=completed,
        total=total,
        percent=completion_percent(completed, total),
        streak=compute_streak(store.progress, today),
    )


def get_badges(store: ProgressStore, thresholds: tuple = BADGE_THRESHOLDS) -> dict[int, bool]:
    return {t: store.has_badge(t) for t in thresholds}


def evaluate_badges(store: ProgressStore, completed: int | None = None,
                    thresholds: tuple = BADGE_THRESHOLDS) -> list[int]:
    """Unlock and persist every newly reached threshold; return the ones unlocked now."""
    if completed is None:
        completed = store.completed_count()
    unlocked = compute_achievements(completed, get_badges(store, thresholds), thresholds)
    for threshold in unlocked:
        store.unlock_badge(threshold)
        logger.info("Badge unlocked: %s problems solved", threshold)
    return unlocked
