"""Streak and badge threshold rules."""
import math
from datetime import date, timedelta

BADGE_THRESHOLDS = (10, 25, 50, 100, 200, 365)


def compute_streak(progress: dict, today: date, max_days: int = 365) -> int:
    """Count consecutive completed calendar days walking back from today.

    Args:
        progress: Mapping of (month, day) -> completed flag.
        today: The real-world date the walk starts from.
        max_days: How many days to look back at most.

    Returns:
        Number of completed days in the run. An unfinished today does not
        break the run; the first unfinished earlier day ends it.
    """
    streak = 0
    for i in range(max_days):
        check = today - timedelta(days=i)
        if progress.get((check.month, check.day)):
            streak += 1
        elif i > 0:
            break
    return streak


def compute_achievements(completed: int, previous_flags: dict,
                         thresholds: tuple = BADGE_THRESHOLDS) -> list[int]:
    """Return thresholds reached by ``completed`` that were not unlocked before, ascending."""
    return [t for t in sorted(thresholds) if completed >= t and not previous_flags.get(t)]


def completion_percent(completed: int, total: int) -> int:
    if total == 0:
        return 0
    # half-up, so 12.5 shows as 13
    return math.floor(completed / total * 100 + 0.5)
