"""Calendar session state: month browsing, the day overlay and answer submission."""
import logging
import random
from datetime import date

from math_calendar.content import ContentStore
from math_calendar.dashboard import evaluate_badges, get_derived_stats
from math_calendar.errors import ValidationError
from math_calendar.gateway import PromptContext, PromptKind, build_prompt
from math_calendar.models import (
    DayCell, DerivedStats, Opening, Outcome, SubmissionResult, Ticket,
)
from math_calendar.progress import ProgressStore

logger = logging.getLogger(__name__)

CORRECT_FEEDBACK = "🎉 Correct! Well done!"
WRONG_FEEDBACK = "Not quite! The answer is: {answer}"
LOCKED_FEEDBACK = "✓ Already completed!"
BADGE_FEEDBACK = "🏆 Badge Unlocked: {threshold} Problems Solved!"
PEEK_WARNING = (
    "🚦 Peek alert! If you view the answer now, this question won't count "
    "as completed until you solve it yourself."
)


class CalendarView:
    """Idle on a month, or showing one day's question.

    Every ``open_day`` starts a new opening with its own id. Gateway replies
    carry the ticket of the opening they were requested for and are dropped
    by ``deliver`` once that opening is gone.
    """

    def __init__(self, content: ContentStore, progress: ProgressStore,
                 today: date | None = None, rng: random.Random | None = None,
                 clock=date.today):
        self.content = content
        self.progress = progress
        self.fixed_today = today
        self.clock = clock
        self.rng = rng or random.Random()
        self.month_id = self.today.month
        self.opening: Opening | None = None
        self.openings = 0
        self.confirmed_reveal = False

    @property
    def today(self) -> date:
        """The injected date, or the clock read fresh on every call."""
        return self.fixed_today or self.clock()

    # --- month browsing ---

    def select_month(self, month_id: int) -> list:
        if self.content.get_month(month_id) is None:
            raise ValidationError(f"unknown month: {month_id}")
        self.close_day()
        self.month_id = month_id
        return self.month_grid(month_id)

    def next_month(self) -> list:
        return self.select_month(self.month_id % 12 + 1)

    def prev_month(self) -> list:
        return self.select_month((self.month_id - 2) % 12 + 1)

    def is_today(self, month_id: int, day: int) -> bool:
        return month_id == self.today.month and day == self.today.day

    def month_grid(self, month_id: int | None = None) -> list:
        """Leading ``None`` blanks for a Sunday-first week, then one DayCell per day."""
        month_id = month_id or self.month_id
        # weekday() is Monday=0; shift so Sunday starts the row
        offset = (date(self.today.year, month_id, 1).weekday() + 1) % 7
        cells = [None] * offset
        for day, q in enumerate(self.content.days_in(month_id), 1):
            cells.append(DayCell(
                day=day,
                topic=q.topic,
                completed=self.progress.get(month_id, day),
                today=self.is_today(month_id, day),
            ))
        return cells

    # --- day overlay ---

    def open_day(self, month_id: int, day: int) -> Opening | None:
        question = self.content.get_day(month_id, day)
        if question is None:
            return None
        self.openings += 1
        self.month_id = month_id
        self.confirmed_reveal = False
        choices = list(question.choices)
        self.rng.shuffle(choices)
        self.opening = Opening(
            month_id=month_id,
            day=day,
            opening_id=self.openings,
            question=question,
            choices=choices,
            locked=self.progress.get(month_id, day),
        )
        if self.opening.locked:
            self.opening.feedback = LOCKED_FEEDBACK
        return self.opening

    def close_day(self) -> None:
        self.opening = None
        self.confirmed_reveal = False

    def submit_choice(self, choice: str) -> SubmissionResult:
        opening = self.opening
        if opening is None or opening.submitted or opening.locked:
            return SubmissionResult(Outcome.REJECTED, choice)
        if choice not in opening.choices:
            return SubmissionResult(Outcome.REJECTED, choice)
        opening.submitted = True
        opening.choice = choice
        question = opening.question
        if not question.is_correct(choice):
            opening.feedback = WRONG_FEEDBACK.format(answer=question.answer)
            return SubmissionResult(Outcome.FAILURE, choice, correct_answer=question.answer)

        self.progress.set(opening.month_id, opening.day, True)
        unlocked = evaluate_badges(self.progress)
        lines = [CORRECT_FEEDBACK] + [BADGE_FEEDBACK.format(threshold=t) for t in unlocked]
        opening.feedback = "\n".join(lines)
        logger.debug("Completed %s-%s", opening.month_id, opening.day)
        return SubmissionResult(
            Outcome.SUCCESS, choice,
            correct_answer=question.answer,
            unlocked=unlocked,
            stats=self.stats(),
        )

    def stats(self) -> DerivedStats:
        return get_derived_stats(self.progress, self.content, self.today)

    # --- gateway requests ---

    def prompt_context(self) -> PromptContext:
        month = self.content.get_month(self.month_id)
        context = PromptContext(
            mathematician=month.mathematician if month else "",
            theme=month.theme if month else "",
        )
        if self.opening is None:
            return context
        q = self.opening.question
        return PromptContext(
            topic=q.topic, question=q.question, answer=q.answer,
            mathematician=context.mathematician, theme=context.theme,
        )

    def prompt_request(self, kind: PromptKind) -> tuple[Ticket, str] | None:
        """Ticket and prompt for a gateway call, or None if the call must wait.

        Every kind needs an open day. The first explanation of an opening
        waits for ``confirm_reveal``.
        """
        if self.opening is None:
            return None
        if kind is PromptKind.EXPLANATION and not self.confirmed_reveal:
            return None
        return self.opening.ticket, build_prompt(kind, self.prompt_context())

    def confirm_reveal(self) -> None:
        if self.opening is not None:
            self.confirmed_reveal = True
            self.opening.revealed = True

    def deliver(self, ticket: Ticket, text: str) -> bool:
        """Store a gateway reply if it still belongs to the current opening."""
        opening = self.opening
        if opening is None or opening.ticket != ticket:
            logger.debug("Dropping stale reply for %s", ticket)
            return False
        opening.response = text
        return True
