"""Data classes for the calendar domain model."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Month:
    id: int
    name: str
    mathematician: str
    theme: str

    @property
    def short_name(self) -> str:
        return self.name[:3]


@dataclass(frozen=True)
class DayQuestion:
    topic: str
    question: str
    choices: tuple
    answer: str

    def __post_init__(self):
        if len(self.choices) < 2:
            raise ValueError("a question needs at least two choices")
        if len(set(self.choices)) != len(self.choices):
            raise ValueError("choices must be distinct")
        if self.answer not in self.choices:
            raise ValueError(f"answer {self.answer!r} is not one of the choices")

    def is_correct(self, choice: str) -> bool:
        return choice == self.answer


@dataclass(frozen=True)
class DayCell:
    day: int
    topic: str
    completed: bool = False
    today: bool = False


@dataclass(frozen=True)
class DerivedStats:
    completed: int
    total: int
    percent: int
    streak: int


class Outcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Ticket:
    """Identifies the opening a gateway request was issued for."""
    month_id: int
    day: int
    opening_id: int


@dataclass
class Opening:
    """One lifetime of the day-detail overlay."""
    month_id: int
    day: int
    opening_id: int
    question: DayQuestion
    choices: list
    locked: bool = False
    submitted: bool = False
    revealed: bool = False
    feedback: Optional[str] = None
    response: Optional[str] = None
    choice: Optional[str] = None

    @property
    def ticket(self) -> Ticket:
        return Ticket(self.month_id, self.day, self.opening_id)


@dataclass
class SubmissionResult:
    outcome: Outcome
    choice: str
    correct_answer: Optional[str] = None
    unlocked: list = field(default_factory=list)
    stats: Optional[DerivedStats] = None
