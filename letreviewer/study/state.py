"""
Study session state records.

Every record is frozen; transitions in ``transitions.py`` build new records
with ``dataclasses.replace`` instead of mutating these.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from letreviewer.core.models import Card, SubjectSummary


class View(str, Enum):
    """Screen the study machine is on."""

    HOME = "home"
    SETUP = "setup"
    STUDYING = "study"
    COMPLETED = "complete"


def accuracy_percent(correct: int, total: int) -> int | None:
    """
    Percentage of correct answers, rounded half up.

    Returns None when ``total`` is zero, where accuracy is undefined.
    """
    if total <= 0:
        return None
    return math.floor(100 * correct / total + 0.5)


@dataclass(frozen=True)
class SessionStats:
    """Running score for one session."""

    correct: int = 0
    incorrect: int = 0
    total: int = 0

    @property
    def answered(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> int | None:
        return accuracy_percent(self.correct, self.total)

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.answered == self.total


@dataclass(frozen=True)
class SessionConfig:
    """Subject picked on the home screen and the number of cards to study."""

    subject: str
    available_cards: tuple[Card, ...]
    card_limit: int

    @property
    def available_count(self) -> int:
        return len(self.available_cards)


@dataclass(frozen=True)
class Session:
    """One pass over a sequence of cards."""

    subject: str
    cards: tuple[Card, ...]
    current_index: int = 0
    selected_choice: str | None = None
    revealed: bool = False
    stats: SessionStats = field(default_factory=SessionStats)
    missed: tuple[Card, ...] = ()
    round: int = 1  # 1 = fresh session, 2+ = study-incorrect rounds

    @property
    def current_card(self) -> Card:
        return self.cards[self.current_index]

    @property
    def is_last_card(self) -> bool:
        return self.current_index + 1 >= len(self.cards)

    @property
    def missed_ids(self) -> frozenset[str]:
        return frozenset(card.id for card in self.missed)

    @property
    def is_remediation(self) -> bool:
        return self.round > 1


@dataclass(frozen=True)
class StudyState:
    """Complete state of the study machine."""

    view: View = View.HOME
    subjects: tuple[SubjectSummary, ...] = ()
    config: SessionConfig | None = None
    session: Session | None = None
    loading: bool = False
    error: str | None = None
