"""
View models for front ends.

Turns a ``StudyState`` into plain records a renderer can draw without
knowing anything about fetches or transitions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from letreviewer.core.models import SubjectSummary
from letreviewer.study.state import StudyState, View, accuracy_percent

LIMIT_OPTIONS = (5, 10, 15, 20, 25, 30, 50)
ALL_OPTION_MAX = 100  # "All (N)" is only offered up to this many cards
MINUTES_PER_CARD = 0.5


class ChoiceState(str, Enum):
    """How a single choice should be drawn."""

    NEUTRAL = "neutral"
    SELECTED = "selected"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class HomeView:
    subjects: tuple[SubjectSummary, ...]
    loading: bool
    error: str | None

    @property
    def is_empty(self) -> bool:
        return not self.loading and self.error is None and not self.subjects


@dataclass(frozen=True)
class LimitOption:
    value: int
    label: str
    selected: bool


@dataclass(frozen=True)
class SetupView:
    subject: str
    available_count: int
    card_limit: int
    options: tuple[LimitOption, ...]
    estimated_minutes: int


@dataclass(frozen=True)
class ChoiceView:
    number: int  # 1-based, as shown to the user
    text: str
    state: ChoiceState


@dataclass(frozen=True)
class CardView:
    subject: str
    question: str
    choices: tuple[ChoiceView, ...]
    position: int  # 1-based
    total: int
    score_correct: int
    score_answered: int
    revealed: bool
    can_submit: bool
    completes_session: bool
    round: int
    was_correct: bool | None


@dataclass(frozen=True)
class CompletionView:
    subject: str
    correct: int
    incorrect: int
    total: int
    accuracy: int | None
    missed_count: int
    round: int

    @property
    def can_study_missed(self) -> bool:
        return self.missed_count > 0


def limit_options(available: int, current: int) -> tuple[LimitOption, ...]:
    """Preset session sizes that fit, plus "All (N)" for small subjects."""
    options = [
        LimitOption(value=value, label=str(value), selected=value == current)
        for value in LIMIT_OPTIONS
        if value <= available
    ]
    if available not in LIMIT_OPTIONS and available <= ALL_OPTION_MAX:
        options.append(
            LimitOption(value=available, label=f"All ({available})", selected=available == current)
        )
    return tuple(options)


def estimated_minutes(card_limit: int) -> int:
    return math.ceil(card_limit * MINUTES_PER_CARD)


def home_view(state: StudyState) -> HomeView:
    return HomeView(subjects=state.subjects, loading=state.loading, error=state.error)


def setup_view(state: StudyState) -> SetupView | None:
    if state.view is not View.SETUP or state.config is None:
        return None
    config = state.config
    return SetupView(
        subject=config.subject,
        available_count=config.available_count,
        card_limit=config.card_limit,
        options=limit_options(config.available_count, config.card_limit),
        estimated_minutes=estimated_minutes(config.card_limit),
    )


def choice_state(choice: str, selected: str | None, answer: str, revealed: bool) -> ChoiceState:
    """
    Visual state of one choice.

    Before reveal only the selection is marked. After reveal the answer is
    always marked correct and a wrong selection is marked incorrect.
    """
    if revealed:
        if choice == answer:
            return ChoiceState.CORRECT
        if choice == selected:
            return ChoiceState.INCORRECT
        return ChoiceState.NEUTRAL
    if choice == selected:
        return ChoiceState.SELECTED
    return ChoiceState.NEUTRAL


def card_view(state: StudyState) -> CardView | None:
    session = state.session
    if state.view is not View.STUDYING or session is None:
        return None
    card = session.current_card
    choices = tuple(
        ChoiceView(
            number=index,
            text=choice,
            state=choice_state(choice, session.selected_choice, card.answer, session.revealed),
        )
        for index, choice in enumerate(card.choices, start=1)
    )
    was_correct = None
    if session.revealed and session.selected_choice is not None:
        was_correct = card.is_correct(session.selected_choice)
    return CardView(
        subject=session.subject,
        question=card.question,
        choices=choices,
        position=session.current_index + 1,
        total=len(session.cards),
        score_correct=session.stats.correct,
        score_answered=session.current_index + (1 if session.revealed else 0),
        revealed=session.revealed,
        can_submit=not session.revealed and session.selected_choice is not None,
        completes_session=session.is_last_card,
        round=session.round,
        was_correct=was_correct,
    )


def completion_view(state: StudyState) -> CompletionView | None:
    session = state.session
    if state.view is not View.COMPLETED or session is None:
        return None
    stats = session.stats
    return CompletionView(
        subject=session.subject,
        correct=stats.correct,
        incorrect=stats.incorrect,
        total=stats.total,
        accuracy=accuracy_percent(stats.correct, stats.total),
        missed_count=len(session.missed),
        round=session.round,
    )
