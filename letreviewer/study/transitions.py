"""
Pure transitions of the study machine.

Each function takes the current ``StudyState`` (plus the action payload) and
returns the next one. Nothing here performs I/O; the controller feeds fetched
cards in and applies the result. An action that has no effect in the current
state raises ``InvalidTransitionError`` and the caller keeps the old state.

    Home --select subject--> Setup --start--> Studying --last card--> Completed
    Completed --restart / study missed--> Studying
    Setup | Studying | Completed --home--> Home
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Sequence

from letreviewer.core.catalog_client import summarize_subjects
from letreviewer.core.errors import EmptySubjectError, InvalidTransitionError
from letreviewer.core.models import Card
from letreviewer.study.state import Session, SessionConfig, SessionStats, StudyState, View

DEFAULT_CARD_LIMIT = 20


def _require_view(state: StudyState, action: str, *views: View) -> None:
    if state.view not in views:
        allowed = ", ".join(view.value for view in views)
        raise InvalidTransitionError(action, f"only valid in {allowed}, not {state.view.value}")


def _require_session(state: StudyState, action: str) -> Session:
    _require_view(state, action, View.STUDYING)
    if state.session is None:
        raise InvalidTransitionError(action, "no active session")
    return state.session


def clamp_card_limit(requested: int, available: int) -> int:
    """Clamp a requested card count into ``[1, available]``."""
    return min(max(requested, 1), max(available, 1))


def shuffle_cards(cards: Sequence[Card], rng: random.Random) -> list[Card]:
    """
    Return a uniformly shuffled copy of ``cards``.

    ``Random.shuffle`` is an in-place Fisher-Yates shuffle, so every
    ordering is equally likely.
    """
    deck = list(cards)
    rng.shuffle(deck)
    return deck


def _fresh_session(config: SessionConfig, rng: random.Random) -> Session:
    if config.card_limit < 1 or not config.available_cards:
        raise InvalidTransitionError("start_session", "no cards to study")
    deck = shuffle_cards(config.available_cards, rng)[: config.card_limit]
    return Session(
        subject=config.subject,
        cards=tuple(deck),
        stats=SessionStats(total=len(deck)),
    )


# =============================================================================
# Catalog results
# =============================================================================


def begin_fetch(state: StudyState) -> StudyState:
    """Mark a fetch in flight and clear any previous error."""
    return replace(state, loading=True, error=None)


def fetch_failed(state: StudyState, message: str) -> StudyState:
    """Record a failed fetch; everything else stays as it was."""
    return replace(state, loading=False, error=message)


def subjects_loaded(state: StudyState, cards: Sequence[Card]) -> StudyState:
    """Replace the subject list with counts derived from the full card set."""
    return replace(
        state,
        subjects=tuple(summarize_subjects(cards)),
        loading=False,
        error=None,
    )


# =============================================================================
# Setup
# =============================================================================


def enter_setup(
    state: StudyState,
    subject: str,
    cards: Sequence[Card],
    default_limit: int = DEFAULT_CARD_LIMIT,
) -> StudyState:
    """
    Home -> Setup with the cards fetched for ``subject``.

    Raises:
        EmptySubjectError: No cards came back for the subject.
        InvalidTransitionError: Not on the home screen.
    """
    _require_view(state, "select_subject", View.HOME)
    if not cards:
        raise EmptySubjectError(subject)
    config = SessionConfig(
        subject=subject,
        available_cards=tuple(cards),
        card_limit=clamp_card_limit(default_limit, len(cards)),
    )
    return replace(state, view=View.SETUP, config=config, session=None, loading=False, error=None)


def set_card_limit(state: StudyState, requested: int) -> StudyState:
    """Store ``requested`` clamped into ``[1, available]``; Setup only."""
    _require_view(state, "set_card_limit", View.SETUP)
    if state.config is None:
        raise InvalidTransitionError("set_card_limit", "no subject configured")
    limit = clamp_card_limit(requested, state.config.available_count)
    return replace(state, config=replace(state.config, card_limit=limit))


def start_session(state: StudyState, rng: random.Random) -> StudyState:
    """Setup -> Studying over a shuffled prefix of the available cards."""
    _require_view(state, "start_session", View.SETUP)
    if state.config is None:
        raise InvalidTransitionError("start_session", "no subject configured")
    session = _fresh_session(state.config, rng)
    return replace(state, view=View.STUDYING, session=session, error=None)


def back_to_subjects(state: StudyState) -> StudyState:
    """Setup -> Home, keeping the subject list already loaded."""
    _require_view(state, "back_to_subjects", View.SETUP)
    return replace(state, view=View.HOME, config=None, session=None)


# =============================================================================
# Studying
# =============================================================================


def select_choice(state: StudyState, choice: str) -> StudyState:
    """Mark ``choice`` as the pending answer; ignored once revealed."""
    session = _require_session(state, "select_choice")
    if session.revealed:
        raise InvalidTransitionError("select_choice", "answer already submitted")
    if choice not in session.current_card.choices:
        raise InvalidTransitionError("select_choice", f"'{choice}' is not a choice on this card")
    return replace(state, session=replace(session, selected_choice=choice))


def submit_answer(state: StudyState) -> StudyState:
    """Reveal the answer and score the selected choice."""
    session = _require_session(state, "submit_answer")
    if session.revealed:
        raise InvalidTransitionError("submit_answer", "answer already submitted")
    if session.selected_choice is None:
        raise InvalidTransitionError("submit_answer", "no choice selected")

    card = session.current_card
    stats = session.stats
    missed = session.missed
    if card.is_correct(session.selected_choice):
        stats = replace(stats, correct=stats.correct + 1)
    else:
        stats = replace(stats, incorrect=stats.incorrect + 1)
        if card.id not in session.missed_ids:
            missed = missed + (card,)

    return replace(state, session=replace(session, revealed=True, stats=stats, missed=missed))


def advance(state: StudyState) -> StudyState:
    """Move to the next card, or to Completed after the last one."""
    session = _require_session(state, "advance")
    if not session.revealed:
        raise InvalidTransitionError("advance", "answer not submitted yet")
    if session.is_last_card:
        return replace(state, view=View.COMPLETED)
    return replace(
        state,
        session=replace(
            session,
            current_index=session.current_index + 1,
            selected_choice=None,
            revealed=False,
        ),
    )


# =============================================================================
# Completed
# =============================================================================


def study_missed(state: StudyState) -> StudyState:
    """
    Completed -> Studying over every missed card, in the order missed.

    The round is never truncated to the configured card limit.
    """
    _require_view(state, "study_missed", View.COMPLETED)
    session = state.session
    if session is None or not session.missed:
        raise InvalidTransitionError("study_missed", "no missed cards")
    remediation = Session(
        subject=session.subject,
        cards=session.missed,
        stats=SessionStats(total=len(session.missed)),
        round=session.round + 1,
    )
    return replace(state, view=View.STUDYING, session=remediation, error=None)


def restart(state: StudyState, rng: random.Random) -> StudyState:
    """Completed -> Studying with a fresh shuffle of the original setup."""
    _require_view(state, "restart", View.COMPLETED)
    if state.config is None:
        raise InvalidTransitionError("restart", "no subject configured")
    session = _fresh_session(state.config, rng)
    return replace(state, view=View.STUDYING, session=session, error=None)


def go_home(state: StudyState) -> StudyState:
    """Any view -> Home, dropping the setup and session."""
    return replace(state, view=View.HOME, config=None, session=None, error=None)
