"""
Study Session Controller.

Owns the single ``StudyState`` of the app and applies the pure transitions
from ``transitions.py`` to it. Catalog fetches are the only suspending
operations; their failures are turned into ``state.error`` here and never
propagate to the caller.

Overlapping fetches (e.g. a double-pressed refresh) are resolved
last-write-wins per request kind: every fetch takes a generation number for
its kind (subject list or one subject's cards) and a result whose generation
is no longer current for that kind is dropped.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import Any, Callable, Protocol

from loguru import logger

from letreviewer.core.errors import (
    EmptySubjectError,
    InvalidTransitionError,
    LetReviewerError,
)
from letreviewer.core.models import Card
from letreviewer.study import transitions
from letreviewer.study.state import StudyState, View

# Request kinds with independent last-write-wins ordering
SUBJECT_LIST = "subjects"
SUBJECT_CARDS = "subject"


class CardCatalog(Protocol):
    """What the controller needs from the card catalog."""

    async def fetch_all(self, use_cache: bool = True) -> list[Card]:
        ...

    async def fetch_by_subject(self, subject: str) -> list[Card]:
        ...

    def invalidate(self) -> None:
        ...


class StudySessionController:
    """
    Drives the study machine for one front end.

    Synchronous actions (choice selection, submit, advance ...) are plain
    methods; actions that fetch cards are coroutines. Every action returns
    the resulting state. Actions that are invalid in the current state leave
    it unchanged.
    """

    def __init__(
        self,
        catalog: CardCatalog,
        default_card_limit: int = transitions.DEFAULT_CARD_LIMIT,
        rng: random.Random | None = None,
    ):
        self.catalog = catalog
        self.default_card_limit = default_card_limit
        self.rng = rng or random.Random()
        self._state = StudyState()
        self._generations: dict[str, int] = {SUBJECT_LIST: 0, SUBJECT_CARDS: 0}
        self._fetches_in_flight = 0

    @property
    def state(self) -> StudyState:
        return self._state

    @property
    def view(self) -> View:
        return self._state.view

    def _apply(self, transition: Callable[..., StudyState], *args: Any) -> StudyState:
        """Run a pure transition; invalid actions are logged no-ops."""
        try:
            self._state = transition(self._state, *args)
        except InvalidTransitionError as e:
            logger.debug(f"Ignored {e.action}: {e.reason}")
        return self._state

    # =========================================================================
    # Fetch bookkeeping
    # =========================================================================

    def _begin_fetch(self, kind: str) -> int:
        self._generations[kind] += 1
        self._fetches_in_flight += 1
        self._state = transitions.begin_fetch(self._state)
        return self._generations[kind]

    def _end_fetch(self, kind: str, generation: int) -> bool:
        """Finish a fetch; True when it is still the latest of its kind."""
        self._fetches_in_flight -= 1
        current = generation == self._generations[kind]
        if not current:
            logger.debug(f"Discarding superseded {kind} fetch #{generation}")
        return current

    def _finish_loading(self) -> None:
        """Keep ``loading`` set while any fetch is still outstanding."""
        loading = self._fetches_in_flight > 0
        if self._state.loading != loading:
            self._state = replace(self._state, loading=loading)

    # =========================================================================
    # Home
    # =========================================================================

    async def refresh(self) -> StudyState:
        """Reload the subject list from the full card set (also the retry action)."""
        self.catalog.invalidate()
        return await self._load_subjects()

    async def load(self) -> StudyState:
        """Load the subject list, using the catalog cache when it has one."""
        return await self._load_subjects()

    async def _load_subjects(self) -> StudyState:
        generation = self._begin_fetch(SUBJECT_LIST)
        try:
            cards = await self.catalog.fetch_all()
        except LetReviewerError as e:
            if self._end_fetch(SUBJECT_LIST, generation):
                logger.warning(f"Subject list fetch failed: {e}")
                self._state = transitions.fetch_failed(self._state, str(e))
            self._finish_loading()
            return self._state

        if self._end_fetch(SUBJECT_LIST, generation):
            self._state = transitions.subjects_loaded(self._state, cards)
            logger.debug(f"Loaded {len(self._state.subjects)} subjects")
        self._finish_loading()
        return self._state

    async def select_subject(self, subject: str) -> StudyState:
        """Fetch the subject's cards and open the setup screen."""
        if self._state.view is not View.HOME:
            logger.debug(f"Ignored select_subject from {self._state.view.value}")
            return self._state

        generation = self._begin_fetch(SUBJECT_CARDS)
        try:
            cards = await self.catalog.fetch_by_subject(subject)
        except LetReviewerError as e:
            if self._end_fetch(SUBJECT_CARDS, generation):
                logger.warning(f"Fetch for subject '{subject}' failed: {e}")
                self._state = transitions.fetch_failed(self._state, str(e))
            self._finish_loading()
            return self._state

        if not self._end_fetch(SUBJECT_CARDS, generation):
            self._finish_loading()
            return self._state
        # A later action may have left Home while this fetch was pending.
        if self._state.view is not View.HOME:
            self._finish_loading()
            return self._state

        try:
            self._state = transitions.enter_setup(
                self._state, subject, cards, self.default_card_limit
            )
        except EmptySubjectError as e:
            logger.info(str(e))
            self._state = transitions.fetch_failed(self._state, str(e))
        self._finish_loading()
        return self._state

    # =========================================================================
    # Setup
    # =========================================================================

    def set_card_limit(self, requested: int) -> StudyState:
        return self._apply(transitions.set_card_limit, requested)

    def start_session(self) -> StudyState:
        state = self._apply(transitions.start_session, self.rng)
        if state.view is View.STUDYING and state.session is not None:
            logger.debug(
                f"Session started: {state.session.subject} x{len(state.session.cards)}"
            )
        return state

    def back_to_subjects(self) -> StudyState:
        return self._apply(transitions.back_to_subjects)

    # =========================================================================
    # Studying
    # =========================================================================

    def select_choice(self, choice: str) -> StudyState:
        return self._apply(transitions.select_choice, choice)

    def submit_answer(self) -> StudyState:
        return self._apply(transitions.submit_answer)

    def advance(self) -> StudyState:
        state = self._apply(transitions.advance)
        if state.view is View.COMPLETED and state.session is not None:
            stats = state.session.stats
            logger.debug(
                f"Session complete: {stats.correct}/{stats.total} correct, "
                f"{len(state.session.missed)} missed"
            )
        return state

    # =========================================================================
    # Completed
    # =========================================================================

    def study_missed(self) -> StudyState:
        return self._apply(transitions.study_missed)

    def restart(self) -> StudyState:
        return self._apply(transitions.restart, self.rng)

    async def go_home(self) -> StudyState:
        """Abandon the current setup or session and reload subjects."""
        self._state = transitions.go_home(self._state)
        return await self.refresh()
