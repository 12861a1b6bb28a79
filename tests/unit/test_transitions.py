"""
Unit tests for the pure study-machine transitions.
"""

import random

import pytest

from letreviewer.core.errors import EmptySubjectError, InvalidTransitionError
from letreviewer.study import transitions as t
from letreviewer.study.state import SessionStats, StudyState, View, accuracy_percent


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def setup_state(math_cards):
    """Setup screen for the three Math cards."""
    return t.enter_setup(StudyState(), "Math", math_cards)


@pytest.fixture
def studying(setup_state, rng):
    return t.start_session(setup_state, rng)


def answer(state, choice):
    state = t.select_choice(state, choice)
    return t.submit_answer(state)


def play(state, choices):
    """Answer each card with the given choice, advancing after each."""
    for choice in choices:
        state = t.advance(answer(state, choice))
    return state


class TestAccuracy:
    """Tests for accuracy_percent."""

    def test_seven_of_ten(self):
        assert accuracy_percent(7, 10) == 70

    def test_two_of_three_rounds_up(self):
        assert accuracy_percent(2, 3) == 67

    def test_half_rounds_up(self):
        assert accuracy_percent(1, 8) == 13

    def test_zero_total_is_undefined(self):
        assert accuracy_percent(0, 0) is None
        assert SessionStats().accuracy is None


class TestSetup:
    """Home -> Setup and the card limit."""

    def test_enter_setup_defaults_limit_to_available(self, setup_state, math_cards):
        assert setup_state.view is View.SETUP
        assert setup_state.config.subject == "Math"
        assert setup_state.config.card_limit == 3
        assert setup_state.config.available_cards == tuple(math_cards)

    def test_enter_setup_caps_default_at_twenty(self, card_factory):
        cards = [card_factory(f"c{i}") for i in range(45)]
        state = t.enter_setup(StudyState(), "Math", cards)
        assert state.config.card_limit == 20

    def test_enter_setup_custom_default(self, card_factory):
        cards = [card_factory(f"c{i}") for i in range(45)]
        state = t.enter_setup(StudyState(), "Math", cards, default_limit=30)
        assert state.config.card_limit == 30

    def test_empty_subject(self):
        with pytest.raises(EmptySubjectError, match="No cards found for subject: Art"):
            t.enter_setup(StudyState(), "Art", [])

    def test_enter_setup_only_from_home(self, setup_state, math_cards):
        with pytest.raises(InvalidTransitionError):
            t.enter_setup(setup_state, "Math", math_cards)

    @pytest.mark.parametrize(
        "requested, expected",
        [(0, 1), (-5, 1), (1, 1), (2, 2), (3, 3), (4, 3), (1000, 3)],
    )
    def test_set_card_limit_clamps(self, setup_state, requested, expected):
        state = t.set_card_limit(setup_state, requested)
        assert state.config.card_limit == expected

    def test_set_card_limit_outside_setup(self, studying):
        with pytest.raises(InvalidTransitionError):
            t.set_card_limit(studying, 2)

    def test_back_to_subjects(self, setup_state):
        state = t.back_to_subjects(setup_state)
        assert state.view is View.HOME
        assert state.config is None


class TestStartSession:
    """Setup -> Studying."""

    def test_session_shape(self, studying, math_cards):
        session = studying.session
        assert studying.view is View.STUDYING
        assert session.current_index == 0
        assert session.selected_choice is None
        assert session.revealed is False
        assert session.stats == SessionStats(correct=0, incorrect=0, total=3)
        assert session.missed == ()
        assert sorted(card.id for card in session.cards) == ["m1", "m2", "m3"]

    def test_limit_takes_prefix_of_shuffle(self, card_factory, rng):
        cards = [card_factory(f"c{i}") for i in range(30)]
        available_ids = {card.id for card in cards}
        state = t.enter_setup(StudyState(), "Math", cards)
        state = t.set_card_limit(state, 7)

        for _ in range(50):
            session = t.start_session(state, rng).session
            ids = [card.id for card in session.cards]
            assert len(ids) == 7
            assert len(set(ids)) == 7
            assert set(ids) <= available_ids

    def test_does_not_mutate_available_cards(self, setup_state, rng):
        before = setup_state.config.available_cards
        t.start_session(setup_state, rng)
        assert setup_state.config.available_cards == before

    def test_shuffle_reaches_every_ordering(self, card_factory):
        cards = [card_factory(f"c{i}") for i in range(3)]
        rng = random.Random(7)
        orderings = {tuple(c.id for c in t.shuffle_cards(cards, rng)) for _ in range(600)}
        assert len(orderings) == 6

    def test_start_outside_setup(self, rng):
        with pytest.raises(InvalidTransitionError):
            t.start_session(StudyState(), rng)


class TestAnswering:
    """select_choice / submit_answer / advance."""

    def test_select_overwrites(self, studying):
        state = t.select_choice(studying, "3")
        state = t.select_choice(state, "5")
        assert state.session.selected_choice == "5"

    def test_select_unknown_choice(self, studying):
        with pytest.raises(InvalidTransitionError):
            t.select_choice(studying, "not a choice")

    def test_submit_requires_selection(self, studying):
        with pytest.raises(InvalidTransitionError):
            t.submit_answer(studying)

    def test_correct_answer(self, studying):
        state = answer(studying, "4")
        assert state.session.revealed is True
        assert state.session.stats.correct == 1
        assert state.session.stats.incorrect == 0
        assert state.session.missed == ()

    def test_incorrect_answer_records_missed(self, studying):
        card = studying.session.current_card
        state = answer(studying, "3")
        assert state.session.stats.incorrect == 1
        assert state.session.missed == (card,)

    def test_select_after_submit_changes_nothing(self, studying):
        state = answer(studying, "3")
        with pytest.raises(InvalidTransitionError):
            t.select_choice(state, "4")
        assert state.session.selected_choice == "3"
        assert state.session.stats.incorrect == 1

    def test_submit_twice_is_rejected(self, studying):
        state = answer(studying, "3")
        with pytest.raises(InvalidTransitionError):
            t.submit_answer(state)

    def test_advance_requires_reveal(self, studying):
        with pytest.raises(InvalidTransitionError):
            t.advance(t.select_choice(studying, "4"))

    def test_advance_clears_selection(self, studying):
        state = t.advance(answer(studying, "4"))
        assert state.session.current_index == 1
        assert state.session.selected_choice is None
        assert state.session.revealed is False
        assert state.view is View.STUDYING

    def test_last_card_completes(self, studying):
        state = play(studying, ["4", "4", "4"])
        assert state.view is View.COMPLETED
        assert state.session.stats == SessionStats(correct=3, incorrect=0, total=3)

    def test_math_scenario(self, studying):
        second = studying.session.cards[1]
        state = play(studying, ["4", "3", "4"])

        stats = state.session.stats
        assert state.view is View.COMPLETED
        assert (stats.correct, stats.incorrect, stats.total) == (2, 1, 3)
        assert [card.id for card in state.session.missed] == [second.id]
        assert stats.accuracy == 67

    def test_stats_track_submissions(self, card_factory, rng):
        cards = [card_factory(f"c{i}") for i in range(10)]
        state = t.start_session(t.enter_setup(StudyState(), "Math", cards), rng)
        submitted = 0
        for choice in ["4", "3", "4", "5", "4", "4", "6", "4", "4", "4"]:
            state = answer(state, choice)
            submitted += 1
            stats = state.session.stats
            assert stats.correct + stats.incorrect == submitted
            assert stats.answered <= stats.total
            state = t.advance(state)
        assert state.session.stats.accuracy == 70
        assert state.session.stats.is_complete


class TestCompleted:
    """study_missed / restart / go_home."""

    def test_study_missed_with_none_missed_is_rejected(self, studying):
        done = play(studying, ["4", "4", "4"])
        with pytest.raises(InvalidTransitionError):
            t.study_missed(done)

    def test_study_missed_round(self, studying):
        done = play(studying, ["3", "4", "5"])
        missed = done.session.missed

        state = t.study_missed(done)

        assert state.view is View.STUDYING
        assert state.session.cards == missed
        assert state.session.stats == SessionStats(total=2)
        assert state.session.missed == ()
        assert state.session.round == 2
        assert state.session.current_index == 0

    def test_study_missed_ignores_card_limit(self, card_factory, rng):
        cards = [card_factory(f"c{i}") for i in range(5)]
        state = t.set_card_limit(t.enter_setup(StudyState(), "Math", cards), 5)
        done = play(t.start_session(state, rng), ["3"] * 5)
        done = t.study_missed(done)
        assert len(done.session.cards) == 5
        assert done.config.card_limit == 5

    def test_chained_remediation(self, studying):
        done = play(studying, ["3", "3", "4"])
        round_two = t.study_missed(done)
        first_missed = round_two.session.cards[0]

        done_two = play(round_two, ["3", "4"])
        assert done_two.session.missed == (first_missed,)

        round_three = t.study_missed(done_two)
        assert round_three.session.cards == (first_missed,)
        assert round_three.session.round == 3

    def test_restart_uses_original_setup(self, studying, rng):
        done = play(studying, ["3", "3", "4"])
        done = play(t.study_missed(done), ["4", "4"])

        state = t.restart(done, rng)

        assert state.view is View.STUDYING
        assert len(state.session.cards) == 3
        assert state.session.stats == SessionStats(total=3)
        assert state.session.round == 1
        assert state.session.selected_choice is None

    def test_restart_outside_completed(self, studying, rng):
        with pytest.raises(InvalidTransitionError):
            t.restart(studying, rng)

    def test_go_home_from_anywhere(self, setup_state, studying):
        for state in (StudyState(), setup_state, studying, play(studying, ["4", "4", "4"])):
            home = t.go_home(state)
            assert home.view is View.HOME
            assert home.config is None
            assert home.session is None


class TestFetchResults:
    """Catalog results folded into state."""

    def test_subjects_loaded(self, all_cards):
        state = t.subjects_loaded(t.begin_fetch(StudyState()), all_cards)
        assert [(s.name, s.count) for s in state.subjects] == [("Math", 3), ("History", 2)]
        assert state.loading is False
        assert state.error is None

    def test_fetch_failed_keeps_subjects(self, all_cards):
        loaded = t.subjects_loaded(StudyState(), all_cards)
        state = t.fetch_failed(t.begin_fetch(loaded), "Failed to load cards")
        assert state.subjects == loaded.subjects
        assert state.error == "Failed to load cards"
        assert state.loading is False
