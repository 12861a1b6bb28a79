"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from letreviewer.core.errors import TransportError
from letreviewer.core.models import Card


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_card(card_id: str, subject: str = "Math", answer: str = "4", choices=None) -> Card:
    """Build a card with sensible defaults."""
    return Card(
        id=card_id,
        subject=subject,
        question=f"Question {card_id}?",
        choices=tuple(choices or ["3", "4", "5", "6"]),
        answer=answer,
    )


class FakeCatalog:
    """In-memory stand-in for CardCatalogClient."""

    def __init__(self, cards=None, error=None):
        self.cards = list(cards or [])
        self.error = error
        self.fetch_all_calls = 0
        self.fetch_by_subject_calls: list[str] = []
        self.invalidations = 0
        self.closed = False

    async def fetch_all(self, use_cache: bool = True):
        self.fetch_all_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.cards)

    async def fetch_by_subject(self, subject: str):
        self.fetch_by_subject_calls.append(subject)
        if self.error is not None:
            raise self.error
        return [card for card in self.cards if card.subject == subject]

    def invalidate(self) -> None:
        self.invalidations += 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def math_cards():
    """Three Math cards; the answer to each is "4"."""
    return [make_card("m1"), make_card("m2"), make_card("m3")]


@pytest.fixture
def all_cards(math_cards):
    """Math cards plus two History cards."""
    return math_cards + [
        make_card("h1", subject="History", answer="1898", choices=["1896", "1898"]),
        make_card("h2", subject="History", answer="Rizal", choices=["Rizal", "Bonifacio"]),
    ]


@pytest.fixture
def fake_catalog(all_cards):
    return FakeCatalog(all_cards)


@pytest.fixture
def failing_catalog():
    return FakeCatalog(error=TransportError("Failed to load cards: Connection refused"))


@pytest.fixture
def sample_envelope():
    """API response body as served by the card backend."""
    return {
        "success": True,
        "data": [
            {
                "_id": "665f1c",
                "subject": "Math",
                "question": "What is 2 + 2?",
                "choices": ["3", "4", "5", "6"],
                "answer": "4",
            },
            {
                "_id": "665f1d",
                "subject": "Science",
                "question": "H2O is?",
                "choices": ["Water", "Salt"],
                "answer": "Water",
            },
            {
                "_id": "665f1e",
                "subject": "Math",
                "question": "What is 3 x 3?",
                "choices": ["6", "9"],
                "answer": "9",
            },
        ],
    }


@pytest.fixture
def card_factory():
    """Expose make_card to tests."""
    return make_card


@pytest.fixture
def catalog_factory():
    """Expose FakeCatalog to tests."""
    return FakeCatalog
