"""
Card records as served by the card API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Card:
    """One multiple-choice flashcard."""

    id: str
    subject: str
    question: str
    choices: tuple[str, ...]
    answer: str

    def is_correct(self, choice: str) -> bool:
        """Exact string comparison against the stored answer."""
        return choice == self.answer

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Card:
        """
        Parse a card from an API record.

        The API is backed by a document store, so the identifier arrives as
        ``_id``; plain ``id`` is accepted as well.

        Raises:
            ValueError: If a required field is missing or the card is not
                answerable (fewer than two text choices, answer not matching
                exactly one of them).
        """
        if not isinstance(data, dict):
            raise ValueError(f"Card record must be an object, got {type(data).__name__}")

        card_id = data.get("_id", data.get("id"))
        if card_id is None or str(card_id) == "":
            raise ValueError("Card record has no id")

        for key in ("subject", "question", "answer"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Card '{card_id}' is missing '{key}'")

        raw_choices = data.get("choices")
        if not isinstance(raw_choices, list):
            raise ValueError(f"Card '{card_id}' has no choices list")
        if not all(isinstance(choice, str) for choice in raw_choices):
            raise ValueError(f"Card '{card_id}' has a choice that is not text")
        choices = tuple(raw_choices)
        if len(choices) < 2:
            raise ValueError(f"Card '{card_id}' needs at least two choices")
        if choices.count(data["answer"]) != 1:
            raise ValueError(f"Card '{card_id}' answer must match exactly one choice")

        return cls(
            id=str(card_id),
            subject=data["subject"],
            question=data["question"],
            choices=choices,
            answer=data["answer"],
        )


@dataclass(frozen=True)
class SubjectSummary:
    """Subject name with the number of cards filed under it."""

    name: str
    count: int
