"""
Card Catalog Client

Async HTTP client for the remote card API. The API answers every request
with the same envelope:

    {"success": true, "data": [Card, ...], "message": "optional"}

Usage:
    async with CardCatalogClient(settings.base_api_url) as catalog:
        cards = await catalog.fetch_all()
        subjects = summarize_subjects(cards)
        math_cards = await catalog.fetch_by_subject("Math")
"""

from __future__ import annotations

from typing import Any, Iterable

import httpx
from loguru import logger

from letreviewer.core.errors import DataError, TransportError
from letreviewer.core.models import Card, SubjectSummary

FETCH_ALL_FALLBACK = "Failed to load cards"
FETCH_SUBJECT_FALLBACK = "Failed to load cards for this subject"


def summarize_subjects(cards: Iterable[Card]) -> list[SubjectSummary]:
    """Group cards by subject and count them, in order of first appearance."""
    counts: dict[str, int] = {}
    for card in cards:
        counts[card.subject] = counts.get(card.subject, 0) + 1
    return [SubjectSummary(name=name, count=count) for name, count in counts.items()]


def _server_message(response: httpx.Response) -> str | None:
    """Pull the ``message`` field out of a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class CardCatalogClient:
    """HTTP client for the card storage API."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the catalog client.

        Args:
            base_url: Card endpoint, e.g. ``http://localhost:5000/api/cards``
            timeout_seconds: Request timeout
            transport: Optional httpx transport (used to stub the API)
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )
        self._all_cards: list[Card] | None = None

    async def __aenter__(self) -> "CardCatalogClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    # =========================================================================
    # Cache
    # =========================================================================

    @property
    def has_cache(self) -> bool:
        return self._all_cards is not None

    def invalidate(self) -> None:
        """Drop the cached full card set so the next fetch_all hits the API."""
        if self._all_cards is not None:
            logger.debug("Card cache invalidated")
        self._all_cards = None

    # =========================================================================
    # Fetching
    # =========================================================================

    async def fetch_all(self, use_cache: bool = True) -> list[Card]:
        """
        Fetch every card.

        Args:
            use_cache: Return the cached card set when one is held

        Returns:
            List of cards

        Raises:
            TransportError: API unreachable or non-2xx status
            DataError: Malformed body or ``success`` not true
        """
        if use_cache and self._all_cards is not None:
            return list(self._all_cards)

        cards = await self._get_cards(params=None, fallback=FETCH_ALL_FALLBACK)
        self._all_cards = cards
        logger.debug(f"Fetched {len(cards)} cards from {self.base_url}")
        return list(cards)

    async def fetch_by_subject(self, subject: str) -> list[Card]:
        """
        Fetch the cards filed under one subject.

        An empty list is a valid answer; the caller decides whether that is
        an error for the user.

        Raises:
            TransportError: API unreachable or non-2xx status
            DataError: Malformed body or ``success`` not true
        """
        cards = await self._get_cards(
            params={"subject": subject},
            fallback=FETCH_SUBJECT_FALLBACK,
        )
        # Only cards filed under the subject are returned.
        matching = [card for card in cards if card.subject == subject]
        if len(matching) != len(cards):
            logger.warning(
                f"Dropped {len(cards) - len(matching)} cards not filed under '{subject}'"
            )
        logger.debug(f"Fetched {len(matching)} cards for subject '{subject}'")
        return matching

    async def _get_cards(
        self,
        params: dict[str, str] | None,
        fallback: str,
    ) -> list[Card]:
        """GET the endpoint and unwrap the success envelope into cards."""
        try:
            response = await self.client.get(self.base_url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = _server_message(e.response) or f"{fallback} (HTTP {status})"
            logger.error(f"Card API returned {status}: {message}")
            raise TransportError(message, status_code=status) from e
        except httpx.RequestError as e:
            detail = str(e) or type(e).__name__
            logger.error(f"Connection error fetching cards: {detail}")
            raise TransportError(f"{fallback}: {detail}") from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error("Card API returned a non-JSON body")
            raise DataError(f"{fallback}: response was not valid JSON") from e

        if not isinstance(body, dict):
            raise DataError(f"{fallback}: unexpected response shape")

        if body.get("success") is not True:
            message = body.get("message") or fallback
            logger.warning(f"Card API reported failure: {message}")
            raise DataError(str(message))

        records = body.get("data")
        if not isinstance(records, list):
            raise DataError(f"{fallback}: response has no card list")

        return self._parse_cards(records)

    @staticmethod
    def _parse_cards(records: list[Any]) -> list[Card]:
        """Build cards, skipping records that cannot be studied."""
        cards: list[Card] = []
        seen_ids: set[str] = set()
        for record in records:
            try:
                card = Card.from_dict(record)
            except ValueError as e:
                logger.warning(f"Skipping card record: {e}")
                continue
            if card.id in seen_ids:
                logger.warning(f"Skipping duplicate card id: {card.id}")
                continue
            seen_ids.add(card.id)
            cards.append(card)
        return cards
