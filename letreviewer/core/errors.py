"""
Error taxonomy for the study client.

Catalog failures (TransportError, DataError) are raised by the card client
and converted to a display message by the session controller. The state
machine errors (EmptySubjectError, InvalidTransitionError) are raised by the
pure transition functions and never reach the user as crashes.
"""

from __future__ import annotations


class LetReviewerError(Exception):
    """Base class for all client errors."""


class TransportError(LetReviewerError):
    """Card API unreachable, timed out, or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DataError(LetReviewerError):
    """Response body malformed or the envelope reported success=false."""


class EmptySubjectError(LetReviewerError):
    """A subject was selected but the catalog returned no cards for it."""

    def __init__(self, subject: str):
        super().__init__(f"No cards found for subject: {subject}")
        self.subject = subject


class InvalidTransitionError(LetReviewerError):
    """An action was invoked in a state where it has no effect."""

    def __init__(self, action: str, reason: str):
        super().__init__(f"{action}: {reason}")
        self.action = action
        self.reason = reason
