"""
LET Reviewer: multiple-choice flashcard study client.

Fetches cards grouped by subject from a remote card API and drives a
study session (setup, questions, scoring, "study incorrect" rounds)
from the terminal.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
