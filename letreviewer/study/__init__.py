"""
Study Session Module.

Provides:
- state: frozen records for the study machine (StudyState, Session, ...)
- transitions: pure state transitions (select, submit, advance, restart ...)
- controller: StudySessionController wiring transitions to the card catalog
- presentation: view models for front ends
"""

from letreviewer.study.controller import StudySessionController
from letreviewer.study.state import (
    Session,
    SessionConfig,
    SessionStats,
    StudyState,
    View,
    accuracy_percent,
)

__all__ = [
    "StudySessionController",
    "StudyState",
    "Session",
    "SessionConfig",
    "SessionStats",
    "View",
    "accuracy_percent",
]
