"""
Terminal rendering for LET Reviewer.

Components:
- visuals: rich panels and tables for the home, setup, study and completion screens
"""

from .visuals import (
    render_card,
    render_completion,
    render_home,
    render_setup,
)

__all__ = [
    "render_home",
    "render_setup",
    "render_card",
    "render_completion",
]
