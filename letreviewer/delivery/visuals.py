"""
Rich renderers for the study screens.

Each ``render_*`` function takes a view model from
``letreviewer.study.presentation`` and returns a rich renderable.
"""

from __future__ import annotations

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from letreviewer.study.presentation import (
    CardView,
    ChoiceState,
    CompletionView,
    HomeView,
    SetupView,
)

# =============================================================================
# COLOR THEME
# =============================================================================

THEME = {
    "primary": "#667EEA",  # Indigo - headers, selection
    "secondary": "#764BA2",  # Purple - borders
    "success": "#28A745",  # Green - correct answers
    "warning": "#FFC107",  # Amber - study-incorrect prompts
    "error": "#DC3545",  # Red - incorrect answers, fetch errors
    "dim": "#6C757D",  # Gray - secondary text
}

STYLES = {
    "primary": Style(color=THEME["primary"], bold=True),
    "success": Style(color=THEME["success"], bold=True),
    "warning": Style(color=THEME["warning"], bold=True),
    "error": Style(color=THEME["error"], bold=True),
    "dim": Style(color=THEME["dim"]),
}

CHOICE_STYLES = {
    ChoiceState.NEUTRAL: Style(),
    ChoiceState.SELECTED: STYLES["primary"],
    ChoiceState.CORRECT: STYLES["success"],
    ChoiceState.INCORRECT: STYLES["error"],
}

CHOICE_MARKERS = {
    ChoiceState.NEUTRAL: "  ",
    ChoiceState.SELECTED: "> ",
    ChoiceState.CORRECT: "+ ",
    ChoiceState.INCORRECT: "x ",
}

TITLE = "LET Reviewer"
TAGLINE = "Master your knowledge with interactive flashcards"


def render_home(view: HomeView) -> Panel:
    """Subject list with card counts, or the loading / error / empty notice."""
    if view.loading:
        body: Text | Table = Text("Loading flashcards...", style=STYLES["dim"])
    elif view.error:
        body = Text.assemble(
            ("Error Loading Cards\n", STYLES["error"]),
            view.error,
        )
    elif view.is_empty:
        body = Text(
            "No flashcards available. Please add some cards to your database first.",
            style=STYLES["warning"],
        )
    else:
        body = render_subject_table(view)

    return Panel(
        body,
        title=f"[bold]{TITLE}[/bold]",
        subtitle=f"[dim]{TAGLINE}[/dim]",
        border_style=THEME["secondary"],
    )


def render_subject_table(view: HomeView) -> Table:
    table = Table(box=box.SIMPLE_HEAVY, show_header=True, header_style=STYLES["primary"])
    table.add_column("#", justify="right", style=STYLES["dim"])
    table.add_column("Subject")
    table.add_column("Cards", justify="right")
    for index, subject in enumerate(view.subjects, start=1):
        table.add_row(str(index), subject.name, f"{subject.count} cards")
    return table


def render_setup(view: SetupView) -> Panel:
    """Subject, limit options and session summary."""
    options = Text()
    for option in view.options:
        style = STYLES["primary"] if option.selected else STYLES["dim"]
        options.append(f"[{option.label}] ", style=style)

    summary = Text.assemble(
        ("Subject: ", "bold"),
        f"{view.subject}\n",
        ("Cards to study: ", "bold"),
        f"{view.card_limit} out of {view.available_count}\n",
        ("Estimated time: ", "bold"),
        f"~{view.estimated_minutes} minutes",
    )

    return Panel(
        Group(
            Text(f"{view.available_count} cards available", style=STYLES["dim"]),
            Text(),
            Text("Number of Cards to Study", style="bold"),
            options,
            Text(f"Max: {view.available_count}", style=STYLES["dim"]),
            Text(),
            summary,
        ),
        title="[bold]Setup Study Session[/bold]",
        border_style=THEME["primary"],
    )


def render_card(view: CardView) -> Panel:
    """Question, numbered choices and, once revealed, the verdict."""
    lines = Text()
    for choice in view.choices:
        marker = CHOICE_MARKERS[choice.state]
        lines.append(f"{marker}{choice.number}. {choice.text}\n", style=CHOICE_STYLES[choice.state])

    parts: list[Text] = [Text(view.question, style="bold"), Text(), lines]
    if view.was_correct is True:
        parts.append(Text("Correct!", style=STYLES["success"]))
    elif view.was_correct is False:
        parts.append(Text("Incorrect.", style=STYLES["error"]))

    heading = view.subject if view.round == 1 else f"{view.subject} (incorrect, round {view.round})"
    progress = (
        f"Question {view.position} of {view.total}  |  "
        f"Score: {view.score_correct}/{view.score_answered}"
    )
    return Panel(
        Group(*parts),
        title=f"[bold]{heading}[/bold]",
        subtitle=f"[dim]{progress}[/dim]",
        border_style=THEME["primary"],
    )


def render_completion(view: CompletionView) -> Panel:
    """Final stats for a finished session."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold")
    table.add_column("Correct", justify="center", style=STYLES["success"])
    table.add_column("Incorrect", justify="center", style=STYLES["error"])
    table.add_column("Accuracy", justify="center", style=STYLES["primary"])
    accuracy = "-" if view.accuracy is None else f"{view.accuracy}%"
    table.add_row(str(view.correct), str(view.incorrect), accuracy)

    parts: list[Text | Table] = [table]
    if view.can_study_missed:
        parts.append(Text(f"{view.missed_count} cards to study again", style=STYLES["warning"]))

    return Panel(
        Group(*parts),
        title="[bold]Session Complete![/bold]",
        subtitle=f"[dim]{view.subject}[/dim]",
        border_style=THEME["success"],
    )
