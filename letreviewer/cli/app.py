"""
LET Reviewer CLI - multiple-choice flashcards in the terminal.

Usage:
    letreviewer                      # Pick a subject and study
    letreviewer study Math           # Study a subject directly
    letreviewer study Math -n 10     # ... with 10 cards
    letreviewer subjects             # List subjects and card counts

The card API is read from BASE_API_URL (default http://localhost:5000/api/cards).
"""

from __future__ import annotations

import asyncio
import random
import sys
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Prompt

from config import Settings, get_settings
from letreviewer.core.catalog_client import CardCatalogClient, summarize_subjects
from letreviewer.core.errors import LetReviewerError
from letreviewer.delivery import visuals as ui
from letreviewer.study import presentation
from letreviewer.study.controller import CardCatalog, StudySessionController
from letreviewer.study.state import View

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="letreviewer",
    help="LET Reviewer - multiple-choice flashcards grouped by subject",
    invoke_without_command=True,
    rich_markup_mode="rich",
)

console = Console()

QUIT_INPUTS = {"q", "quit", "exit"}
ALL_INPUTS = {"a", "all"}


def _build_catalog(settings: Settings) -> CardCatalogClient:
    """Create the card API client from settings."""
    return CardCatalogClient(
        settings.base_api_url,
        timeout_seconds=settings.request_timeout_seconds,
    )


def _ask(message: str, default: str = "") -> str:
    return Prompt.ask(message, default=default, console=console, show_default=False).strip()


def _parse_int(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


# =============================================================================
# Study Loop
# =============================================================================


class StudyLoop:
    """Reads commands from the terminal and feeds them to the controller."""

    def __init__(
        self,
        controller: StudySessionController,
        subject: str | None = None,
        card_limit: int | None = None,
    ):
        self.controller = controller
        self._pending_subject = subject
        self._pending_limit = card_limit
        self._running = True

    async def run(self) -> None:
        await self.controller.load()
        while self._running:
            view = self.controller.view
            if view is View.HOME:
                await self._home()
            elif view is View.SETUP:
                self._setup()
            elif view is View.STUDYING:
                await self._study()
            else:
                await self._complete()

    def _stop(self) -> None:
        self._running = False

    async def _home(self) -> None:
        state = self.controller.state
        home = presentation.home_view(state)
        console.print(ui.render_home(home))

        if home.error or home.is_empty:
            # A failed subject pick is only fatal for a pre-selected subject.
            self._pending_subject = None
            raw = _ask("[bold]r[/bold] to try again, [bold]q[/bold] to quit", default="r").lower()
            if raw in QUIT_INPUTS:
                self._stop()
                return
            await self.controller.refresh()
            return

        if self._pending_subject is not None:
            subject, self._pending_subject = self._pending_subject, None
            await self.controller.select_subject(subject)
            return

        raw = _ask("Subject number ([bold]r[/bold] refresh, [bold]q[/bold] quit)")
        if raw.lower() in QUIT_INPUTS:
            self._stop()
            return
        if raw.lower() == "r":
            await self.controller.refresh()
            return

        index = _parse_int(raw)
        if index is None or not 1 <= index <= len(home.subjects):
            console.print(f"[yellow]Pick a number between 1 and {len(home.subjects)}[/yellow]")
            return
        await self.controller.select_subject(home.subjects[index - 1].name)

    def _setup(self) -> None:
        if self._pending_limit is not None:
            limit, self._pending_limit = self._pending_limit, None
            self.controller.set_card_limit(limit)
            self.controller.start_session()
            return

        setup = presentation.setup_view(self.controller.state)
        if setup is None:
            return
        console.print(ui.render_setup(setup))

        raw = _ask(
            "Cards to study ([bold]Enter[/bold] to start, [bold]b[/bold] back)",
            default=str(setup.card_limit),
        )
        if raw.lower() == "b":
            self.controller.back_to_subjects()
            return
        if raw.lower() in ALL_INPUTS:
            self.controller.set_card_limit(setup.available_count)
        else:
            limit = _parse_int(raw)
            if limit is None:
                console.print("[yellow]Enter a number of cards[/yellow]")
                return
            self.controller.set_card_limit(limit)
        self.controller.start_session()

    async def _study(self) -> None:
        card = presentation.card_view(self.controller.state)
        if card is None:
            return
        console.print(ui.render_card(card))

        if card.revealed:
            label = "Complete Session" if card.completes_session else "Next Question"
            raw = _ask(f"[bold]Enter[/bold] {label} ([bold]h[/bold] home)").lower()
            if raw == "h":
                await self.controller.go_home()
                return
            self.controller.advance()
            return

        raw = _ask(f"Your answer (1-{len(card.choices)}, [bold]h[/bold] home)").lower()
        if raw == "h":
            await self.controller.go_home()
            return
        number = _parse_int(raw)
        if number is None or not 1 <= number <= len(card.choices):
            console.print(f"[yellow]Pick a number between 1 and {len(card.choices)}[/yellow]")
            return
        self.controller.select_choice(card.choices[number - 1].text)
        self.controller.submit_answer()

    async def _complete(self) -> None:
        done = presentation.completion_view(self.controller.state)
        if done is None:
            return
        console.print(ui.render_completion(done))

        actions = "[bold]h[/bold] home, [bold]r[/bold] restart"
        if done.can_study_missed:
            actions += f", [bold]m[/bold] study incorrect ({done.missed_count})"
        raw = _ask(f"{actions}, [bold]q[/bold] quit").lower()

        if raw in QUIT_INPUTS:
            self._stop()
        elif raw == "h":
            await self.controller.go_home()
        elif raw == "r":
            self.controller.restart()
        elif raw == "m":
            self.controller.study_missed()
        else:
            console.print("[yellow]Pick one of the listed actions[/yellow]")


async def _run_study(
    catalog: CardCatalog,
    settings: Settings,
    subject: str | None,
    card_limit: int | None,
    seed: int | None,
) -> None:
    rng = random.Random(seed) if seed is not None else random.Random()
    controller = StudySessionController(
        catalog,
        default_card_limit=settings.default_card_limit,
        rng=rng,
    )
    await StudyLoop(controller, subject=subject, card_limit=card_limit).run()


async def _close_catalog(catalog: CardCatalog) -> None:
    close = getattr(catalog, "close", None)
    if close is not None:
        await close()


# =============================================================================
# Commands
# =============================================================================


@app.callback()
def default(ctx: typer.Context) -> None:
    """Study multiple-choice flashcards by subject."""
    if ctx.invoked_subcommand is None:
        study(subject=None, cards=None, seed=None)


@app.command()
def study(
    subject: Annotated[
        str | None, typer.Argument(help="Subject to study (skips the subject menu)")
    ] = None,
    cards: Annotated[
        int | None, typer.Option("--cards", "-n", help="Number of cards (skips setup)")
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Shuffle seed for a reproducible order")
    ] = None,
) -> None:
    """
    Start an interactive study session.

    Examples:
        letreviewer study                # Choose from the subject list
        letreviewer study Math           # Straight to setup for Math
        letreviewer study Math -n 10     # 10 Math cards, no setup screen
    """
    settings = get_settings()
    catalog = _build_catalog(settings)

    async def _session() -> None:
        try:
            await _run_study(
                catalog,
                settings,
                subject,
                cards,
                seed if seed is not None else settings.shuffle_seed,
            )
        finally:
            await _close_catalog(catalog)

    try:
        asyncio.run(_session())
    except (KeyboardInterrupt, EOFError):
        console.print("\n[dim]Session ended.[/dim]")


@app.command()
def subjects() -> None:
    """List subjects and how many cards each has."""
    settings = get_settings()
    catalog = _build_catalog(settings)

    async def _fetch():
        try:
            return await catalog.fetch_all()
        finally:
            await _close_catalog(catalog)

    try:
        all_cards = asyncio.run(_fetch())
    except LetReviewerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    home = presentation.HomeView(
        subjects=tuple(summarize_subjects(all_cards)),
        loading=False,
        error=None,
    )
    console.print(ui.render_home(home))


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
