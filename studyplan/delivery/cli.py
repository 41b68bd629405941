"""
Study planner CLI.

A Rich terminal front-end over the planning core and a JSON state store.

Commands:
- studyplan plan       - Generate a study schedule from a subjects file
- studyplan review     - Record a flashcard response
- studyplan due        - List flashcards due for review
- studyplan complete   - Mark a scheduled session done and learn from it
- studyplan log        - Record an unscheduled study session
- studyplan recommend  - Predict session length and best time of day
"""
from __future__ import annotations

import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from studyplan.adaptive import OptimizerConfig, StudyTimeOptimizer
from studyplan.config import get_settings
from studyplan.delivery.state_store import JsonFileStore, StoreError
from studyplan.models import ScheduleEntry, TimeOfDay
from studyplan.planning import InvalidPlanningWindowError, PlannerConfig, SessionPlanner
from studyplan.review import SM2Config, SpacedRepetitionTracker
from studyplan.schemas import StudyMetricIn, load_flashcards, load_subjects

SCHEDULE_KEY = "schedule"

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="studyplan",
    help="Study planner: exam schedules and spaced repetition",
    no_args_is_help=True,
)
console = Console()

TIME_STYLES = {
    TimeOfDay.MORNING: "yellow",
    TimeOfDay.AFTERNOON: "cyan",
    TimeOfDay.EVENING: "magenta",
    TimeOfDay.DISTRIBUTED: "green",
}


def _store() -> JsonFileStore:
    return JsonFileStore(get_settings().data_dir)


def _fail(message: str) -> None:
    console.print(f"[bold red]{message}[/bold red]")
    raise typer.Exit(1)


def _load_schedule(store: JsonFileStore) -> list[ScheduleEntry]:
    return [ScheduleEntry.from_dict(item) for item in store.load(SCHEDULE_KEY) or []]


# =============================================================================
# Commands
# =============================================================================


@app.command()
def plan(
    subjects_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of subjects"),
    end: datetime = typer.Option(..., "--end", "-e", formats=["%Y-%m-%d"], help="Last day of the plan"),
    start: Optional[datetime] = typer.Option(
        None, "--start", "-s", formats=["%Y-%m-%d"], help="First day (default: today)"
    ),
    hours: Optional[float] = typer.Option(None, "--hours", "-h", min=0, help="Study hours per day"),
    time_of_day: Optional[TimeOfDay] = typer.Option(None, "--time", "-t", help="Session placement"),
    biased: bool = typer.Option(False, "--biased", help="Weight subjects by study history"),
) -> None:
    """Generate a study schedule and store it."""
    settings = get_settings()
    store = _store()

    try:
        subjects = load_subjects(subjects_file)
    except ValidationError as e:
        _fail(f"Invalid subjects file: {e}")

    weights = None
    if biased:
        optimizer = StudyTimeOptimizer.load(store, OptimizerConfig.from_settings(settings))
        weights = optimizer.planning_weights(subjects)

    planner = SessionPlanner(PlannerConfig.from_settings(settings))
    try:
        schedule = planner.generate(
            subjects,
            start.date() if start else date.today(),
            end.date(),
            hours if hours is not None else settings.daily_hours,
            time_of_day or settings.preferred_time_of_day,
            weights=weights,
        )
    except InvalidPlanningWindowError as e:
        _fail(str(e))

    try:
        store.save(SCHEDULE_KEY, [entry.to_dict() for entry in schedule])
    except StoreError as e:
        _fail(str(e))

    names = {subject.id: subject.name for subject in subjects}

    table = Table(title="Study Schedule")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Subject")
    table.add_column("Hours", justify="right")
    table.add_column("ID", style="dim")

    for entry in schedule:
        table.add_row(
            entry.date.strftime("%Y-%m-%d"),
            entry.date.strftime("%H:%M"),
            names.get(entry.subject_id, entry.subject_id),
            f"{entry.duration:g}",
            entry.id[:8],
        )

    console.print(table)

    budget = Table(show_header=False, box=None)
    budget.add_column("Subject", style="dim")
    budget.add_column("Hours", style="bold")
    for subject in subjects:
        budget.add_row(subject.name, f"{subject.time_to_spend:g}")
    console.print("\n[bold cyan]Hour Budget[/bold cyan]")
    console.print(budget)


@app.command()
def review(
    card_id: str = typer.Argument(..., help="Flashcard ID"),
    correct: bool = typer.Option(True, "--correct/--incorrect", help="Was the card recalled?"),
) -> None:
    """Record a flashcard response."""
    store = _store()
    tracker = SpacedRepetitionTracker.load(store, SM2Config.from_settings(get_settings()))
    state = tracker.record_response(card_id, correct)

    try:
        tracker.save(store)
    except StoreError as e:
        _fail(str(e))

    icon = "[green]✓[/green]" if correct else "[red]✗[/red]"
    console.print(
        f"{icon} {card_id}: next review {state.next_review:%Y-%m-%d} "
        f"(interval {state.interval}d, ease {state.ease_factor:.2f})"
    )


@app.command()
def due(
    cards_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of flashcards"),
    similar: bool = typer.Option(False, "--similar", help="Group similar cards using embeddings"),
) -> None:
    """List flashcards due for review."""
    try:
        cards_in = load_flashcards(cards_file)
    except ValidationError as e:
        _fail(f"Invalid cards file: {e}")

    tracker = SpacedRepetitionTracker.load(_store(), SM2Config.from_settings(get_settings()))

    embeddings = None
    if similar:
        if all(card.embedding is not None for card in cards_in):
            embeddings = [card.embedding for card in cards_in]
        else:
            console.print("[yellow]Not every card has an embedding; keeping file order[/yellow]")

    cards = [card.to_flashcard() for card in cards_in]
    due_cards = tracker.get_due_flashcards(cards, embeddings=embeddings)

    table = Table(title=f"Due Cards ({len(due_cards)}/{len(cards)})")
    table.add_column("ID")
    table.add_column("Question")
    table.add_column("Status")
    table.add_column("Difficulty", justify="right")

    for card in due_cards:
        status = "[yellow]due[/yellow]" if card.id in tracker else "[green]new[/green]"
        table.add_row(card.id, card.question, status, f"{tracker.get_difficulty(card.id):.2f}")

    console.print(table)


@app.command()
def complete(
    entry_id: str = typer.Argument(..., help="Schedule entry ID (or unique prefix)"),
    performance: float = typer.Option(..., "--performance", "-p", min=0, max=100),
    fatigue: float = typer.Option(..., "--fatigue", "-f", min=0, max=100),
) -> None:
    """Mark a scheduled session completed and record how it went."""
    settings = get_settings()
    store = _store()
    schedule = _load_schedule(store)

    matches = [entry for entry in schedule if entry.id.startswith(entry_id)]
    if len(matches) != 1:
        _fail(f"No unique schedule entry matches '{entry_id}'")

    optimizer = StudyTimeOptimizer.load(store, OptimizerConfig.from_settings(settings))
    metric = optimizer.record_session(matches[0], performance, fatigue)
    if metric is None:
        console.print("[yellow]Session was already completed[/yellow]")
        return

    try:
        optimizer.save(store)
        store.save(SCHEDULE_KEY, [entry.to_dict() for entry in schedule])
    except StoreError as e:
        _fail(str(e))

    console.print(f"[green]Recorded {metric.study_time:g}h of {metric.subject_id}[/green]")


@app.command()
def log(
    subject_id: str = typer.Argument(..., help="Subject ID"),
    hours: float = typer.Option(..., "--hours", "-h"),
    performance: float = typer.Option(..., "--performance", "-p"),
    fatigue: float = typer.Option(..., "--fatigue", "-f"),
    at: Optional[datetime] = typer.Option(None, "--at", help="When the session happened (default: now)"),
) -> None:
    """Record a study session that was not on the schedule."""
    try:
        metric = StudyMetricIn(
            subject_id=subject_id,
            study_time=hours,
            performance=performance,
            fatigue=fatigue,
            timestamp=at or datetime.now(),
        ).to_metric()
    except ValidationError as e:
        _fail(f"Invalid metric: {e}")

    store = _store()
    optimizer = StudyTimeOptimizer.load(store, OptimizerConfig.from_settings(get_settings()))
    optimizer.add_metric(metric)

    try:
        optimizer.save(store)
    except StoreError as e:
        _fail(str(e))

    console.print(f"[green]Logged {metric.study_time:g}h of {subject_id}[/green]")


@app.command()
def recommend(
    subject_id: str = typer.Argument(..., help="Subject ID"),
    difficulty: int = typer.Option(3, "--difficulty", "-d", min=1, max=5),
) -> None:
    """Predict the session length and the best time of day to study."""
    optimizer = StudyTimeOptimizer.load(_store(), OptimizerConfig.from_settings(get_settings()))

    duration = optimizer.predict_optimal_duration(subject_id, difficulty)
    best_time = optimizer.predict_best_time_of_day()
    color = TIME_STYLES[best_time]

    console.print(f"Suggested session: [bold]{duration:.1f}h[/bold]")
    console.print(f"Best time of day: [{color}]{best_time.value}[/{color}]")


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
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB")

    app()


if __name__ == "__main__":
    main()
