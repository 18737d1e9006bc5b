"""
Submission Grader CLI Application.

Provides a command-line interface for grading a submission stored as a
JSON file ({"questions": [...], "answers": {...}, "rubric": {...}}).
"""

import asyncio
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from submission_grader.config import get_settings
from submission_grader.grading import GradingEngine
from submission_grader.logging_config import configure_logging
from submission_grader.models import GradingResult
from submission_grader.submission import (
    SubmissionParseError,
    SubmissionParser,
    SubmissionValidator,
)

# Create Typer app
app = typer.Typer(
    name="submission-grader",
    help="Grade assessment submissions with rule-based and LLM grading",
    add_completion=False,
)

console = Console()
# Progress and log output, kept off stdout so `--json` output stays parseable
err_console = Console(stderr=True)


@app.command()
def grade(
    submission_file: Annotated[Path, typer.Argument(help="Path to the submission JSON file")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the grading result as JSON to this path"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the raw JSON result instead of tables"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show per-question feedback"),
    ] = False,
) -> None:
    """
    Grade a submission.

    Closed questions are scored locally; open questions are sent to the
    generative-text service, with partial-credit fallback if it fails.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1)

    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        request = SubmissionParser().parse_file(submission_file)
    except SubmissionParseError as e:
        console.print(f"[red]Submission Error:[/red] {e}")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
    ) as progress:
        progress.add_task(f"Grading {len(request.questions)} question(s)...", total=None)
        engine = GradingEngine(settings)
        result = asyncio.run(engine.grade(request))

    if as_json:
        console.print_json(result.to_json())
    else:
        _display_results(result, verbose)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.to_json(indent=2), encoding="utf-8")
        console.print(f"\n[green]Result saved to:[/green] {output}")


@app.command()
def check(
    submission_file: Annotated[Path, typer.Argument(help="Path to the submission JSON file")],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with an error if any issue is found"),
    ] = False,
) -> None:
    """
    Validate a submission file without grading it.

    Lists assessment data problems such as multiple-choice questions with no
    correct option.
    """
    try:
        request = SubmissionParser().parse_file(submission_file)
    except SubmissionParseError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Questions")
    table.add_column("ID", style="cyan")
    table.add_column("Kind")
    table.add_column("Marks", justify="right")
    table.add_column("Answered", justify="center")

    for question in request.questions:
        answered = "✓" if request.answer_for(question.id).strip() else "-"
        table.add_row(question.id, question.kind, str(question.marks), answered)

    console.print(table)
    console.print(f"\n[bold]Total Marks:[/bold] {request.max_score}")

    is_valid, issues = SubmissionValidator().validate(request)
    if is_valid:
        console.print("\n[green]✓ Submission is valid[/green]")
        return

    console.print("\n[yellow]⚠ Validation issues found:[/yellow]")
    for issue in issues:
        console.print(f"  • {issue}")

    if strict:
        raise typer.Exit(1)


@app.command()
def health() -> None:
    """
    Check if the generative-text service is reachable.

    Verifies API connectivity and configuration.
    """
    try:
        settings = get_settings()
        console.print("[bold]Submission Grader Health Check[/bold]\n")

        console.print("[dim]Checking configuration...[/dim]")
        console.print(f"  API Base URL: {settings.llm_base_url}")
        console.print(f"  Model: {settings.llm_model}")
        console.print(f"  Grading Timeout: {settings.grading_timeout:g}s")
        console.print(f"  Fallback Partial Credit: {settings.fallback_partial_credit:.0%}")

        console.print("\n[dim]Checking API connectivity...[/dim]")
        engine = GradingEngine(settings)
        reachable = asyncio.run(engine.health_check())
    except ValidationError as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1)

    if not reachable:
        console.print("[red]✗ API is not reachable[/red]")
        console.print("[dim]Open questions will be graded with partial-credit fallback.[/dim]")
        raise typer.Exit(1)

    console.print("[green]✓ API is reachable[/green]")
    console.print("\n[green]All systems operational[/green]")


def _display_results(result: GradingResult, verbose: bool = False) -> None:
    """Display grading results in a formatted table."""

    score_color = "green" if result.percentage >= 70 else "yellow" if result.percentage >= 50 else "red"
    console.print(
        Panel(
            f"[{score_color}][bold]{result.total_score} / {result.max_score}[/bold] "
            f"({result.percentage:.1f}%) Grade {result.grade_letter}[/{score_color}]",
            title="Final Score",
        )
    )

    if result.flagged_for_review:
        console.print(
            "[yellow]⚠ Some answers were graded with fallback credit and are pending manual review[/yellow]"
        )

    table = Table(title="Question Breakdown")
    table.add_column("Question", style="cyan")
    table.add_column("Score", justify="right")
    if verbose:
        table.add_column("Feedback")

    for question_id, entry in result.feedback.items():
        row = [question_id, str(entry.score)]
        if verbose:
            row.append(entry.feedback)
        table.add_row(*row)

    console.print(table)
    console.print(Panel(result.summary_feedback, title="Feedback"))


if __name__ == "__main__":
    app()
