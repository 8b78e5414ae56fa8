"""
Console rendering of analyses, fix batches and review reports.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from slidefix.fixes.normalizer import normalize
from slidefix.models import ApplyResult, Deck, LoopState, ReviewReport, StructuralAnalysis

SEVERITY_STYLES = {"high": "red", "medium": "yellow", "low": "blue"}

STATE_MESSAGES = {
    LoopState.CONVERGED: "No more improvements needed",
    LoopState.CAPPED: "Iteration limit reached",
    LoopState.USER_STOPPED: "Stopped at your request",
    LoopState.FAILED: "Stopped: the language model could not be reached",
}


def show_deck(console: Console, deck: Deck) -> None:
    table = Table(title=deck.title or "Untitled deck", show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Points", justify="right")
    for slide in deck.slides:
        table.add_row(str(slide.position), slide.title, str(len(slide.body)))
    console.print(table)
    console.print(
        f"{deck.slide_count} slides, ~{deck.estimated_duration()} min "
        f"(planned {deck.duration_minutes} min)"
    )


def show_analysis(console: Console, analysis: StructuralAnalysis, iteration: int = 1) -> None:
    if analysis.issues:
        table = Table(title=f"Issues found (iteration {iteration})")
        table.add_column("Severity")
        table.add_column("Category")
        table.add_column("Description")
        table.add_column("Slides")
        for issue in analysis.issues:
            style = SEVERITY_STYLES.get(issue.severity.lower(), "white")
            slides = ", ".join(str(p) for p in issue.affected_positions) or "Multiple"
            table.add_row(
                f"[{style}]{issue.severity.upper() or '-'}[/{style}]",
                issue.category.capitalize(),
                issue.description,
                slides,
            )
        console.print(table)

    if analysis.fixes:
        table = Table(title="Suggested fixes")
        table.add_column("#", justify="right")
        table.add_column("Type")
        table.add_column("Description")
        table.add_column("Position")
        for i, fix in enumerate(analysis.fixes, start=1):
            kind = normalize(fix.kind_label)
            style = "green" if kind.auto_applicable else "yellow"
            table.add_row(
                str(i),
                f"[{style}]{fix.kind_label or '-'}[/{style}]",
                fix.description,
                fix.position_descriptor or "-",
            )
        console.print(table)

    if analysis.overall_assessment:
        console.print(Panel(analysis.overall_assessment, title="Overall assessment"))


def show_apply_result(console: Console, result: ApplyResult) -> None:
    console.print(f"[green]Applied {result.applied} fixes[/green]")
    for description in result.skipped:
        console.print(f"[dim]Skipped (nothing to modify): {description}[/dim]")
    for failure in result.failures:
        console.print(f"[red]Failed to apply fix {failure.index}: {failure.error}[/red]")


def show_report(console: Console, report: ReviewReport) -> None:
    lines = [
        STATE_MESSAGES.get(report.state, report.state.value),
        f"Total fixes applied: {report.fixes_applied}",
        f"Iterations completed: {report.iterations}",
    ]
    if report.failures:
        lines.append(f"Fixes that failed: {len(report.failures)}")
    console.print(Panel("\n".join(lines), title="Review complete"))

    if report.guidance:
        console.print("[yellow]Needs manual action:[/yellow]")
        for message in report.guidance:
            console.print(f"  - {message}")

    if report.uninterpreted_response is not None:
        console.print("[yellow]Could not interpret the last response. Raw text:[/yellow]")
        console.print(report.uninterpreted_response, markup=False, highlight=False)
