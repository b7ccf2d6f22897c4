"""CLI for lightpoint: offline extract / classify / layout commands."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lightpoint.classification import CaseClassifier
from lightpoint.core.config import AppSettings
from lightpoint.extraction import PatternExtractor
from lightpoint.layout import LayoutMapper, format_metric
from lightpoint.models import LayoutOptions

app = typer.Typer(name="lightpoint", help="HMRC complaint content extraction and classification")
console = Console()


def _read_text(path: Path) -> str:
    if not path.exists():
        raise typer.BadParameter(f"File not found: {path}")
    return path.read_text(encoding="utf-8")


def _emit(payload: str, output: Optional[Path]) -> None:
    if output:
        output.write_text(payload, encoding="utf-8")
        console.print(f"[green]Saved to {output}[/green]")
    else:
        console.print_json(payload)


@app.command()
def extract(
    text_file: Path = typer.Argument(..., help="Text or markdown file"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    output: Optional[Path] = typer.Option(None, help="Write JSON result to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Pull stats, quotes, lists, timeline, comparisons and key percentages from text."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    settings = AppSettings()
    result = PatternExtractor(settings.extraction).extract(_read_text(text_file))

    if as_json or output:
        _emit(result.model_dump_json(indent=2), output)
        return

    if result.is_empty():
        console.print("[yellow]No structured content found[/yellow]")
        return

    if result.stats:
        table = Table(title="Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Label", style="green")
        table.add_column("Raw")
        for stat in result.stats:
            table.add_row(format_metric(stat), stat.label, stat.raw)
        console.print(table)

    if result.quotes:
        table = Table(title="Quotes")
        table.add_column("Text", max_width=70)
        table.add_column("Attribution", style="green")
        for quote in result.quotes:
            table.add_row(quote.text, quote.attribution or "")
        console.print(table)

    if result.timeline:
        table = Table(title="Timeline")
        table.add_column("Date", style="cyan")
        table.add_column("Event", max_width=70)
        for entry in result.timeline:
            table.add_row(entry.date.isoformat(), entry.description)
        console.print(table)

    console.print(
        f"\n[bold]{len(result.stats)} stats, {len(result.quotes)} quotes, "
        f"{len(result.lists)} lists, {len(result.timeline)} timeline entries, "
        f"{len(result.comparisons)} comparisons, {len(result.key_percentages)} key percentages[/bold]"
    )


@app.command()
def classify(
    text_file: Path = typer.Argument(..., help="Case narrative file"),
    documents: list[Path] = typer.Option([], "--document", "-d", help="Extra document text files"),
    as_json: bool = typer.Option(False, "--json", help="Print the classification as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Classify a case as complaint, penalty appeal, mixed or escalation."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    settings = AppSettings()
    classifier = CaseClassifier(settings.classification)
    result = classifier.classify(_read_text(text_file), [_read_text(d) for d in documents])

    if as_json:
        console.print_json(result.model_dump_json(indent=2))
        return

    secondary = f" (+ {result.secondary_type.value})" if result.secondary_type else ""
    console.print(f"[bold]Type:[/bold] {result.primary_type.value}{secondary}")
    console.print(f"[bold]Confidence:[/bold] {result.confidence:.2f}")
    if result.low_confidence:
        console.print("[yellow]Low confidence: review before routing[/yellow]")
    console.print(f"[bold]Route to:[/bold] {result.routing.recipient_team} ({result.routing.pipeline} pipeline)")

    table = Table(title="Signals")
    table.add_column("Signal", style="cyan")
    table.add_column("Matched text")
    for evidence in result.signals:
        name, _, matched = evidence.partition(": ")
        table.add_row(name, matched)
    console.print(table)

    if result.penalty_details:
        details = result.penalty_details
        console.print("\n[bold]Penalty details[/bold]")
        console.print(f"  type: {details.penalty_type or '-'}  regime: {details.regime or '-'}")
        console.print(f"  amount: {details.amount if details.amount is not None else '-'}")
        console.print(f"  tax years: {', '.join(details.tax_years) or '-'}")
        console.print(f"  appeal deadline: {details.appeal_deadline or '-'}")


@app.command()
def layout(
    text_file: Path = typer.Argument(..., help="Article text or markdown file"),
    title: str = typer.Option("", help="Hero headline"),
    theme: Optional[str] = typer.Option(None, help="midnight, slate, ocean, professional or lightpoint"),
    output: Optional[Path] = typer.Option(None, help="Write layout JSON to this path"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Map extracted content to layout components (no images)."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    settings = AppSettings()
    text = _read_text(text_file)
    extraction = PatternExtractor(settings.extraction).extract(text)
    options = LayoutOptions(title=title, theme=theme, source_text=text)
    result = asyncio.run(LayoutMapper(settings.layout).map_to_layout(extraction, options))
    _emit(result.model_dump_json(indent=2), output)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Defaults to LIGHTPOINT_API_PORT"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("lightpoint.api.app:app", host=host, port=port or AppSettings().api.port)


if __name__ == "__main__":
    app()
