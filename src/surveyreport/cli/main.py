"""surveyreport CLI — thin Typer wrapper over library calls."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from surveyreport import __version__
from surveyreport.utils.loading import DocumentLoadError, load_document
from surveyreport.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="surveyreport",
    help="Schema-driven survey report resolution engine.",
    no_args_is_help=True,
)
console = Console()

OUTPUT_FORMATS = ("terminal", "markdown", "json")


def _load(path: Path) -> dict[str, Any]:
    try:
        return load_document(path)
    except DocumentLoadError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolver diagnostics"),
) -> None:
    """Schema-driven survey report resolution engine."""
    if verbose:
        configure_logging(logging.DEBUG)


@app.command()
def version() -> None:
    """Show surveyreport version."""
    console.print(f"surveyreport {__version__}")


@app.command()
def validate(document_file: Path = typer.Argument(..., help="Path to report document JSON")) -> None:
    """Validate the shape of a report document."""
    from pydantic import ValidationError

    from surveyreport.models.document import SurveyDocument
    from surveyreport.utils.hashing import hash_file

    data = _load(document_file)
    try:
        document = SurveyDocument.model_validate(data)
    except ValidationError as e:
        console.print(f"[red]Validation failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]Valid report document:[/green] {document_file}")
    console.print(f"  Survey: {document.metadata.survey_id or '-'}")
    console.print(f"  Language: {document.metadata.language or '-'}")
    console.print(f"  Sections: {len(document.sections)}")
    console.print(f"  Fingerprint: {hash_file(str(document_file))}")

    duplicates = document.duplicate_subsection_ids()
    if duplicates:
        console.print(
            f"[yellow]Subsection ids declared by more than one section:[/yellow] "
            f"{', '.join(duplicates)}"
        )


@app.command()
def sections(document_file: Path = typer.Argument(..., help="Path to report document JSON")) -> None:
    """List sections and the navigation order."""
    from surveyreport.locator.navigation import ordered_navigation_keys
    from surveyreport.locator.sections import first_subsection, get_sections, has_renderable_schema

    data = _load(document_file)

    table = Table(title="Sections")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("First subsection")
    table.add_column("Renderable", justify="center")

    for section in get_sections(data):
        renderable = has_renderable_schema(data, section["id"])
        table.add_row(
            escape(section["id"]),
            escape(str(section.get("name") or "")),
            escape(first_subsection(section, data) or "-"),
            "[green]yes[/green]" if renderable else "[red]no[/red]",
        )
    console.print(table)

    keys = ordered_navigation_keys(data)
    console.print(f"\n[bold]Navigation ({len(keys)} keys):[/bold]")
    for i, key in enumerate(keys, 1):
        console.print(f"  {i:3d}. {escape(key)}")


@app.command()
def locate(
    document_file: Path = typer.Argument(..., help="Path to report document JSON"),
    key: str = typer.Argument(..., help="Section id, subsection id or dynamic key"),
) -> None:
    """Show which section and subsection a navigation key resolves to."""
    from surveyreport.locator.navigation import next_key, previous_key
    from surveyreport.locator.sections import (
        extract_section_id,
        has_renderable_schema,
        normalize_active_key,
    )

    data = _load(document_file)
    normalized = normalize_active_key(data, key)
    section_id = extract_section_id(data, normalized)
    if section_id is None:
        console.print(f"[red]No section owns key {escape(key)}[/red]")
        raise typer.Exit(1)

    console.print(f"Section: [cyan]{escape(section_id)}[/cyan]")
    console.print(f"Key: {escape(normalized)}")
    console.print(f"Renderable: {'yes' if has_renderable_schema(data, section_id) else 'no'}")
    console.print(f"Previous: {escape(previous_key(data, normalized) or '-')}")
    console.print(f"Next: {escape(next_key(data, normalized) or '-')}")


@app.command()
def render(
    document_file: Path = typer.Argument(..., help="Path to report document JSON"),
    key: str = typer.Argument(..., help="Section id, subsection id or dynamic key"),
    format: str = typer.Option("terminal", "--format", "-f", help="Output format: terminal, markdown, json"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write output to file"),
) -> None:
    """Resolve and render the view for a navigation key."""
    from surveyreport.models.resolution import NotFoundResult
    from surveyreport.rendering.engine import SectionRenderer
    from surveyreport.reporting.renderer import ViewRenderer

    if format not in OUTPUT_FORMATS:
        choices = ", ".join(OUTPUT_FORMATS)
        console.print(f"[red]Unknown format {format}; choose from {choices}[/red]")
        raise typer.Exit(1)

    data = _load(document_file)
    engine = SectionRenderer(logger=get_logger("surveyreport.resolver"))
    result = engine.resolve_view(data, key)

    renderer = ViewRenderer()
    if format == "json":
        text = renderer.to_json(result)
    elif format == "markdown":
        text = renderer.to_markdown(result)
    else:
        text = renderer.to_terminal(result)

    if output:
        output.write_text(text)
        console.print(f"[green]View written to {output}[/green]")
    else:
        console.print(text, markup=False, highlight=False)

    if isinstance(result, NotFoundResult):
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
