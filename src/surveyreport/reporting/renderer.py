"""View renderer — outputs a resolved view as JSON, markdown, or Rich terminal."""

from __future__ import annotations

import json
from typing import Any

from surveyreport.models.enums import BlockKind
from surveyreport.models.resolution import NotFoundResult, ResolvedView
from surveyreport.resolver.templates import stringify

Result = ResolvedView | NotFoundResult


def _cell(value: Any) -> str:
    return stringify(value).replace("|", "\\|").replace("\n", " ")


class ViewRenderer:
    """Renders resolved views (or not-found results) in multiple formats."""

    def to_json(self, result: Result, indent: int = 2) -> str:
        """Render result as JSON string."""
        return result.model_dump_json(indent=indent)

    def to_dict(self, result: Result) -> dict[str, Any]:
        """Render result as a dictionary."""
        return json.loads(result.model_dump_json())

    # ─── Markdown ──────────────────────────────────────────────────────

    def to_markdown(self, result: Result) -> str:
        """Render result as a markdown string."""
        if isinstance(result, NotFoundResult):
            return f"# Not found\n\n{result.message}\n"

        lines = []
        lines.append(f"# {result.section_name or result.section_id}")
        lines.append("")
        if result.subsection_name:
            lines.append(f"## {result.subsection_name}")
            lines.append("")
        if result.subsection_summary:
            lines.append(result.subsection_summary)
            lines.append("")
        lines.append(f"**Key:** {result.active_key}")
        lines.append(f"**Generated:** {result.generated_at.isoformat()}")
        lines.append("")

        for block in result.blocks:
            lines.extend(self._block_markdown(block))

        return "\n".join(lines)

    def _block_markdown(self, block: dict[str, Any]) -> list[str]:
        kind = block.get("kind")
        lines: list[str] = []

        if kind == BlockKind.HEADING:
            lines.append(f"{'#' * (block.get('level', 3))} {block['text']}")
            lines.append("")
        elif kind == BlockKind.PARAGRAPH:
            if block.get("title"):
                lines.append(f"**{block['title']}**")
                lines.append("")
            lines.append(block.get("text", ""))
            lines.append("")
        elif kind == BlockKind.CARD:
            if block.get("title"):
                lines.append(f"### {block['title']}")
                lines.append("")
            if block.get("text"):
                lines.append(block["text"])
                lines.append("")
        elif kind == BlockKind.TABLE:
            if block.get("title"):
                lines.append(f"**{block['title']}**")
                lines.append("")
            columns = block["columns"]
            lines.append("| " + " | ".join(_cell(c) for c in columns) + " |")
            lines.append("|" + "---|" * len(columns))
            for row in block["rows"]:
                lines.append("| " + " | ".join(_cell(v) for v in row) + " |")
            lines.append("")
        elif kind == BlockKind.CHART:
            title = f" {block['title']}" if block.get("title") else ""
            lines.append(f"_[{block['chart_type']}]{title} ({block['points']} data points)_")
            lines.append("")
        elif kind == BlockKind.WIDGET:
            title = f": {block['title']}" if block.get("title") else ""
            lines.append(f"_[{block['widget']}{title}]_")
            lines.append("")
        elif kind == BlockKind.ERROR:
            lines.append(f"> **Error in {block.get('type')}:** {block.get('message')}")
            lines.append("")
        elif kind == BlockKind.GROUP and block.get("title"):
            lines.append(f"**{block['title']}**")
            lines.append("")

        for child in block.get("children", []):
            lines.extend(self._block_markdown(child))
        if block.get("truncated"):
            lines.append("_(nested content truncated)_")
            lines.append("")
        return lines

    # ─── Terminal ──────────────────────────────────────────────────────

    def to_terminal(self, result: Result) -> str:
        """Render result for terminal output using Rich formatting."""
        from rich.console import Console
        from rich.markup import escape
        from rich.panel import Panel
        from rich.table import Table

        console = Console(record=True, width=100)

        if isinstance(result, NotFoundResult):
            console.print(Panel(f"[red]{escape(result.message)}[/red]", title="Not Found"))
            return console.export_text()

        header = f"[bold]{escape(result.section_name or result.section_id)}[/bold]"
        if result.subsection_name:
            header += f"\n{escape(result.subsection_name)}"
        header += f"\nKey: {escape(result.active_key)}"
        console.print(Panel(header, title="Survey Report"))

        if result.subsection_summary:
            console.print(escape(result.subsection_summary))
            console.print()

        def _print(block: dict[str, Any], depth: int = 0) -> None:
            indent = "  " * depth
            kind = block.get("kind")
            if kind == BlockKind.HEADING:
                console.print(f"{indent}[bold cyan]{escape(block['text'])}[/bold cyan]")
            elif kind == BlockKind.PARAGRAPH:
                if block.get("title"):
                    console.print(f"{indent}[bold]{escape(block['title'])}[/bold]")
                console.print(f"{indent}{escape(block.get('text', ''))}")
            elif kind == BlockKind.CARD:
                body = escape(block.get("text") or "")
                console.print(Panel(body, title=escape(block.get("title") or block["type"])))
            elif kind == BlockKind.TABLE:
                table = Table(title=escape(block["title"]) if block.get("title") else None)
                for column in block["columns"]:
                    table.add_column(escape(str(column)))
                for row in block["rows"]:
                    table.add_row(*(escape(cell) for cell in row))
                console.print(table)
            elif kind == BlockKind.CHART:
                console.print(
                    f"{indent}[magenta]{block['chart_type']}[/magenta] "
                    f"{escape(block.get('title') or '')} ({block['points']} data points)"
                )
            elif kind == BlockKind.WIDGET:
                title = escape(block.get("title") or "")
                console.print(f"{indent}[dim]<{block['widget']}>[/dim] {title}")
            elif kind == BlockKind.ERROR:
                message = escape(str(block.get("message")))
                console.print(f"{indent}[red]Error in {block.get('type')}: {message}[/red]")
            elif kind == BlockKind.GROUP and block.get("title"):
                console.print(f"{indent}[bold]{escape(block['title'])}[/bold]")

            for child in block.get("children", []):
                _print(child, depth + 1)
            if block.get("truncated"):
                console.print(f"{indent}[yellow](nested content truncated)[/yellow]")

        for block in result.blocks:
            _print(block)

        return console.export_text()
