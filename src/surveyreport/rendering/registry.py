"""Component registry — maps a declared component type to its render routine.

A render routine takes a :class:`ResolvedComponent` and returns a plain block
dict that a presentation layer (terminal, markdown, web) can lay out without
knowing the document format.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from surveyreport.models.enums import BlockKind
from surveyreport.models.resolution import ResolvedComponent
from surveyreport.resolver.templates import stringify

logger = logging.getLogger(__name__)

Block = dict[str, Any]
Handler = Callable[[ResolvedComponent], Block | None]

CHART_HANDLER = "chart"

KNOWN_CHART_TYPES = frozenset({
    "barChart",
    "lineChart",
    "paretoChart",
    "scatterPlot",
    "histogram",
    "quadrantChart",
    "heatmap",
    "sankeyDiagram",
    "stackedBarMECE",
    "evolutionaryScorecard",
    "slopeGraph",
    "waterfallChart",
    "sentimentDivergentChart",
    "sentimentStackedChart",
    "sentimentThreeColorChart",
    "npsStackedChart",
})

CARD_TYPES = ("card", "npsScoreCard", "topCategoriesCards", "kpiCard")
TABLE_TYPES = (
    "recommendationsTable",
    "segmentationTable",
    "distributionTable",
    "sentimentTable",
    "npsDistributionTable",
    "npsTable",
    "sentimentImpactTable",
    "positiveCategoriesTable",
    "negativeCategoriesTable",
    "analyticalTable",
)
HEADING_TYPES = {"h3": 3, "h4": 4}
CONTAINER_TYPES = ("container", "grid-container")
WIDGET_TYPES = ("questionsList", "filterPills", "accordion", "wordCloud")


def is_chart_type(component_type: str) -> bool:
    """Chart types are listed explicitly or carry ``Chart`` in their name."""
    return component_type in KNOWN_CHART_TYPES or "Chart" in component_type


class ComponentRegistry:
    """Register, look up and dispatch component render routines."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, component_type: str, handler: Handler) -> None:
        """Register (or replace) the handler for a component type."""
        self._handlers[component_type] = handler

    def get(self, component_type: str) -> Handler | None:
        """Handler for a type, falling back to the chart handler for chart-like types."""
        handler = self._handlers.get(component_type)
        if handler is None and is_chart_type(component_type):
            handler = self._handlers.get(CHART_HANDLER)
        return handler

    def is_registered(self, component_type: str) -> bool:
        return self.get(component_type) is not None

    def registered_types(self) -> list[str]:
        return sorted(self._handlers)

    def render(self, component: ResolvedComponent) -> Block | None:
        """Dispatch a resolved component (and its children) to their handlers.

        Unknown types render as None. A handler that raises produces an
        ``error`` block instead of aborting the whole view.
        """
        handler = self.get(component.type)
        if handler is None:
            logger.warning("Unknown component type: %s", component.type or "none")
            return None

        try:
            block = handler(component)
        except Exception as exc:
            logger.exception("Render routine for '%s' failed", component.type)
            return {
                "kind": BlockKind.ERROR,
                "type": component.type,
                "message": f"{type(exc).__name__}: {exc}",
            }

        if block is None:
            return None

        if component.components and "children" not in block:
            block["children"] = self.render_all(component.components)
        if component.truncated:
            block["truncated"] = True
        return block

    def render_all(self, components: list[ResolvedComponent]) -> list[Block]:
        """Render a sibling list, dropping components that produce nothing."""
        blocks = []
        for component in components:
            block = self.render(component)
            if block is not None:
                blocks.append(block)
        return blocks

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, component_type: str) -> bool:
        return self.is_registered(component_type)


# ─── Default render routines ───────────────────────────────────────────


def _text_of(component: ResolvedComponent) -> str | None:
    if component.text:
        return component.text
    if isinstance(component.data, str) and component.data:
        return component.data
    return None


def render_text(component: ResolvedComponent) -> Block | None:
    text = _text_of(component)
    if text is None and not component.title:
        return None
    return {
        "kind": BlockKind.PARAGRAPH,
        "type": component.type,
        "title": component.title,
        "text": text or "",
    }


def render_heading(component: ResolvedComponent) -> Block | None:
    text = component.title or _text_of(component)
    if not text:
        return None
    return {
        "kind": BlockKind.HEADING,
        "type": component.type,
        "level": HEADING_TYPES.get(component.type, 3),
        "text": text,
    }


def render_card(component: ResolvedComponent) -> Block:
    return {
        "kind": BlockKind.CARD,
        "type": component.type,
        "title": component.title,
        "text": _text_of(component),
        "data": component.data if not isinstance(component.data, str) else None,
        "class_name": component.class_name,
        "text_class_name": component.text_class_name,
        "title_class_name": component.title_class_name,
    }


def _table_columns(component: ResolvedComponent, rows: list[Mapping[str, Any]]) -> list[dict[str, str]]:
    declared = component.config.get("columns")
    if isinstance(declared, list) and declared:
        columns = []
        for column in declared:
            if isinstance(column, Mapping) and "key" in column:
                columns.append({
                    "key": str(column["key"]),
                    "label": stringify(column.get("label", column["key"])),
                })
            elif isinstance(column, str):
                columns.append({"key": column, "label": column})
        if columns:
            return columns

    keys: list[str] = []
    for row in rows:
        for key in row:
            if key not in keys:
                keys.append(key)
    return [{"key": key, "label": key} for key in keys]


def render_table(component: ResolvedComponent) -> Block | None:
    """Tabulate list-of-record data; a plain mapping becomes a key/value table."""
    data = component.data
    if isinstance(data, Mapping):
        rows_data = data.get("rows") if isinstance(data.get("rows"), list) else None
        if rows_data is None:
            rows_data = [{"key": k, "value": v} for k, v in data.items()]
    elif isinstance(data, list):
        rows_data = data
    else:
        return None

    records = [row for row in rows_data if isinstance(row, Mapping)]
    if not records:
        return None

    columns = _table_columns(component, records)
    rows = [
        [stringify(row.get(col["key"], "")) for col in columns]
        for row in records
    ]
    return {
        "kind": BlockKind.TABLE,
        "type": component.type,
        "title": component.title,
        "columns": [col["label"] for col in columns],
        "rows": rows,
    }


def render_chart(component: ResolvedComponent) -> Block | None:
    if component.data is None:
        return None
    points = len(component.data) if isinstance(component.data, (list, Mapping)) else 1
    return {
        "kind": BlockKind.CHART,
        "type": component.type,
        "chart_type": component.type,
        "title": component.title,
        "points": points,
        "data": component.data,
        "config": dict(component.config),
    }


def render_container(component: ResolvedComponent) -> Block:
    return {
        "kind": BlockKind.GROUP,
        "type": component.type,
        "title": component.title,
        "layout": "grid" if component.type == "grid-container" else "stack",
        "columns": component.config.get("columns"),
    }


def render_widget(component: ResolvedComponent) -> Block:
    return {
        "kind": BlockKind.WIDGET,
        "type": component.type,
        "widget": component.type,
        "title": component.title,
        "data": component.data,
        "config": dict(component.config),
    }


def default_registry() -> ComponentRegistry:
    """Registry with render routines for every built-in component family."""
    registry = ComponentRegistry()
    registry.register(CHART_HANDLER, render_chart)
    for chart_type in KNOWN_CHART_TYPES:
        registry.register(chart_type, render_chart)
    for card_type in CARD_TYPES:
        registry.register(card_type, render_card)
    for table_type in TABLE_TYPES:
        registry.register(table_type, render_table)
    registry.register("text", render_text)
    for heading_type in HEADING_TYPES:
        registry.register(heading_type, render_heading)
    for container_type in CONTAINER_TYPES:
        registry.register(container_type, render_container)
    for widget_type in WIDGET_TYPES:
        registry.register(widget_type, render_widget)
    return registry
