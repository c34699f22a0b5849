"""Generic section renderer — turns a navigation key into a resolved view.

The renderer walks the declarative component tree of the active subsection,
resolves every ``dataPath`` and ``{{template}}`` against a render context
derived from the document, and dispatches each node through the component
registry. The document itself is never modified.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from surveyreport.locator.formats import (
    ModernSubsections,
    declared_subsections,
    flat_render_schema,
    legacy_components,
    sort_by_index,
)
from surveyreport.locator.sections import (
    LocatedSection,
    dynamic_records,
    dynamic_subsection_keys,
    is_questions_section,
    locate,
)
from surveyreport.models.enums import NotFoundReason
from surveyreport.models.resolution import NotFoundResult, ResolvedComponent, ResolvedView
from surveyreport.rendering.registry import ComponentRegistry, default_registry
from surveyreport.rendering.styles import DEFAULT_MAX_DEPTH, StyleVariantRegistry
from surveyreport.resolver.paths import resolve_path
from surveyreport.resolver.templates import break_lines_after_period, resolve_template, stringify
from surveyreport.utils.hashing import hash_document

logger = logging.getLogger(__name__)

_NODE_FIELDS = frozenset({
    "type",
    "index",
    "data",
    "dataPath",
    "title",
    "text",
    "config",
    "components",
    "className",
    "textClassName",
    "titleClassName",
})


def _optional_str(value: Any) -> str | None:
    return None if value is None else stringify(value)


def questions_list_component() -> dict[str, Any]:
    """The component a single question (or the whole question list) renders as."""
    return {"type": "questionsList", "index": 0, "dataPath": "sectionData", "config": {}}


def should_show_component(node: Mapping[str, Any], context: Mapping[str, Any]) -> bool:
    """Hide question charts that have nothing to plot."""
    question = context.get("question")
    if not isinstance(question, Mapping):
        return True

    question_data = question.get("data")
    if node.get("type") == "barChart":
        return bool(question_data)
    if node.get("type") == "sentimentStackedChart":
        nested = question_data.get("sentimentData") if isinstance(question_data, Mapping) else None
        return bool(nested) or bool(question.get("sentimentData"))
    return True


def with_filter_pills(components: list[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Replace declared filter pills with one placed right before the first questions list."""
    kept = [c for c in components if c.get("type") != "filterPills"]
    position = next(
        (i for i, c in enumerate(kept) if c.get("type") == "questionsList"), None
    )
    if position is None:
        pills = {"type": "filterPills", "index": -1, "config": {}}
        return [pills, *kept]

    # Same index as the list it precedes; the stable sort keeps it in front.
    pills = {"type": "filterPills", "index": kept[position].get("index", -1), "config": {}}
    return [*kept[:position], pills, *kept[position:]]


class SectionRenderer:
    """Resolve report sections into views made of resolved components and blocks."""

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        styles: StyleVariantRegistry | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.styles = styles or StyleVariantRegistry()
        self.max_depth = max_depth
        self._logger = logger

    # ─── Section-level data ────────────────────────────────────────────

    def build_section_data(
        self, document: Mapping[str, Any], section: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Data exposed to components as ``sectionData``.

        Priority: subsection data keyed by id suffix (when every subsection id
        is ``<sectionId>-<suffix>``); the questions section's data merged with
        its questions; ``section.data``; the section's ``dataPath`` resolved
        against the document.
        """
        section_id = section.get("id")
        subsections = ModernSubsections().get_subsections(section) or []
        if subsections:
            prefix = f"{section_id}-"
            if all(isinstance(s.get("id"), str) and s["id"].startswith(prefix) for s in subsections):
                return {
                    s["id"][len(prefix):]: s["data"]
                    for s in subsections
                    if s.get("data")
                }

        data = section.get("data")
        if is_questions_section(section):
            merged = dict(data) if isinstance(data, Mapping) else {}
            questions = section.get("questions")
            if isinstance(questions, list):
                merged["questions"] = questions
            if merged:
                return merged

        if isinstance(data, Mapping):
            return dict(data)

        data_path = section.get("dataPath")
        if isinstance(data_path, str) and data_path:
            resolved = resolve_path(document, data_path)
            if isinstance(resolved, Mapping):
                return dict(resolved)
            if resolved:
                return {"value": resolved}

        return {}

    def build_subsections(
        self, document: Mapping[str, Any], section: Mapping[str, Any]
    ) -> list[dict[str, Any]]:
        """Navigable subsections of a section, declared or synthesized from data."""
        declared = declared_subsections(section)
        if declared:
            return [dict(s) for s in sort_by_index(declared)]

        records = dynamic_records(section, document)
        keys = dynamic_subsection_keys(section, document)
        section_components = section.get("components")
        if not isinstance(section_components, list):
            section_components = []

        if is_questions_section(section):
            return [
                {
                    "id": key,
                    "name": stringify(question.get("question", "")),
                    "index": question.get("index", 999),
                    "question": question,
                    "components": section_components or None,
                }
                for key, question in zip(keys, records)
            ]

        components = legacy_components(section) or section_components
        return [
            {
                "id": key,
                "name": stringify(record.get("name") or record.get("id")),
                "icon": record.get("icon"),
                "index": record.get("index", 999),
                "summary": record.get("summary"),
                "data": record,
                "components": components,
            }
            for key, record in zip(keys, records)
        ]

    def _section_components(
        self, document: Mapping[str, Any], section: Mapping[str, Any]
    ) -> list[Mapping[str, Any]]:
        components = section.get("components")
        if isinstance(components, list) and components:
            return [c for c in components if isinstance(c, Mapping)]
        legacy = legacy_components(section)
        if legacy:
            return legacy
        flat = flat_render_schema(document, section["id"])
        if flat is not None and isinstance(flat.get("components"), list):
            return [c for c in flat["components"] if isinstance(c, Mapping)]
        return []

    # ─── View resolution ───────────────────────────────────────────────

    def resolve_view(
        self, document: Mapping[str, Any] | None, active_key: str
    ) -> ResolvedView | NotFoundResult:
        """Resolve everything needed to display ``active_key``.

        Args:
            document: Report document (not modified)
            active_key: Bare section id, subsection id or dynamic key

        Returns:
            ResolvedView, or NotFoundResult when the key, the section's schema
            or the requested subsection cannot be found
        """
        located = locate(document, active_key)
        if isinstance(located, NotFoundResult):
            return located
        return self._resolve_located(document, located)

    def _resolve_located(
        self, document: Mapping[str, Any], located: LocatedSection
    ) -> ResolvedView | NotFoundResult:
        section = located.section
        section_id = located.section_id
        key = located.active_key
        questions_section = is_questions_section(section)

        subsections = self.build_subsections(document, section)
        available = [stringify(s.get("id")) for s in subsections]

        active: dict[str, Any] | None = None
        if key != section_id:
            active = next((s for s in subsections if stringify(s.get("id")) == key), None)
            if active is None and subsections:
                logger.warning(
                    "Subsection '%s' not found in section '%s' (available: %s)",
                    key, section_id, ", ".join(available),
                )
                return NotFoundResult(
                    attempted_key=key,
                    section_id=section_id,
                    reason=NotFoundReason.SUBSECTION_NOT_FOUND,
                    available_subsections=available,
                )

        if active is None:
            if questions_section and subsections:
                raw = [questions_list_component()]
            else:
                raw = self._section_components(document, section)
        elif questions_section and "question" in active:
            raw = [questions_list_component()]
        else:
            components = active.get("components")
            raw = [c for c in components or [] if isinstance(c, Mapping)]

        if questions_section:
            raw = with_filter_pills(raw)

        nodes = sort_by_index(raw)
        context = self.build_context(document, section, active)
        resolved = self.resolve_components(nodes, context)

        ui_context = {"uiTexts": context["uiTexts"]}
        return ResolvedView(
            active_key=key,
            section_id=section_id,
            section_name=self._template(section.get("name"), ui_context) or "",
            subsection_id=stringify(active["id"]) if active else None,
            subsection_name=self._template(active.get("name"), ui_context) if active else None,
            subsection_icon=stringify(active["icon"]) if active and active.get("icon") else None,
            subsection_summary=(
                break_lines_after_period(self._template(active.get("summary"), context))
                if active else None
            ),
            available_subsections=available,
            components=resolved,
            blocks=self.registry.render_all(resolved),
            document_hash=hash_document(document),
        )

    def build_context(
        self,
        document: Mapping[str, Any],
        section: Mapping[str, Any],
        active: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Render context: the document plus section data, texts and the active question."""
        context = dict(document)
        ui_texts = document.get("uiTexts")
        context["uiTexts"] = ui_texts if isinstance(ui_texts, Mapping) else {}
        context["sectionData"] = self.build_section_data(document, section)
        if active is not None:
            context["_activeSubsection"] = active
            if isinstance(active.get("question"), Mapping):
                context["question"] = active["question"]
        return context

    # ─── Component resolution ──────────────────────────────────────────

    def resolve_components(
        self, nodes: list[Mapping[str, Any]], context: Mapping[str, Any], depth: int = 1
    ) -> list[ResolvedComponent]:
        """Resolve a sibling list against ``context``; hidden nodes are dropped."""
        resolved = []
        for node in nodes:
            if not isinstance(node, Mapping) or not should_show_component(node, context):
                continue
            resolved.append(self.resolve_component(node, context, depth))
        return resolved

    def resolve_component(
        self, node: Mapping[str, Any], context: Mapping[str, Any], depth: int = 1
    ) -> ResolvedComponent:
        node = self.styles.enrich_node(node)
        data_path = node.get("dataPath")
        inline = node.get("data")
        if isinstance(data_path, str) and data_path:
            data = resolve_path(context, data_path, inline)
        else:
            data = inline

        text = self._template(node.get("text"), context)
        if node.get("type") == "text":
            text = break_lines_after_period(text)

        children: list[ResolvedComponent] = []
        truncated = False
        raw_children = node.get("components")
        if isinstance(raw_children, list) and raw_children:
            if depth >= self.max_depth:
                logger.warning(
                    "Component tree deeper than %d levels; children of '%s' dropped",
                    self.max_depth, node.get("type"),
                )
                truncated = True
            else:
                ordered = sort_by_index([c for c in raw_children if isinstance(c, Mapping)])
                children = self.resolve_components(ordered, context, depth + 1)

        index = node.get("index")
        config = node.get("config")
        return ResolvedComponent(
            type=stringify(node.get("type") or ""),
            index=index if isinstance(index, (int, float)) and not isinstance(index, bool) else None,
            data=copy.deepcopy(data),
            data_path=data_path if isinstance(data_path, str) else None,
            title=self._template(node.get("title"), context),
            text=text,
            config=copy.deepcopy(dict(config)) if isinstance(config, Mapping) else {},
            class_name=_optional_str(node.get("className")),
            text_class_name=_optional_str(node.get("textClassName")),
            title_class_name=_optional_str(node.get("titleClassName")),
            components=children,
            truncated=truncated,
            props=copy.deepcopy({k: v for k, v in node.items() if k not in _NODE_FIELDS}),
        )

    def _template(self, value: Any, context: Mapping[str, Any]) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            return stringify(value)
        return resolve_template(value, context, self._logger)


def resolve_view(
    document: Mapping[str, Any] | None, active_key: str
) -> ResolvedView | NotFoundResult:
    """Resolve a view with the default registry and style variants."""
    return SectionRenderer().resolve_view(document, active_key)
