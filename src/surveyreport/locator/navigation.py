"""Previous/next navigation over the report's sections and subsections."""

from __future__ import annotations

from typing import Any

from surveyreport.locator.formats import declared_subsections, sort_by_index
from surveyreport.locator.sections import (
    dynamic_subsection_keys,
    get_sections,
    is_attributes_section,
    is_questions_section,
    normalize_active_key,
)
from surveyreport.resolver.templates import stringify


def ordered_navigation_keys(document: Any) -> list[str]:
    """Flatten the document into the order a reader pages through it.

    Sections are taken by index (route-only sections are skipped). The
    responses and attributes sections contribute one key per visible
    question / navigable attribute; other sections contribute their declared
    subsections, minus template placeholders, or their own id when they have
    none.
    """
    keys: list[str] = []
    for section in sort_by_index(get_sections(document)):
        if section.get("isRoute"):
            continue

        subsections = [
            s for s in declared_subsections(section)
            if "id" in s and "template" not in stringify(s["id"])
        ]
        if subsections and not is_attributes_section(section):
            keys.extend(stringify(s["id"]) for s in sort_by_index(subsections))
            continue

        if is_questions_section(section) or is_attributes_section(section) or section.get(
            "dynamicSubsections"
        ):
            dynamic = dynamic_subsection_keys(section, document)
            if dynamic:
                keys.extend(dynamic)
                continue
            if subsections:
                keys.extend(stringify(s["id"]) for s in sort_by_index(subsections))
                continue

        keys.append(section["id"])

    return keys


def _neighbour(document: Any, key: str, step: int) -> str | None:
    keys = ordered_navigation_keys(document)
    current = normalize_active_key(document, key)
    if current not in keys:
        return None
    position = keys.index(current) + step
    if 0 <= position < len(keys):
        return keys[position]
    return None


def next_key(document: Any, key: str) -> str | None:
    """Key after ``key`` in reading order, or None at the end."""
    return _neighbour(document, key, 1)


def previous_key(document: Any, key: str) -> str | None:
    """Key before ``key`` in reading order, or None at the start."""
    return _neighbour(document, key, -1)
