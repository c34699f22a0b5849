"""Section locator — maps a navigation key onto the section and subsection it names."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from surveyreport.locator.formats import (
    ModernSubsections,
    declared_subsections,
    flat_render_schema,
    iter_declared_subsections,
    legacy_render_schema,
    sort_by_index,
)
from surveyreport.models.document import ATTRIBUTES_SECTION_ID, QUESTIONS_SECTION_IDS
from surveyreport.models.enums import NotFoundReason
from surveyreport.models.resolution import NotFoundResult
from surveyreport.resolver.paths import resolve_path
from surveyreport.resolver.templates import stringify

logger = logging.getLogger(__name__)

RESPONSES_KEY_PREFIX = "responses-"
ATTRIBUTES_KEY_PREFIX = "attributes-"


@dataclass
class LocatedSection:
    """A navigation key resolved to its owning section."""

    section_id: str
    active_key: str
    section: Mapping[str, Any]


# ─── Sections ──────────────────────────────────────────────────────────


def get_sections(document: Any) -> list[Mapping[str, Any]]:
    """All well-formed sections of a document, in input order."""
    if not isinstance(document, Mapping):
        return []
    sections = document.get("sections")
    if not isinstance(sections, list):
        return []
    return [s for s in sections if isinstance(s, Mapping) and isinstance(s.get("id"), str)]


def find_section(document: Any, section_id: str | None) -> Mapping[str, Any] | None:
    """Get a section by ID."""
    if not section_id:
        return None
    for section in get_sections(document):
        if section["id"] == section_id:
            return section
    return None


def is_questions_section(section: Mapping[str, Any] | None) -> bool:
    return isinstance(section, Mapping) and section.get("id") in QUESTIONS_SECTION_IDS


def is_attributes_section(section: Mapping[str, Any] | None) -> bool:
    return isinstance(section, Mapping) and section.get("id") == ATTRIBUTES_SECTION_ID


def find_questions_section(document: Any) -> Mapping[str, Any] | None:
    """The section holding per-question content (id ``responses`` or ``questions``)."""
    for section in get_sections(document):
        if section["id"] in QUESTIONS_SECTION_IDS:
            return section
    return None


def _subsection_ids(section: Mapping[str, Any]) -> list[str]:
    return [s["id"] for s in iter_declared_subsections(section) if isinstance(s.get("id"), str)]


def _key_part(value: Any) -> str:
    return stringify(value)


# ─── Questions & attributes ────────────────────────────────────────────


def _list_of_mappings(value: Any) -> list[Mapping[str, Any]] | None:
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, Mapping)]


def get_questions(document: Any) -> list[Mapping[str, Any]]:
    """Questions of the report, from whichever location the document uses.

    Looks at ``sections[responses|questions].questions`` first, then the
    legacy ``section.data.questions`` and ``section.data.responseDetails``
    locations, then a top-level ``responseDetails`` block.
    """
    section = find_questions_section(document)
    if section is not None:
        for path in ("questions", "data.questions", "data.responseDetails.questions"):
            questions = _list_of_mappings(resolve_path(section, path))
            if questions is not None:
                return questions

    if not isinstance(document, Mapping):
        return []

    details = document.get("responseDetails")
    if isinstance(details, Mapping):
        questions = _list_of_mappings(details.get("questions"))
        if questions is not None:
            return questions
        closed = _list_of_mappings(details.get("closedQuestions")) or []
        open_ = _list_of_mappings(details.get("openQuestions")) or []
        if closed or open_:
            return sort_by_index(closed + open_)

    return []


def hidden_question_ids(section: Mapping[str, Any] | None) -> list[Any]:
    """Question ids configured as hidden on the questions section."""
    if not isinstance(section, Mapping):
        return []
    hidden = resolve_path(section, "data.config.questions.hiddenIds", [])
    return hidden if isinstance(hidden, list) else []


def visible_questions(document: Any) -> list[Mapping[str, Any]]:
    """Questions minus hidden ids, ordered by index."""
    hidden = hidden_question_ids(find_questions_section(document))
    questions = [q for q in get_questions(document) if q.get("id") not in hidden]
    return sort_by_index(questions)


def get_attributes(document: Any) -> list[Mapping[str, Any]]:
    """Attribute records of the attributes section.

    Modern documents declare one ``attributes-<id>`` subsection per attribute;
    older ones keep the records under ``section.data.attributes`` or a
    top-level ``attributeDeepDive.attributes`` block.
    """
    section = find_section(document, ATTRIBUTES_SECTION_ID)
    if section is not None:
        records = [
            {
                **sub,
                "id": sub["id"][len(ATTRIBUTES_KEY_PREFIX):],
            }
            for sub in ModernSubsections().get_subsections(section) or []
            if isinstance(sub.get("id"), str) and sub["id"].startswith(ATTRIBUTES_KEY_PREFIX)
        ]
        if records:
            return sort_by_index(records)

        attributes = _list_of_mappings(resolve_path(section, "data.attributes"))
        if attributes:
            return attributes

    attributes = _list_of_mappings(resolve_path(document, "attributeDeepDive.attributes"))
    return attributes or []


def navigable_attributes(records: list[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Attribute records that appear in navigation (those with an icon)."""
    return sort_by_index([r for r in records if r.get("icon") and "id" in r])


def dynamic_records(
    section: Mapping[str, Any], document: Any | None
) -> list[Mapping[str, Any]]:
    """Question or attribute records a section turns into navigation keys."""
    if is_questions_section(section):
        questions = _list_of_mappings(section.get("questions")) or []
        if not questions and document is not None:
            questions = get_questions(document)
        hidden = hidden_question_ids(section)
        return sort_by_index([q for q in questions if "id" in q and q.get("id") not in hidden])

    if is_attributes_section(section) or section.get("dynamicSubsections"):
        records = _list_of_mappings(resolve_path(section, "data.attributes")) or []
        if not records and document is not None and is_attributes_section(section):
            records = get_attributes(document)
        return navigable_attributes(records)

    return []


def dynamic_subsection_keys(section: Mapping[str, Any], document: Any | None = None) -> list[str]:
    """Navigation keys synthesized from data for per-question/per-attribute sections.

    Questions become ``responses-<questionId>``; attribute-style records become
    ``<sectionId>-<attributeId>`` (``attributes-<id>`` for the attributes section).
    """
    if is_questions_section(section):
        prefix = RESPONSES_KEY_PREFIX
    else:
        prefix = f"{section.get('id')}-"
    return [f"{prefix}{_key_part(r['id'])}" for r in dynamic_records(section, document)]


def dynamic_record(
    section: Mapping[str, Any], key: str, document: Any | None = None
) -> Mapping[str, Any] | None:
    """The question/attribute record behind a dynamic navigation key."""
    records = dynamic_records(section, document)
    for record_key, record in zip(dynamic_subsection_keys(section, document), records):
        if record_key == key:
            return record
    return None


# ─── Locator ───────────────────────────────────────────────────────────


def extract_section_id(document: Any, active_key: str | None) -> str | None:
    """Determine which section owns a navigation key.

    Checks, first match wins: an exact section id; a declared subsection id
    (modern layout, then legacy renderSchema); a ``responses-``/``attributes-``
    key while such a section exists; then every hyphen-split prefix of the key,
    longest first, for a section that generates its subsections dynamically or
    declares a subsection matching the key (or the remaining suffix).

    Returns:
        The owning section id, or None
    """
    if not active_key or not isinstance(active_key, str):
        return None
    sections = get_sections(document)
    if not sections:
        return None

    for section in sections:
        if section["id"] == active_key:
            return active_key

    for section in sections:
        if active_key in _subsection_ids(section):
            return section["id"]

    if active_key.startswith(RESPONSES_KEY_PREFIX):
        questions_section = find_questions_section(document)
        if questions_section is not None:
            return questions_section["id"]
    if active_key.startswith(ATTRIBUTES_KEY_PREFIX):
        attributes_section = find_section(document, ATTRIBUTES_SECTION_ID)
        if attributes_section is not None:
            return attributes_section["id"]

    parts = active_key.split("-")
    for i in range(len(parts) - 1, 0, -1):
        candidate = "-".join(parts[:i])
        suffix = "-".join(parts[i:])
        section = find_section(document, candidate)
        if section is None:
            continue
        if section.get("dynamicSubsections") and suffix:
            return section["id"]
        declared = _subsection_ids(section)
        if active_key in declared or suffix in declared:
            return section["id"]

    return None


def first_subsection(section: Mapping[str, Any] | None, document: Any | None = None) -> str | None:
    """Pick the default subsection of a section.

    Priority: declared subsections by index (missing index sorts last, ties
    keep array order); legacy renderSchema subsections, same ordering; the
    first visible question of the questions section; the first attribute with
    an icon of an attributes-style section.

    Args:
        section: Section to inspect
        document: Full document, used to find questions/attributes stored
            outside the section by older layouts

    Returns:
        Subsection id / navigation key, or None when nothing is navigable
    """
    if not isinstance(section, Mapping):
        return None

    subsections = [s for s in declared_subsections(section) if "id" in s]
    if subsections:
        return _key_part(sort_by_index(subsections)[0]["id"])

    keys = dynamic_subsection_keys(section, document)
    return keys[0] if keys else None


def has_renderable_schema(document: Any, section_id: str | None) -> bool:
    """Decide whether a section can be rendered by the generic engine."""
    if not isinstance(document, Mapping) or not section_id:
        return False

    section = find_section(document, section_id)
    if section is not None:
        if is_questions_section(section) and get_questions(document):
            return True
        subsections = section.get("subsections")
        if isinstance(subsections, list) and subsections:
            return True
        components = section.get("components")
        if isinstance(components, list) and components:
            return True
        if section.get("hasSchema"):
            return True
        if legacy_render_schema(section) is not None:
            return True

    return flat_render_schema(document, section_id) is not None


def normalize_active_key(document: Any, active_key: str) -> str:
    """Turn a bare section id into its first subsection; pass other keys through."""
    for section in get_sections(document):
        if active_key in _subsection_ids(section):
            return active_key

    section = find_section(document, active_key)
    if section is not None:
        return first_subsection(section, document) or active_key
    return active_key


def locate(document: Any, active_key: str) -> LocatedSection | NotFoundResult:
    """Resolve a navigation key to a renderable section.

    Returns:
        LocatedSection, or NotFoundResult carrying the key and, when the
        section was found but is not renderable, its id
    """
    if not isinstance(document, Mapping):
        return NotFoundResult(attempted_key=active_key, reason=NotFoundReason.NO_DOCUMENT)

    normalized = normalize_active_key(document, active_key)
    section_id = extract_section_id(document, normalized)
    if section_id is None:
        logger.warning("No section owns navigation key '%s'", active_key)
        return NotFoundResult(attempted_key=active_key, reason=NotFoundReason.UNKNOWN_KEY)

    if not has_renderable_schema(document, section_id):
        logger.warning("Section '%s' has no renderable schema", section_id)
        return NotFoundResult(
            attempted_key=active_key, section_id=section_id, reason=NotFoundReason.NO_SCHEMA
        )

    return LocatedSection(
        section_id=section_id,
        active_key=normalized,
        section=find_section(document, section_id) or {},
    )
