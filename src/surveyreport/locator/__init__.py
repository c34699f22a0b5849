"""Section locator: navigation keys to sections, subsections and neighbours."""

from surveyreport.locator.navigation import next_key, ordered_navigation_keys, previous_key
from surveyreport.locator.sections import (
    LocatedSection,
    extract_section_id,
    find_section,
    first_subsection,
    get_attributes,
    get_questions,
    has_renderable_schema,
    locate,
    normalize_active_key,
    visible_questions,
)

__all__ = [
    "LocatedSection",
    "extract_section_id",
    "find_section",
    "first_subsection",
    "get_attributes",
    "get_questions",
    "has_renderable_schema",
    "locate",
    "next_key",
    "normalize_active_key",
    "ordered_navigation_keys",
    "previous_key",
    "visible_questions",
]
