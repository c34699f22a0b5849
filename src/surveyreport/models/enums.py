"""Shared enumerations for all surveyreport domain objects."""

from enum import StrEnum


class SectionKind(StrEnum):
    """Primary render target of a section, in the order it is checked."""

    QUESTIONS = "questions"
    SUBSECTIONS = "subsections"
    LEGACY_SCHEMA = "legacy_schema"
    DYNAMIC = "dynamic"
    COMPONENTS = "components"
    EMPTY = "empty"


class NotFoundReason(StrEnum):
    """Why a navigation key could not be turned into a view."""

    NO_DOCUMENT = "no_document"
    UNKNOWN_KEY = "unknown_key"
    NO_SCHEMA = "no_schema"
    SUBSECTION_NOT_FOUND = "subsection_not_found"


class StyleBucket(StrEnum):
    """Named style-variant buckets referenced from component nodes."""

    CARD = "card"
    CARD_CONTENT = "cardContent"
    CARD_TITLE = "cardTitle"


class BlockKind(StrEnum):
    """Kind of output block produced by a render routine."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CARD = "card"
    TABLE = "table"
    CHART = "chart"
    GROUP = "group"
    WIDGET = "widget"
    ERROR = "error"
