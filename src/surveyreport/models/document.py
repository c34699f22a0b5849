"""Report document models — the shape of the survey JSON a dashboard renders."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from surveyreport.models.enums import SectionKind

QUESTIONS_SECTION_IDS = ("responses", "questions")
ATTRIBUTES_SECTION_ID = "attributes"


class _DocumentNode(BaseModel):
    """Base for document nodes: camelCase aliases, unknown fields kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class DocumentMetadata(_DocumentNode):
    """Report-level metadata block."""

    version: str = ""
    language: str = ""
    survey_id: str | None = Field(None, alias="surveyId")


class ComponentNode(_DocumentNode):
    """A single node of a declarative component tree."""

    type: str
    index: float | None = None
    data_path: str | None = Field(None, alias="dataPath")
    config: dict[str, Any] = Field(default_factory=dict)
    title: str | None = None
    text: str | None = None
    components: list[ComponentNode] = Field(default_factory=list)
    card_style_variant: str | None = Field(None, alias="cardStyleVariant")
    card_content_variant: str | None = Field(None, alias="cardContentVariant")
    title_style_variant: str | None = Field(None, alias="titleStyleVariant")


class Subsection(_DocumentNode):
    """Navigable child of a section. Ids are expected to be unique document-wide."""

    id: str
    index: float | None = None
    name: str = ""
    icon: str | None = None
    summary: str | None = None
    components: list[ComponentNode] | None = None
    data: dict[str, Any] | None = None


class Section(_DocumentNode):
    """Top-level report section."""

    id: str
    index: float | None = None
    name: str = ""
    icon: str | None = None
    subsections: list[Subsection] | None = None
    components: list[ComponentNode] | None = None
    questions: list[dict[str, Any]] | None = None
    data: dict[str, Any] | None = None
    data_path: str | None = Field(None, alias="dataPath")
    dynamic_subsections: bool = Field(False, alias="dynamicSubsections")
    has_schema: bool = Field(False, alias="hasSchema")
    is_route: bool = Field(False, alias="isRoute")

    @property
    def legacy_subsections(self) -> list[dict[str, Any]]:
        """Subsections declared under the legacy data.renderSchema wrapper."""
        schema = (self.data or {}).get("renderSchema")
        if isinstance(schema, dict) and isinstance(schema.get("subsections"), list):
            return schema["subsections"]
        return []

    @property
    def kind(self) -> SectionKind:
        """Classify the section by its primary render target."""
        if self.id in QUESTIONS_SECTION_IDS and self.questions:
            return SectionKind.QUESTIONS
        if self.subsections:
            return SectionKind.SUBSECTIONS
        if self.legacy_subsections:
            return SectionKind.LEGACY_SCHEMA
        if self.dynamic_subsections:
            return SectionKind.DYNAMIC
        if self.components:
            return SectionKind.COMPONENTS
        return SectionKind.EMPTY


class SurveyDocument(_DocumentNode):
    """Complete report document as loaded from JSON."""

    metadata: DocumentMetadata
    sections: list[Section] = Field(min_length=1)
    ui_texts: dict[str, Any] = Field(default_factory=dict, alias="uiTexts")
    survey_info: dict[str, Any] | None = Field(None, alias="surveyInfo")

    def get_section(self, section_id: str) -> Section | None:
        """Get a section by ID."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def duplicate_subsection_ids(self) -> list[str]:
        """Subsection ids declared by more than one section.

        Navigation resolves subsection ids by scanning every section, so a
        duplicate silently resolves to the first owner.
        """
        owners: dict[str, set[str]] = {}
        for section in self.sections:
            declared = [s.id for s in section.subsections or []]
            declared += [
                s["id"] for s in section.legacy_subsections
                if isinstance(s, dict) and isinstance(s.get("id"), str)
            ]
            for sub_id in declared:
                owners.setdefault(sub_id, set()).add(section.id)
        return sorted(sub_id for sub_id, sections in owners.items() if len(sections) > 1)
