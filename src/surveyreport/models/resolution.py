"""Resolution result models — what the engine hands to the presentation layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from surveyreport.models.enums import NotFoundReason
from surveyreport.utils.timestamps import utc_now


class ResolvedComponent(BaseModel):
    """A component node with its data path and templates already resolved."""

    type: str
    index: float | None = None
    data: Any = None
    data_path: str | None = None
    title: str | None = None
    text: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    class_name: str | None = None
    text_class_name: str | None = None
    title_class_name: str | None = None
    components: list[ResolvedComponent] = Field(default_factory=list)
    truncated: bool = False
    props: dict[str, Any] = Field(
        default_factory=dict, description="Remaining declared fields, passed through untouched"
    )


class ResolvedView(BaseModel):
    """Fully resolved content for one navigation key."""

    active_key: str
    section_id: str
    section_name: str = ""
    subsection_id: str | None = None
    subsection_name: str | None = None
    subsection_icon: str | None = None
    subsection_summary: str | None = None
    available_subsections: list[str] = Field(default_factory=list)
    components: list[ResolvedComponent] = Field(default_factory=list)
    blocks: list[dict[str, Any]] = Field(default_factory=list)
    document_hash: str = ""
    generated_at: datetime = Field(default_factory=utc_now)


class NotFoundResult(BaseModel):
    """Navigation key that could not be resolved into a view."""

    attempted_key: str
    section_id: str | None = Field(None, description="Owning section, when partially resolved")
    reason: NotFoundReason = NotFoundReason.UNKNOWN_KEY
    available_subsections: list[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        if self.reason == NotFoundReason.SUBSECTION_NOT_FOUND:
            available = ", ".join(self.available_subsections) or "none"
            return (
                f"Subsection not found: {self.attempted_key} "
                f"(section {self.section_id}; available: {available})"
            )
        if self.reason == NotFoundReason.NO_SCHEMA:
            return f"Section {self.section_id} has no renderable schema"
        if self.reason == NotFoundReason.NO_DOCUMENT:
            return "No report document loaded"
        return f"Section not found: {self.attempted_key}"
