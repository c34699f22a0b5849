"""Document format adapters — where a section keeps its subsections.

Report documents have gone through several layouts. Each adapter knows one of
them; callers try ``DEFAULT_ADAPTERS`` in order so the locator itself never
has to know which layout a document uses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

MISSING_INDEX = 999


class SubsectionAdapter(ABC):
    """Reads the declared subsections of a section in one document layout."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name of the layout this adapter reads."""
        ...

    @abstractmethod
    def get_subsections(self, section: Mapping[str, Any]) -> list[Mapping[str, Any]] | None:
        """Subsections declared in this layout, or None if the layout is absent."""
        ...


class ModernSubsections(SubsectionAdapter):
    """Current layout: ``section.subsections[]``."""

    @property
    def name(self) -> str:
        return "subsections"

    def get_subsections(self, section: Mapping[str, Any]) -> list[Mapping[str, Any]] | None:
        return _mappings(section.get("subsections"))


class LegacyRenderSchema(SubsectionAdapter):
    """Older layout: ``section.data.renderSchema.subsections[]``."""

    @property
    def name(self) -> str:
        return "renderSchema"

    def get_subsections(self, section: Mapping[str, Any]) -> list[Mapping[str, Any]] | None:
        schema = legacy_render_schema(section)
        if schema is None:
            return None
        return _mappings(schema.get("subsections"))


DEFAULT_ADAPTERS: tuple[SubsectionAdapter, ...] = (ModernSubsections(), LegacyRenderSchema())


def _mappings(value: Any) -> list[Mapping[str, Any]] | None:
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, Mapping)]


def legacy_render_schema(section: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """The ``data.renderSchema`` wrapper of a section, if present."""
    data = section.get("data")
    if not isinstance(data, Mapping):
        return None
    schema = data.get("renderSchema")
    return schema if isinstance(schema, Mapping) else None


def legacy_components(section: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Components declared under ``data.renderSchema.components``."""
    schema = legacy_render_schema(section)
    if schema is None:
        return []
    return _mappings(schema.get("components")) or []


def flat_render_schema(document: Mapping[str, Any], section_id: str) -> Mapping[str, Any] | None:
    """Oldest layout: a top-level ``document[section_id].renderSchema``."""
    flat = document.get(section_id)
    if not isinstance(flat, Mapping):
        return None
    schema = flat.get("renderSchema")
    return schema if isinstance(schema, Mapping) else None


def iter_declared_subsections(
    section: Mapping[str, Any],
    adapters: Sequence[SubsectionAdapter] = DEFAULT_ADAPTERS,
) -> Iterator[Mapping[str, Any]]:
    """Yield the subsections of every layout, in adapter priority order."""
    for adapter in adapters:
        for subsection in adapter.get_subsections(section) or []:
            yield subsection


def declared_subsections(
    section: Mapping[str, Any],
    adapters: Sequence[SubsectionAdapter] = DEFAULT_ADAPTERS,
) -> list[Mapping[str, Any]]:
    """Subsections of the first layout that declares any."""
    for adapter in adapters:
        subsections = adapter.get_subsections(section)
        if subsections:
            return subsections
    return []


def index_of(item: Any) -> float:
    """Sort key for ``index`` fields; a missing or non-numeric index sorts last."""
    index = item.get("index") if isinstance(item, Mapping) else None
    if isinstance(index, bool) or not isinstance(index, (int, float)):
        return MISSING_INDEX
    return index


def sort_by_index(items: Sequence[Any]) -> list[Any]:
    """Stable sort by ``index`` (ties keep input order)."""
    return sorted(items, key=index_of)
